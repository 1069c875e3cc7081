"""Turn a validation batch into a go / no-go decision for safe output execution."""

from __future__ import annotations

import logging

from access_control.remediation import render_blocking, render_warning
from access_control.validator import BatchValidation

_logger = logging.getLogger(__name__)


class SafeOutputPermissionError(RuntimeError):
    """Raised when the token lacks permissions required by a requested operation."""

    def __init__(self, batch: BatchValidation, report: str) -> None:
        super().__init__(report)
        self.batch = batch
        self.report = report


def enforce_permissions(batch: BatchValidation, logger: logging.Logger | None = None) -> None:
    """Log degraded operations and raise if any operation is not authorized.

    ``logger`` defaults to this module's logger; handlers pass their own so
    reports land under their name.
    """
    log = logger or _logger
    warning = render_warning(batch.verdicts)
    if warning:
        log.warning(warning)

    if batch.probe_error:
        log.info(
            "Token probe failed, validated with no granted permissions",
            extra={"probe_error": batch.probe_error},
        )

    if batch.all_valid:
        return

    report = render_blocking(batch.verdicts, batch.family)
    log.error(
        "Blocking safe output execution: token missing required permissions",
        extra={
            "token_type": batch.family.value,
            "failed_operations": [v.operation_kind for v in batch.failed],
        },
    )
    raise SafeOutputPermissionError(batch, report)
