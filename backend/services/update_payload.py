"""
Shared update payload builder for issues, pull requests and discussions.

Every update handler funnels agent-provided items through
:func:`build_update_payload` so title/body allow-lists, body operation
resolution and state/status handling behave the same for every entity type.
Entity-specific fields (labels, assignees, base...) are opted into through
``NormalizerConfig.additional_fields``.

Items come from an untrusted agent. Their values are copied as data; nothing
in an item can turn a disabled field back on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from services.body_merge import BodyOperation

logger = logging.getLogger(__name__)


def _blank_to_none(value: Any) -> Any:
    # An empty operation falls through to the next default, like an absent one.
    if isinstance(value, str) and not value.strip():
        return None
    return value


OPERATION_KEY: str = "_operation"
RAW_BODY_KEY: str = "_rawBody"

NO_UPDATES_REASON: str = "No update fields provided or all fields are disabled"


class UpdateInstruction(BaseModel):
    """An ``update_*`` item as emitted by the agent.

    Unknown keys are kept (``model_extra``) but only reach the payload when
    listed in ``NormalizerConfig.additional_fields``.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    title: Optional[str] = None
    body: Optional[str] = None
    # Only read when a body update is applied; see _resolve_operation.
    operation: Optional[str] = None
    state: Optional[str] = None
    status: Optional[str] = None

    def has(self, name: str) -> bool:
        """True when the agent provided ``name``, even as an explicit null."""
        if name in type(self).model_fields:
            return name in self.model_fields_set
        return name in (self.model_extra or {})

    def value(self, name: str) -> Any:
        if name in type(self).model_fields:
            return getattr(self, name)
        return (self.model_extra or {}).get(name)


class FeatureToggle(BaseModel):
    """The safe-output handler config knobs that affect payload building.

    The surrounding handler config carries many other keys; they are ignored.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    allow_title: Optional[bool] = None
    allow_body: Optional[bool] = None
    default_operation: Optional[BodyOperation] = None

    normalize_operation = field_validator("default_operation", mode="before")(_blank_to_none)


@dataclass(frozen=True)
class NormalizerConfig:
    """Per-entity payload building rules."""

    default_operation: BodyOperation = BodyOperation.APPEND
    allow_title: bool = True
    allow_body: bool = True
    accept_state_and_status: bool = False
    additional_fields: tuple[str, ...] = ()
    require_at_least_one_update: bool = False


@dataclass(frozen=True)
class CanonicalPayload:
    """Normalized update data.

    ``data`` may hold the reserved ``_operation`` / ``_rawBody`` keys, which
    the execution step consumes before calling the API.
    """

    data: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    @property
    def operation(self) -> BodyOperation | None:
        return self.data.get(OPERATION_KEY)

    @property
    def raw_body(self) -> str | None:
        return self.data.get(RAW_BODY_KEY)

    @property
    def has_body_update(self) -> bool:
        return RAW_BODY_KEY in self.data

    def api_fields(self) -> dict[str, Any]:
        """Fields safe to send to the API as-is."""
        return {k: v for k, v in self.data.items() if k not in (OPERATION_KEY, RAW_BODY_KEY)}

    def to_dict(self) -> dict[str, Any]:
        return dict(self.data)


@dataclass(frozen=True)
class NoOpVerdict:
    """The item carried nothing to update. Callers report a skip, not an error."""

    reason: str = NO_UPDATES_REASON


PayloadResult = Union[CanonicalPayload, NoOpVerdict]


def _resolve_operation(
    requested: str | None,
    flags: FeatureToggle,
    rules: NormalizerConfig,
) -> BodyOperation:
    fallback = flags.default_operation or rules.default_operation
    requested = _blank_to_none(requested)
    if requested is None:
        return fallback
    try:
        return BodyOperation(requested)
    except ValueError:
        logger.warning(
            "Unknown body operation %r, using %s",
            requested,
            fallback.value,
            extra={"requested_operation": requested},
        )
        return fallback


def build_update_payload(
    instruction: UpdateInstruction | Mapping[str, Any],
    toggle: FeatureToggle | Mapping[str, Any] | None = None,
    config: NormalizerConfig | None = None,
) -> PayloadResult:
    """Build update payload data from an agent item.

    An unrecognized ``operation`` only matters when a body update is applied,
    and then falls back to the toggle or profile default.

    Args:
        instruction: The item (or its raw dict) containing update fields.
        toggle: Handler config (``allow_title``, ``allow_body``,
            ``default_operation``). Can only narrow what ``config`` allows.
        config: Entity payload rules.

    Returns:
        A CanonicalPayload, or a NoOpVerdict when updates are required and
        none were provided.

    Raises:
        pydantic.ValidationError: if the item or toggle is malformed.
    """
    item = instruction if isinstance(instruction, UpdateInstruction) else UpdateInstruction.model_validate(instruction)
    if toggle is None:
        flags = FeatureToggle()
    elif isinstance(toggle, FeatureToggle):
        flags = toggle
    else:
        flags = FeatureToggle.model_validate(toggle)
    rules = config or NormalizerConfig()

    can_update_title = rules.allow_title and flags.allow_title is not False
    can_update_body = rules.allow_body and flags.allow_body is not False

    data: dict[str, Any] = {}
    has_updates = False

    if can_update_title and item.has("title"):
        data["title"] = item.title
        has_updates = True

    if can_update_body and item.has("body"):
        data[OPERATION_KEY] = _resolve_operation(item.operation, flags, rules)
        data[RAW_BODY_KEY] = item.body
        has_updates = True

    # The item schema uses "status" (open/closed) while the API uses "state".
    if item.has("state"):
        data["state"] = item.state
        has_updates = True
    elif rules.accept_state_and_status and item.has("status"):
        data["state"] = item.status
        has_updates = True

    for field_name in rules.additional_fields:
        if item.has(field_name):
            data[field_name] = item.value(field_name)
            has_updates = True

    if rules.require_at_least_one_update and not has_updates:
        return NoOpVerdict()

    return CanonicalPayload(data)


# ---------------------------------------------------------------------------
# Entity profiles
# ---------------------------------------------------------------------------

ISSUE_UPDATE_PROFILE = NormalizerConfig(
    default_operation=BodyOperation.APPEND,
    accept_state_and_status=True,
    additional_fields=("labels", "assignees", "milestone"),
)

PULL_REQUEST_UPDATE_PROFILE = NormalizerConfig(
    default_operation=BodyOperation.REPLACE,
    additional_fields=("base",),
    require_at_least_one_update=True,
)

DISCUSSION_UPDATE_PROFILE = NormalizerConfig(
    default_operation=BodyOperation.REPLACE,
)

UPDATE_PROFILES: Mapping[str, NormalizerConfig] = MappingProxyType({
    "issue": ISSUE_UPDATE_PROFILE,
    "pull_request": PULL_REQUEST_UPDATE_PROFILE,
    "discussion": DISCUSSION_UPDATE_PROFILE,
})


def build_pull_request_update(
    instruction: UpdateInstruction | Mapping[str, Any],
    toggle: FeatureToggle | Mapping[str, Any] | None = None,
) -> PayloadResult:
    """Pull request flavour: also exposes the raw body as ``body``.

    Older pull request handlers read ``body`` directly, so it is kept next to
    the reserved keys.
    """
    result = build_update_payload(instruction, toggle, PULL_REQUEST_UPDATE_PROFILE)
    if isinstance(result, CanonicalPayload) and result.has_body_update:
        return CanonicalPayload({**result.data, "body": result.raw_body})
    return result


def build_entity_update(
    entity: str,
    instruction: UpdateInstruction | Mapping[str, Any],
    toggle: FeatureToggle | Mapping[str, Any] | None = None,
) -> PayloadResult:
    """Build a payload using the registered profile for ``entity``."""
    if entity == "pull_request":
        return build_pull_request_update(instruction, toggle)
    profile = UPDATE_PROFILES.get(entity)
    if profile is None:
        raise ValueError(f"Unknown update entity: {entity}")
    return build_update_payload(instruction, toggle, profile)
