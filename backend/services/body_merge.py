"""
Body merge operations for issue, pull request and discussion updates.

An agent never sends the final body directly. It sends new content plus an
operation, and the execution step combines that with the entity's current
body:

- replace: new content replaces the body
- append: new content goes after the current body
- prepend: new content goes before the current body
- replace-island: only the text between island markers is replaced, the rest
  of the body (human-written content) is left untouched
"""

from __future__ import annotations

import logging
import re
from enum import StrEnum

logger = logging.getLogger(__name__)


class BodyOperation(StrEnum):
    APPEND = "append"
    PREPEND = "prepend"
    REPLACE = "replace"
    REPLACE_ISLAND = "replace-island"


ISLAND_START: str = "<!-- safe-output-island:start{suffix} -->"
ISLAND_END: str = "<!-- safe-output-island:end{suffix} -->"


def _island_markers(run_id: str | int | None) -> tuple[str, str]:
    suffix = f":{run_id}" if run_id is not None else ""
    return ISLAND_START.format(suffix=suffix), ISLAND_END.format(suffix=suffix)


def _append(current: str, addition: str) -> str:
    # A blank current body is replaced outright; blank additions are still kept.
    if not current.strip():
        return addition
    if not addition:
        return current
    return f"{current.rstrip()}\n\n{addition}"


def _prepend(current: str, addition: str) -> str:
    if not current.strip():
        return addition
    if not addition:
        return current
    return f"{addition}\n\n{current}"


def _replace_island(current_body: str, new_content: str, run_id: str | int | None) -> str:
    start, end = _island_markers(run_id)
    island = f"{start}\n{new_content}\n{end}"
    pattern = re.compile(re.escape(start) + r".*?" + re.escape(end), re.DOTALL)
    if pattern.search(current_body):
        # Only the first island is rewritten; a lambda keeps backslashes in the content literal.
        return pattern.sub(lambda _match: island, current_body, count=1)
    logger.debug("No existing island found, appending a new one")
    return _append(current_body, island)


def merge_body(
    current_body: str | None,
    new_content: str,
    operation: BodyOperation | str,
    run_id: str | int | None = None,
) -> str:
    """Combine ``new_content`` with ``current_body`` according to ``operation``.

    Raises:
        ValueError: if ``operation`` is not a known body operation.
    """
    try:
        op = BodyOperation(operation)
    except ValueError as exc:
        raise ValueError(f"Unknown body operation: {operation}") from exc

    current = current_body or ""
    if op == BodyOperation.REPLACE:
        return new_content
    if op == BodyOperation.APPEND:
        return _append(current, new_content)
    if op == BodyOperation.PREPEND:
        return _prepend(current, new_content)
    return _replace_island(current, new_content, run_id)
