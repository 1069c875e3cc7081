import pytest

from services.body_merge import BodyOperation, merge_body


def test_replace_discards_current_body() -> None:
    assert merge_body("old text", "new text", "replace") == "new text"


def test_append_and_prepend_separate_with_blank_line() -> None:
    assert merge_body("Original\n", "Added", BodyOperation.APPEND) == "Original\n\nAdded"
    assert merge_body("Original", "Added", BodyOperation.PREPEND) == "Added\n\nOriginal"


def test_append_to_empty_body_returns_new_content() -> None:
    assert merge_body(None, "Added", "append") == "Added"
    assert merge_body("", "Added", "prepend") == "Added"


def test_replace_island_appends_island_when_missing() -> None:
    merged = merge_body("Human text", "Agent summary", "replace-island")
    assert merged == (
        "Human text\n\n"
        "<!-- safe-output-island:start -->\nAgent summary\n<!-- safe-output-island:end -->"
    )


def test_replace_island_rewrites_only_the_island() -> None:
    current = merge_body("Intro", "first run", "replace-island", run_id=42) + "\n\nFooter by a human"
    merged = merge_body(current, "second run", "replace-island", run_id=42)

    assert merged.startswith("Intro\n\n<!-- safe-output-island:start:42 -->\nsecond run\n")
    assert merged.endswith("<!-- safe-output-island:end:42 -->\n\nFooter by a human")
    assert "first run" not in merged


def test_replace_island_keeps_backslashes_literal() -> None:
    current = merge_body("", "old", "replace-island")
    merged = merge_body(current, r"path\to\file \1", "replace-island")
    assert r"path\to\file \1" in merged


def test_unknown_operation_raises() -> None:
    with pytest.raises(ValueError):
        merge_body("a", "b", "overwrite")


def test_whitespace_only_content_is_kept() -> None:
    assert merge_body("Original", "\n", "append") == "Original\n\n\n"
    assert merge_body("Original", "  ", "prepend") == "  \n\nOriginal"
    assert merge_body("Original", "", "append") == "Original"
