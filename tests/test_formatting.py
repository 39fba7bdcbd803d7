"""Tests for payload and log formatting helpers."""

from __future__ import annotations

from hubtools.formatting import mcp_json, omit_empty, preview


class TestPreview:
    def test_short_text_unchanged(self) -> None:
        assert preview("Toolset issues enabled") == "Toolset issues enabled"

    def test_collapses_lines(self) -> None:
        assert preview("missing required parameter: owner\n[validation]\n") == (
            "missing required parameter: owner [validation]"
        )

    def test_long_text_cut(self) -> None:
        text = preview("x" * 250, limit=200)
        assert text == "x" * 200 + "... (+50 chars)"

    def test_none(self) -> None:
        assert preview(None) == ""


def test_mcp_json_compact() -> None:
    assert mcp_json({"a": [1, 2]}) == '{"a":[1,2]}'


def test_omit_empty_keeps_false_and_zero() -> None:
    assert omit_empty({"a": None, "b": "", "c": [], "d": 0, "e": False}) == {"d": 0, "e": False}
