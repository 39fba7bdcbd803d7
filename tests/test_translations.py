"""Tests for overridable tool descriptions."""

import json
from pathlib import Path

from hubtools.github.context import get_me
from hubtools.github.client import GitHubClient
from hubtools.translations import TranslationHelper, null_translator


def test_null_translator():
    assert null_translator("TOOL_GET_ME_DESCRIPTION", "default") == "default"


class TestTranslationHelper:
    """Lookup priority: environment, then file, then default."""

    def test_default(self):
        t = TranslationHelper(environ={})
        assert t("TOOL_GET_ME_DESCRIPTION", "default") == "default"

    def test_file_override(self):
        t = TranslationHelper(overrides={"tool_get_me_description": "from file"}, environ={})
        assert t("TOOL_GET_ME_DESCRIPTION", "default") == "from file"

    def test_env_override_wins(self):
        t = TranslationHelper(
            overrides={"TOOL_GET_ME_DESCRIPTION": "from file"},
            environ={"HUBTOOLS_TOOL_GET_ME_DESCRIPTION": "from env"},
        )
        assert t("tool_get_me_description", "default") == "from env"

    def test_first_resolution_is_cached(self):
        environ = {}
        t = TranslationHelper(environ=environ)
        assert t("KEY", "first") == "first"
        environ["HUBTOOLS_KEY"] = "later"
        assert t("KEY", "other") == "first"

    def test_applies_to_tools(self):
        t = TranslationHelper(environ={"HUBTOOLS_TOOL_GET_ME_USER_TITLE": "Who am I"})
        tool = get_me(GitHubClient(), t)
        assert tool.tool.annotations.title == "Who am I"


class TestFiles:
    """Loading and exporting hubtools.json."""

    def test_missing_file(self, tmp_path: Path):
        t = TranslationHelper.from_file(tmp_path / "hubtools.json", environ={})
        assert t("KEY", "default") == "default"

    def test_load_file(self, tmp_path: Path):
        path = tmp_path / "hubtools.json"
        path.write_text(json.dumps({"KEY": "from file"}))
        t = TranslationHelper.from_file(path, environ={})
        assert t("KEY", "default") == "from file"

    def test_invalid_file_ignored(self, tmp_path: Path, caplog):
        path = tmp_path / "hubtools.json"
        path.write_text("{not json")
        t = TranslationHelper.from_file(path, environ={})
        assert t("KEY", "default") == "default"
        assert "Could not read translations file" in caplog.text

    def test_dump(self, tmp_path: Path):
        t = TranslationHelper(environ={})
        t("B_KEY", "b")
        t("A_KEY", "a")
        path = t.dump(tmp_path / "out.json")

        assert json.loads(path.read_text()) == {"A_KEY": "a", "B_KEY": "b"}
        assert path.read_text().index("A_KEY") < path.read_text().index("B_KEY")
