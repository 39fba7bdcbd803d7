"""Overridable tool descriptions and titles.

Every user-facing tool string goes through a translator, ``t(key,
default)``. The environment can override any of them:

    HUBTOOLS_TOOL_GET_ME_DESCRIPTION="Who am I?" hubtools stdio

Lookup priority:
1. Environment variable HUBTOOLS_<KEY>
2. hubtools.json in the working directory
3. The default baked into the tool

``hubtools stdio --export-translations`` writes every key seen at startup
to hubtools.json, ready to edit.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from collections.abc import Callable, Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

Translator = Callable[[str, str], str]

ENV_PREFIX = "HUBTOOLS_"
TRANSLATIONS_FILE = Path("hubtools.json")


def null_translator(key: str, default: str) -> str:
    """Translator that always returns the default."""
    return default


class TranslationHelper:
    """Caching translator backed by the environment and an optional JSON file.

    Instances are callable and can be passed anywhere a Translator is
    expected. Every resolved key is remembered, so dump() writes the full
    set of strings the process used.
    """

    def __init__(
        self,
        overrides: Mapping[str, str] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._overrides = {k.upper(): v for k, v in (overrides or {}).items()}
        self._environ = os.environ if environ is None else environ
        self._resolved: dict[str, str] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_file(
        cls,
        path: str | Path = TRANSLATIONS_FILE,
        environ: Mapping[str, str] | None = None,
    ) -> TranslationHelper:
        """Build a helper seeded from a JSON file of key -> string.

        A missing file is not an error; an unreadable one is logged and
        ignored, since descriptions always have a default.
        """
        path = Path(path)
        overrides: dict[str, str] = {}
        if path.exists():
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                logger.warning("Could not read translations file %s: %s", path, e)
            else:
                if isinstance(data, dict):
                    overrides = {str(k): str(v) for k, v in data.items()}
                else:
                    logger.warning("Translations file %s is not a JSON object, ignoring", path)
        return cls(overrides=overrides, environ=environ)

    def __call__(self, key: str, default: str) -> str:
        key = key.upper()
        with self._lock:
            if key in self._resolved:
                return self._resolved[key]
            env_value = self._environ.get(ENV_PREFIX + key)
            if env_value is not None:
                value = env_value
            else:
                value = self._overrides.get(key, default)
            self._resolved[key] = value
            return value

    def snapshot(self) -> dict[str, str]:
        with self._lock:
            return dict(self._resolved)

    def dump(self, path: str | Path = TRANSLATIONS_FILE) -> Path:
        """Write every resolved key to a JSON file, sorted by key."""
        path = Path(path)
        path.write_text(json.dumps(self.snapshot(), indent=2, sort_keys=True) + "\n", encoding="utf-8")
        logger.info("Wrote %d translation keys to %s", len(self._resolved), path)
        return path
