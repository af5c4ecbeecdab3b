"""Purge settings stores: in-memory and JSON file.

Both keep the whole settings mapping as one document, the way the
content-management system stores its plugin options under one key.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any

from edgepurge.domain.exceptions import ConfigurationException

logger = logging.getLogger(__name__)


class InMemorySettingsStore:
    """Settings held for the lifetime of the process."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial or {})

    def load(self) -> dict[str, Any]:
        """Return a copy of the stored settings ({} when nothing is stored)."""
        return copy.deepcopy(self._data)

    def save(self, settings: dict[str, Any]) -> None:
        self._data = copy.deepcopy(settings)


class JsonFileSettingsStore:
    """Settings persisted as a JSON document; read once, written through."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._cache: dict[str, Any] | None = None

    def load(self) -> dict[str, Any]:
        """Return the stored settings; a missing file means nothing stored.

        Raises:
            ConfigurationException: The file exists but is not a JSON object.
        """
        if self._cache is None:
            self._cache = self._read()
        return copy.deepcopy(self._cache)

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except ValueError as e:
            raise ConfigurationException(
                f"Settings file {self._path} is not valid JSON: {e}",
                setting="settings_file",
            ) from e
        if not isinstance(data, dict):
            raise ConfigurationException(
                f"Settings file {self._path} must hold a JSON object",
                setting="settings_file",
            )
        return data

    def save(self, settings: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(settings, indent=2, sort_keys=True), encoding="utf-8")
        self._cache = copy.deepcopy(settings)
        logger.debug("Settings written to %s", self._path)
