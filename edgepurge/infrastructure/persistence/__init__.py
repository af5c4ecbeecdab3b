"""Purge settings persistence."""

from edgepurge.infrastructure.persistence.settings_store import (
    InMemorySettingsStore,
    JsonFileSettingsStore,
)

__all__ = ["InMemorySettingsStore", "JsonFileSettingsStore"]
