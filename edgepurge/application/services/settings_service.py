"""Purge settings: per-key merge of override, persisted store and defaults.

Resolution order per key: explicit override -> persisted store -> default.
Applied independently to the options namespace and the credentials
sub-namespace. 'hostname' defaults to the host of the current site URL.
The store is read once per get_settings() call; it is never invalidated
mid-pipeline because the pipeline reads settings once at its start.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import urlparse

from edgepurge.application.interfaces.repositories import ISettingsStore
from edgepurge.core.constants import (
    CREDENTIALS_KEY,
    DEFAULT_CREDENTIALS,
    DEFAULT_OPTIONS,
    HOSTNAME_KEY,
)
from edgepurge.domain.enums import PurgeMethod, PurgeNetwork, PurgeType
from edgepurge.domain.exceptions import ValidationException

logger = logging.getLogger(__name__)

_CHOICES: dict[str, list[str]] = {
    "purge-type": PurgeType.values(),
    "purge-method": PurgeMethod.values(),
    "purge-network": PurgeNetwork.values(),
}


_TRUE_STRINGS = {"1", "true", "yes", "on"}


def as_flag(value: Any) -> bool:
    """Interpret a stored 0/1, bool or form string as a boolean flag."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _pick(key: str, *sources: Mapping[str, Any] | None, default: Any) -> Any:
    """Return the value for key from the first source that has it."""
    for source in sources:
        if source and key in source and source[key] is not None:
            return source[key]
    return default


class SettingsService:
    """Reads and validates the purge settings schema."""

    def __init__(
        self,
        store: ISettingsStore,
        site_url: Callable[[], str],
    ) -> None:
        """Initialize.

        Args:
            store: Persisted settings store.
            site_url: Callable returning the current site URL (hostname default).
        """
        self._store = store
        self._site_url = site_url

    def get_settings(self, overrides: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Return a complete settings mapping; every schema key is present."""
        overrides = overrides or {}
        stored = self._store.load() or {}

        settings: dict[str, Any] = {
            key: _pick(key, overrides, stored, default=default)
            for key, default in DEFAULT_OPTIONS.items()
        }
        settings[CREDENTIALS_KEY] = {
            key: _pick(
                key,
                overrides.get(CREDENTIALS_KEY),
                stored.get(CREDENTIALS_KEY),
                default=default,
            )
            for key, default in DEFAULT_CREDENTIALS.items()
        }
        hostname = _pick(HOSTNAME_KEY, overrides, stored, default=None)
        if hostname is None:
            hostname = urlparse(self._site_url()).hostname or ""
        settings[HOSTNAME_KEY] = hostname
        return settings

    def setting(self, name: str, overrides: Mapping[str, Any] | None = None) -> Any:
        """Return one option value, or None for names outside the schema."""
        return self.get_settings(overrides).get(name)

    def credential(self, name: str, overrides: Mapping[str, Any] | None = None) -> Any:
        """Return one credentials value, or None for unknown names."""
        return self.get_settings(overrides)[CREDENTIALS_KEY].get(name)

    def save(self, new_settings: Mapping[str, Any]) -> dict[str, Any]:
        """Merge new_settings over the stored values and persist schema keys only.

        Raises:
            ValidationException: a purge type, method or network is not a valid choice.
        """
        settings = self.get_settings(new_settings)
        for key, choices in _CHOICES.items():
            if settings[key] and settings[key] not in choices:
                raise ValidationException(f"Invalid {key} {settings[key]!r}", field=key)
        self._store.save(settings)
        logger.info("Purge settings saved")
        return settings

    def validate(
        self,
        new_settings: Mapping[str, Any] | None = None,
        verify_creds: Callable[[dict[str, Any]], Any] | None = None,
    ) -> tuple[dict[str, Any], list[dict[str, str]]]:
        """Fill in defaults and report problems with the resulting settings.

        Args:
            new_settings: Optional subset overriding stored settings.
            verify_creds: Optional callable taking the complete settings and
                returning a PurgeResponse-like object (with .error); called
                only when every credential is present.

        Returns:
            (complete settings, list of {"code", "message", "type"} errors).
        """
        settings = self.get_settings(new_settings)
        errors: list[dict[str, str]] = []

        if not settings["unique-sitecode"]:
            errors.append(
                {
                    "code": "sitecode-missing",
                    "message": 'Missing "Unique Site Code" setting.',
                    "type": "error",
                }
            )

        for key, choices in _CHOICES.items():
            if settings[key] and settings[key] not in choices:
                errors.append(
                    {
                        "code": f"invalid-{key}",
                        "message": f"Invalid {key} {settings[key]!r}.",
                        "type": "error",
                    }
                )

        missing_creds = any(not settings[CREDENTIALS_KEY][k] for k in DEFAULT_CREDENTIALS)
        if missing_creds:
            errors.append(
                {
                    "code": "missing-credential",
                    "message": "Missing necessary API credentials: can not purge.",
                    "type": "warning",
                }
            )
        elif verify_creds is not None:
            result = verify_creds(settings)
            if result.error:
                errors.append(
                    {
                        "code": "invalid-credentials",
                        "message": f"Invalid API credentials: {result.error}",
                        "type": "error",
                    }
                )

        if errors and as_flag(settings["log-errors"]):
            for err in errors:
                logger.warning("settings-%s:%s %s", err["type"], err["code"], err["message"])
        return settings, errors
