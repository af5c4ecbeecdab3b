"""Tests for SettingsService (merge order, hostname default, validation, save)."""

from types import SimpleNamespace

import pytest

from edgepurge.application.services.settings_service import SettingsService, as_flag
from edgepurge.core.constants import DEFAULT_OPTIONS
from edgepurge.domain.exceptions import ValidationException
from edgepurge.infrastructure.persistence.settings_store import InMemorySettingsStore


def _service(stored: dict | None = None, url: str = "https://www.example.org/blog") -> SettingsService:
    return SettingsService(InMemorySettingsStore(stored), site_url=lambda: url)


class TestGetSettings:
    def test_defaults_fill_every_key(self) -> None:
        settings = _service().get_settings()
        for key, default in DEFAULT_OPTIONS.items():
            assert settings[key] == default
        assert settings["credentials"] == {
            "host": "",
            "access-token": "",
            "client-token": "",
            "client-secret": "",
        }

    def test_hostname_defaults_to_site_host(self) -> None:
        assert _service().get_settings()["hostname"] == "www.example.org"

    def test_override_then_store_then_default(self) -> None:
        service = _service({"purge-network": "staging", "purge-type": "delete"})
        settings = service.get_settings({"purge-network": "production", "purge-method": None})
        assert settings["purge-network"] == "production"
        assert settings["purge-type"] == "delete"
        assert settings["purge-method"] == "tags"

    def test_credentials_merge_per_key(self) -> None:
        service = _service({"credentials": {"host": "h", "access-token": "a"}})
        creds = service.get_settings({"credentials": {"access-token": "b"}})["credentials"]
        assert creds["host"] == "h"
        assert creds["access-token"] == "b"
        assert creds["client-secret"] == ""

    def test_setting_and_credential_helpers(self) -> None:
        service = _service({"unique-sitecode": "abc", "credentials": {"host": "h"}})
        assert service.setting("unique-sitecode") == "abc"
        assert service.setting("no-such-key") is None
        assert service.credential("host") == "h"
        assert service.credential("host", {"credentials": {"host": "x"}}) == "x"


class TestValidate:
    def test_missing_sitecode_and_credentials(self) -> None:
        _, errors = _service().validate()
        codes = {e["code"]: e["type"] for e in errors}
        assert codes == {"sitecode-missing": "error", "missing-credential": "warning"}

    def test_invalid_choice(self) -> None:
        _, errors = _service({"unique-sitecode": "s"}).validate({"purge-method": "purge-everything"})
        assert "invalid-purge-method" in [e["code"] for e in errors]

    def test_verify_creds_called_only_with_complete_credentials(self) -> None:
        creds = {"host": "h", "access-token": "a", "client-token": "c", "client-secret": "s"}
        calls = []

        def verify(settings):
            calls.append(settings["credentials"])
            return SimpleNamespace(error="AKAMAI_API_ERROR: nope.")

        service = _service({"unique-sitecode": "s", "credentials": creds})
        _, errors = service.validate(verify_creds=verify)

        assert calls == [creds]
        assert errors[0]["code"] == "invalid-credentials"
        assert "nope" in errors[0]["message"]

        _, errors = _service({"unique-sitecode": "s"}).validate(verify_creds=verify)
        assert len(calls) == 1


def test_save_persists_merged_settings() -> None:
    store = InMemorySettingsStore({"unique-sitecode": "old"})
    service = SettingsService(store, site_url=lambda: "https://example.com")

    service.save({"unique-sitecode": "new", "bogus": 1})

    stored = store.load()
    assert stored["unique-sitecode"] == "new"
    assert "bogus" not in stored
    assert stored["hostname"] == "example.com"


@pytest.mark.parametrize("key", ["purge-type", "purge-method", "purge-network"])
def test_save_rejects_invalid_choice(key: str) -> None:
    store = InMemorySettingsStore({"unique-sitecode": "s"})
    service = SettingsService(store, site_url=lambda: "https://example.com")

    with pytest.raises(ValidationException) as exc_info:
        service.save({key: "bogus"})

    assert exc_info.value.details == {"field": key}
    assert store.load() == {"unique-sitecode": "s"}


def test_as_flag() -> None:
    assert as_flag(1) is True
    assert as_flag("1") is True
    assert as_flag("on") is True
    assert as_flag("0") is False
    assert as_flag("") is False
    assert as_flag(None) is False
