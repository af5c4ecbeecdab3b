"""Purge client factory: a client per credentials set, sharing one transport."""

from __future__ import annotations

import importlib
import logging
from collections.abc import Mapping

import httpx

from edgepurge.application.interfaces.services import SignerFactory
from edgepurge.core.constants import CREDENTIALS_KEY, ERR_BAD_CLIENT
from edgepurge.domain.exceptions import ConfigurationException
from edgepurge.infrastructure.external.akamai.client import PurgeClient

logger = logging.getLogger(__name__)


def no_signer(credentials: Mapping[str, str]) -> None:
    """Signer factory used when none is configured; every purge fails fast."""
    return None


def load_signer_factory(path: str) -> SignerFactory:
    """Import a signer factory from 'package.module:callable'.

    Raises:
        ConfigurationException: path is malformed or does not resolve.
    """
    if not path:
        return no_signer
    module_name, _, attr = path.partition(":")
    if not module_name or not attr:
        raise ConfigurationException(
            f"Signer factory must look like 'package.module:callable', got {path!r}",
            setting="signer_factory",
        )
    try:
        module = importlib.import_module(module_name)
        return getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise ConfigurationException(
            f"Cannot load signer factory {path!r}: {e}", setting="signer_factory"
        ) from e


class PurgeClientFactory:
    """Builds PurgeClient instances from a credentials mapping."""

    def __init__(
        self,
        signer_factory: SignerFactory,
        http_client: httpx.Client,
        user_agent: str,
    ) -> None:
        self._signer_factory = signer_factory
        self._http = http_client
        self._user_agent = user_agent

    def __call__(self, credentials: Mapping[str, str]) -> PurgeClient:
        """Return a client for credentials.

        Raises:
            ConfigurationException: the signer factory rejected the credentials.
        """
        try:
            signer = self._signer_factory(credentials)
        except ConfigurationException:
            raise
        except Exception as e:
            logger.warning("Signer factory rejected credentials: %s", e)
            raise ConfigurationException(ERR_BAD_CLIENT, setting=CREDENTIALS_KEY) from e
        return PurgeClient(signer=signer, user_agent=self._user_agent, http_client=self._http)

    @property
    def signer_configured(self) -> bool:
        """False when purges would fail fast for lack of a signer."""
        return self._signer_factory is not no_signer
