"""Service interfaces (ports) for the application layer.

The credential-signing protocol of the upstream API is a supplied
collaborator: edgepurge only asks it for the API host and for an
Authorization header value for a fully described request.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from edgepurge.domain.value_objects.core import PurgeResponse


@runtime_checkable
class IRequestSigner(Protocol):
    """Signs Fast Purge API requests (opaque to edgepurge)."""

    @property
    def host(self) -> str:
        """API host the credentials belong to (e.g. akab-xxx.purge.akamaiapis.net)."""
        ...

    def sign(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: bytes,
    ) -> str:
        """Return the Authorization header value for this request."""
        ...


class IPurgeClient(Protocol):
    """Sends purge and credential-check requests; never raises for API failures."""

    def purge(
        self,
        method: str,
        path: str,
        objects: Sequence[str],
        hostname: str = "",
        log: bool | None = None,
    ) -> PurgeResponse:
        """POST a purge; raises ConfigurationException only for programmer errors."""
        ...

    def test_creds(self, log: bool | None = None) -> PurgeResponse:
        """Check that the configured credentials authenticate."""
        ...


# Builds a purge client for a credentials mapping.
ClientFactory = Callable[[Mapping[str, str]], IPurgeClient]

# Builds a signer from a credentials mapping (host, access-token,
# client-token, client-secret). May return None or raise
# ConfigurationException when the credentials are unusable.
SignerFactory = Callable[[Mapping[str, str]], "IRequestSigner | None"]
