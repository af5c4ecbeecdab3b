"""Fast Purge v3 API client."""

from edgepurge.infrastructure.external.akamai.client import (
    PurgeClient,
    build_user_agent,
    normalize_response,
)
from edgepurge.infrastructure.external.akamai.factory import (
    PurgeClientFactory,
    load_signer_factory,
    no_signer,
)

__all__ = [
    "PurgeClient",
    "PurgeClientFactory",
    "build_user_agent",
    "load_signer_factory",
    "no_signer",
    "normalize_response",
]
