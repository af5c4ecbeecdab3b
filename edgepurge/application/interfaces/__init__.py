"""Application interfaces (ports): repository and collaborator protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from edgepurge.infrastructure or edgepurge.api.
"""

from edgepurge.application.interfaces.repositories import (
    IContentRepository,
    ISettingsStore,
)
from edgepurge.application.interfaces.services import (
    ClientFactory,
    IPurgeClient,
    IRequestSigner,
    SignerFactory,
)

__all__ = [
    "ClientFactory",
    "IContentRepository",
    "IPurgeClient",
    "IRequestSigner",
    "ISettingsStore",
    "SignerFactory",
]
