"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation.
"""

from edgepurge.domain.entities import (
    PostEntity,
    PurgeContext,
    SiteInfo,
    TermEntity,
    UserEntity,
)
from edgepurge.domain.enums import ObjectKind, PurgeMethod, PurgeNetwork, PurgeType
from edgepurge.domain.exceptions import (
    ConfigurationException,
    EdgePurgeException,
    ResourceNotFoundException,
    ValidationException,
)
from edgepurge.domain.value_objects import PurgeResponse

__all__ = [
    "ConfigurationException",
    "EdgePurgeException",
    "ObjectKind",
    "PostEntity",
    "PurgeContext",
    "PurgeMethod",
    "PurgeNetwork",
    "PurgeResponse",
    "PurgeType",
    "ResourceNotFoundException",
    "SiteInfo",
    "TermEntity",
    "UserEntity",
    "ValidationException",
]
