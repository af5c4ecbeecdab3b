"""Domain entities."""

from edgepurge.domain.entities.content import (
    ContentEntity,
    PostEntity,
    SiteInfo,
    TermEntity,
    UserEntity,
)
from edgepurge.domain.entities.events import (
    ContentChangedEvent,
    PostChangedEvent,
    TermChangedEvent,
)
from edgepurge.domain.entities.purge_context import PurgeContext

__all__ = [
    "ContentChangedEvent",
    "ContentEntity",
    "PostChangedEvent",
    "PostEntity",
    "PurgeContext",
    "SiteInfo",
    "TermChangedEvent",
    "TermEntity",
    "UserEntity",
]
