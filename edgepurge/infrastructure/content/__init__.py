"""Content repository implementations."""

from edgepurge.infrastructure.content.memory_repository import InMemoryContentRepository

__all__ = ["InMemoryContentRepository"]
