"""Repository interfaces (ports) for the application layer.

The content-management system and the settings persistence live outside
this service; protocols define the only calls the purge engine makes.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from edgepurge.domain.entities.content import (
    PostEntity,
    SiteInfo,
    TermEntity,
    UserEntity,
)


class IContentRepository(Protocol):
    """Read-only access to the content-management system's objects."""

    def site_info(self) -> SiteInfo:
        """Return identity of the current site (tenant)."""
        ...

    def get_post(self, post_id: int) -> PostEntity | None:
        """Return the post or None if missing/deleted."""
        ...

    def get_term(self, term_id: int, taxonomy: str = "") -> TermEntity | None:
        """Return the term or None; taxonomy may be blank when unknown."""
        ...

    def get_user(self, user_id: int) -> UserEntity | None:
        """Return the user or None."""
        ...

    def get_taxonomies(self) -> list[str]:
        """Return every taxonomy the system exposes."""
        ...

    def get_post_term_ids(self, post_id: int, taxonomy: str) -> list[int]:
        """Return ids of terms in taxonomy assigned to the post."""
        ...

    def get_term_post_ids(
        self,
        term_id: int,
        taxonomy: str,
        post_types: Sequence[str],
        post_statuses: Sequence[str],
    ) -> list[int]:
        """Return ids of posts carrying the term, bounded by type and status."""
        ...

    def get_term_ancestor_ids(self, term_id: int, taxonomy: str) -> list[int]:
        """Return ancestor term ids, nearest first; empty for flat taxonomies."""
        ...


class ISettingsStore(Protocol):
    """Persisted purge settings (options plus credentials sub-map)."""

    def load(self) -> dict[str, Any]:
        """Return the stored settings mapping ({} when nothing is stored)."""
        ...

    def save(self, settings: dict[str, Any]) -> None:
        """Replace the stored settings mapping."""
        ...
