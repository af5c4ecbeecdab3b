"""Purge policy: whether, and with what parameters, an event purges.

Eligibility gates run in order and stop at the first failure:
  1. the object kind has not already purged in this scope;
  2. the object's status is purgeable (posts only);
  3. the object's type / taxonomy is purgeable.
The final go/no-go (do_purge) runs last, on the fully built context.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from edgepurge.application.services.hooks import HookRegistry, ListStage
from edgepurge.application.services.settings_service import as_flag
from edgepurge.core.constants import (
    DEFAULT_CACHEABLE_TAXONOMIES,
    DEFAULT_POST_ACTIONS,
    DEFAULT_PURGE_POST_STATUSES,
    DEFAULT_PURGE_POST_TYPES,
    DEFAULT_TERM_ACTIONS,
)
from edgepurge.core.purge_scope import PurgeScope
from edgepurge.domain.entities.content import PostEntity, TermEntity, UserEntity
from edgepurge.domain.entities.purge_context import PurgeContext
from edgepurge.domain.enums import ObjectKind


def fired_key(kind: ObjectKind) -> str:
    """Coarse scope key for a purge of this object kind."""
    return f"purge_{kind.value}"


class PurgePolicy:
    """Stateless decision logic; reads settings and hooks only."""

    def __init__(self, hooks: HookRegistry | None = None) -> None:
        self._hooks = hooks or HookRegistry()

    def post_actions(self) -> list[str]:
        return self._hooks.apply_list(ListStage.POST_ACTIONS, DEFAULT_POST_ACTIONS)

    def term_actions(self) -> list[str]:
        return self._hooks.apply_list(ListStage.TERM_ACTIONS, DEFAULT_TERM_ACTIONS)

    def purge_post_types(self) -> list[str]:
        return self._hooks.apply_list(ListStage.PURGE_POST_TYPES, DEFAULT_PURGE_POST_TYPES)

    def purge_post_statuses(self) -> list[str]:
        return self._hooks.apply_list(
            ListStage.PURGE_POST_STATUSES, DEFAULT_PURGE_POST_STATUSES
        )

    def cacheable_taxonomies(self) -> list[str]:
        return self._hooks.apply_list(
            ListStage.CACHEABLE_TAXONOMIES, DEFAULT_CACHEABLE_TAXONOMIES
        )

    def is_post_eligible(self, post: PostEntity | None, scope: PurgeScope) -> bool:
        if scope.has_fired(fired_key(ObjectKind.POST)):
            return False
        if post is None or post.status not in self.purge_post_statuses():
            return False
        return post.post_type in self.purge_post_types()

    def is_term_eligible(self, term: TermEntity | None, scope: PurgeScope) -> bool:
        if scope.has_fired(fired_key(ObjectKind.TERM)):
            return False
        if term is None:
            return False
        return term.taxonomy in self.cacheable_taxonomies()

    def is_user_eligible(self, user: UserEntity | None, scope: PurgeScope) -> bool:
        return user is not None and not scope.has_fired(fired_key(ObjectKind.USER))

    def purge_parameters(self, settings: Mapping[str, Any]) -> dict[str, str]:
        """Purge type, method and network as configured (blank means default)."""
        return {
            "purge_type": settings.get("purge-type") or "",
            "purge_method": settings.get("purge-method") or "",
            "purge_network": settings.get("purge-network") or "",
        }

    def do_purge(self, context: PurgeContext, settings: Mapping[str, Any]) -> bool:
        """Final decision: the purge-on-update switch, then do-purge filters.

        Filters receive the complete context and may veto, force, or
        mutate it before the request is built.
        """
        decision = as_flag(settings.get("purge-on-update"))
        return self._hooks.apply_do_purge(decision, context)
