"""Extension points for tag derivation and purge decisions.

A closed, documented set of stages. Each stage accepts callbacks with a
fixed signature; callbacks run in registration order and each receives
the previous callback's output. Nothing fires outside these stages.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable, Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from edgepurge.domain.entities.purge_context import PurgeContext
    from edgepurge.domain.value_objects.core import PurgeResponse

logger = logging.getLogger(__name__)


class TagStage(str, Enum):
    """Points in tag derivation where the tag list can be replaced."""

    PURGE_ALWAYS = "purge_always"
    EMIT_ALWAYS = "emit_always"
    PURGE_POST_RELATED_POSTS = "purge_post_related_posts"
    PURGE_POST_RELATED_TERMS = "purge_post_related_terms"
    PURGE_POST_RELATED_AUTHORS = "purge_post_related_authors"
    PURGE_POST = "purge_post"
    PURGE_TERM_ANCESTOR_TERMS = "purge_term_ancestor_terms"
    PURGE_TERM_RELATED_POSTS = "purge_term_related_posts"
    PURGE_TERM = "purge_term"
    EMIT_POST_RELATED_POSTS = "emit_post_related_posts"
    EMIT_POST_RELATED_TERMS = "emit_post_related_terms"
    EMIT_POST_RELATED_AUTHORS = "emit_post_related_authors"
    EMIT_POST = "emit_post"
    EMIT_TERM_ANCESTOR_TERMS = "emit_term_ancestor_terms"
    EMIT_TERM_RELATED_POSTS = "emit_term_related_posts"
    EMIT_TERM = "emit_term"


class ListStage(str, Enum):
    """Filterable allow-lists and trigger action lists."""

    PURGE_TAXONOMIES = "purge_taxonomies"
    PURGE_POST_TYPES = "purge_post_types"
    PURGE_POST_STATUSES = "purge_post_statuses"
    CACHEABLE_TAXONOMIES = "cacheable_taxonomies"
    POST_ACTIONS = "post_actions"
    TERM_ACTIONS = "term_actions"


# (tags, subject, taxonomy) -> tags. subject is the resolved entity, or None
# when it is missing (filters may still inject tags then).
TagFilter = Callable[[list[str], Any, str], list[str]]
ListFilter = Callable[[list[str]], list[str]]
# (code, kind) -> code
CodeFilter = Callable[[str, str], str]
# (decision, context) -> decision. May mutate the context.
DoPurgeFilter = Callable[[bool, "PurgeContext"], bool]
PurgedListener = Callable[["PurgeResponse", "PurgeContext"], None]


class HookRegistry:
    """Registered callbacks, keyed by stage."""

    def __init__(self) -> None:
        self._tag_filters: dict[TagStage, list[TagFilter]] = defaultdict(list)
        self._list_filters: dict[ListStage, list[ListFilter]] = defaultdict(list)
        self._code_filters: list[CodeFilter] = []
        self._do_purge_filters: list[DoPurgeFilter] = []
        self._purged_listeners: list[PurgedListener] = []

    def add_tag_filter(self, stage: TagStage, fn: TagFilter) -> None:
        self._tag_filters[TagStage(stage)].append(fn)

    def add_list_filter(self, stage: ListStage, fn: ListFilter) -> None:
        self._list_filters[ListStage(stage)].append(fn)

    def add_code_filter(self, fn: CodeFilter) -> None:
        self._code_filters.append(fn)

    def add_do_purge_filter(self, fn: DoPurgeFilter) -> None:
        self._do_purge_filters.append(fn)

    def add_purged_listener(self, fn: PurgedListener) -> None:
        self._purged_listeners.append(fn)

    def apply_tags(
        self,
        stage: TagStage,
        tags: Sequence[str],
        subject: Any = None,
        taxonomy: str = "",
    ) -> list[str]:
        """Run tag filters for stage; returns a new list."""
        result = list(tags)
        for fn in self._tag_filters.get(stage, ()):
            result = list(fn(result, subject, taxonomy))
        return result

    def apply_list(self, stage: ListStage, values: Sequence[str]) -> list[str]:
        """Run list filters for stage; returns a new list."""
        result = list(values)
        for fn in self._list_filters.get(stage, ()):
            result = list(fn(result))
        return result

    def apply_code(self, code: str, kind: str) -> str:
        for fn in self._code_filters:
            code = fn(code, kind)
        return code

    def apply_do_purge(self, decision: bool, context: PurgeContext) -> bool:
        for fn in self._do_purge_filters:
            decision = bool(fn(decision, context))
        return decision

    def notify_purged(self, response: PurgeResponse, context: PurgeContext) -> None:
        """Call every listener; one failing listener does not silence the rest."""
        for fn in self._purged_listeners:
            try:
                fn(response, context)
            except Exception:
                logger.exception("Purged listener %r failed", fn)
