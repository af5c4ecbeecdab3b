"""Cache tag (surrogate key) derivation.

Tags have the form {site-prefix}-{code}-{value}. Generation for the same
(site, kind, id) is deterministic. Integer ids and entities are accepted
everywhere; derivations that need related objects resolve ids to the
canonical entity through the content repository first.

Lists returned here are NOT de-duplicated: de-duplication happens where
tags leave the process (purge request body, response header).
"""

from __future__ import annotations

from urllib.parse import quote_plus

from edgepurge.application.interfaces.repositories import IContentRepository
from edgepurge.application.services.hooks import HookRegistry, ListStage, TagStage
from edgepurge.application.services.settings_service import SettingsService
from edgepurge.core.constants import (
    ALL_TAG_SUFFIX,
    ALWAYS_PURGED_TEMPLATES,
    DEFAULT_PURGE_POST_STATUSES,
    DEFAULT_PURGE_POST_TYPES,
    TAG_CODES,
    TAG_SEP,
)
from edgepurge.domain.entities.content import PostEntity, TermEntity, UserEntity


class TagBuilder:
    """Computes canonical tag strings for content objects and their relations.

    Holds no per-event state; one instance serves the whole process.
    """

    def __init__(
        self,
        repository: IContentRepository,
        settings: SettingsService,
        hooks: HookRegistry | None = None,
    ) -> None:
        self._repo = repository
        self._settings = settings
        self._hooks = hooks or HookRegistry()

    # ---- tag primitives ----

    def tag_part(self, kind: str, value: object) -> str:
        """Return '{code}-{value}'; unknown kinds use the kind name as code."""
        code = self._hooks.apply_code(TAG_CODES.get(kind, kind), kind)
        return f"{code}{TAG_SEP}{value}"

    def site_code(self) -> str:
        """Configured unique site code, or the URL-encoded hostname if unset."""
        settings = self._settings.get_settings()
        code = settings["unique-sitecode"]
        if not code:
            return quote_plus(str(settings["hostname"]))
        return str(code)

    def site_prefix(self) -> str:
        """Site code plus the tenant segment ('s-{id}') under multisite."""
        site = self._repo.site_info()
        if site.is_multisite:
            return f"{self.site_code()}{TAG_SEP}{self.tag_part('multisite', site.site_id)}"
        return self.site_code()

    def site_tag(self) -> str:
        """Tag representing the whole current site (tenant)."""
        return f"{self.site_prefix()}{TAG_SEP}{ALL_TAG_SUFFIX}"

    def _tag(self, kind: str, value: object) -> str:
        return f"{self.site_prefix()}{TAG_SEP}{self.tag_part(kind, value)}"

    def post_tag(self, post: PostEntity | int) -> str:
        post_id = post.id if isinstance(post, PostEntity) else int(post)
        return self._tag("post", post_id)

    def term_tag(self, term: TermEntity | int) -> str:
        term_id = term.id if isinstance(term, TermEntity) else int(term)
        return self._tag("term", term_id)

    def author_tag(self, user: UserEntity | int) -> str:
        user_id = user.id if isinstance(user, UserEntity) else int(user)
        return self._tag("author", user_id)

    def template_tag(self, template: str) -> str:
        return self._tag("template", template)

    # ---- fixed sets ----

    def always_purged_tags(self) -> list[str]:
        """Template tags invalidated on every content-affecting purge."""
        tags = [self.template_tag(t) for t in ALWAYS_PURGED_TEMPLATES]
        return self._hooks.apply_tags(TagStage.PURGE_ALWAYS, tags)

    def always_cached_tags(self) -> list[str]:
        """Tags attached to every cached response of the site."""
        tags = [self.site_code()]
        if self._repo.site_info().is_multisite:
            tags.append(self.site_prefix())
        return self._hooks.apply_tags(TagStage.EMIT_ALWAYS, tags)

    def get_tags_for_purge_all(self) -> list[str]:
        """Purge-everything tag: covers all sites sharing the site code."""
        return [f"{self.site_code()}{TAG_SEP}{ALL_TAG_SUFFIX}"]

    def get_tags_for_purge_multisite_site(self) -> list[str]:
        return [self.site_tag()]

    def get_tags_for_emit_universal(self) -> list[str]:
        tags = [self.site_tag(), f"{self.site_code()}{TAG_SEP}{ALL_TAG_SUFFIX}"]
        return list(dict.fromkeys(tags))

    # ---- canonical object resolution ----

    def _resolve_post(self, post: PostEntity | int | None) -> PostEntity | None:
        if isinstance(post, int):
            return self._repo.get_post(post)
        return post

    def _resolve_term(
        self, term: TermEntity | int | None, taxonomy: str
    ) -> TermEntity | None:
        if isinstance(term, int):
            return self._repo.get_term(term, taxonomy)
        return term

    # ---- relations ----

    def related_author_tags(self, post: PostEntity | int) -> list[str]:
        """The post's author tag, if the post has an author."""
        resolved = self._resolve_post(post)
        if resolved is not None and resolved.author_id > 0:
            return [self.author_tag(resolved.author_id)]
        return []

    def related_term_tags(self, post: PostEntity | int) -> list[str]:
        """One tag per term assigned to the post, across purgeable taxonomies."""
        resolved = self._resolve_post(post)
        if resolved is None:
            return []
        taxonomies = self._hooks.apply_list(
            ListStage.PURGE_TAXONOMIES, self._repo.get_taxonomies()
        )
        tags: list[str] = []
        for taxonomy in taxonomies:
            for term_id in self._repo.get_post_term_ids(resolved.id, taxonomy):
                if term_id:
                    tags.append(self.term_tag(term_id))
        return tags

    def related_post_tags(self, term: TermEntity | int, taxonomy: str = "") -> list[str]:
        """One tag per eligible post carrying the term."""
        resolved = self._resolve_term(term, taxonomy)
        if resolved is None:
            return []
        post_types = self._hooks.apply_list(
            ListStage.PURGE_POST_TYPES, DEFAULT_PURGE_POST_TYPES
        )
        post_statuses = self._hooks.apply_list(
            ListStage.PURGE_POST_STATUSES, DEFAULT_PURGE_POST_STATUSES
        )
        post_ids = self._repo.get_term_post_ids(
            resolved.id, taxonomy or resolved.taxonomy, post_types, post_statuses
        )
        return [self.post_tag(post_id) for post_id in post_ids if post_id]

    def ancestor_term_tags(self, term: TermEntity | int, taxonomy: str = "") -> list[str]:
        """One tag per ancestor of the term; empty for flat taxonomies."""
        resolved = self._resolve_term(term, taxonomy)
        if resolved is None:
            return []
        ancestor_ids = self._repo.get_term_ancestor_ids(
            resolved.id, taxonomy or resolved.taxonomy
        )
        return [self.term_tag(term_id) for term_id in ancestor_ids if term_id]

    # ---- aggregate derivations ----

    def get_tags_for_purge_post(
        self,
        post: PostEntity | int | None,
        related: bool = True,
        always: bool = True,
    ) -> list[str]:
        """Tags to purge when a post changes.

        self tag, then (if related) related post/term/author tags, with
        the always-purged template tags in front (if always).
        """
        resolved = self._resolve_post(post)
        if resolved is None:
            return self._hooks.apply_tags(TagStage.PURGE_POST, [], None)

        tags = [self.post_tag(resolved)]
        if related:
            tags += self._hooks.apply_tags(
                TagStage.PURGE_POST_RELATED_POSTS, [], resolved
            )
            tags += self._hooks.apply_tags(
                TagStage.PURGE_POST_RELATED_TERMS,
                self.related_term_tags(resolved),
                resolved,
            )
            tags += self._hooks.apply_tags(
                TagStage.PURGE_POST_RELATED_AUTHORS,
                self.related_author_tags(resolved),
                resolved,
            )
        if always:
            tags = self.always_purged_tags() + tags
        return self._hooks.apply_tags(TagStage.PURGE_POST, tags, resolved)

    def get_tags_for_emit_post(
        self, post: PostEntity | int | None, related: bool = True
    ) -> list[str]:
        """Tags to attach to a post's cached response (no template tags)."""
        resolved = self._resolve_post(post)
        if resolved is None:
            return self._hooks.apply_tags(TagStage.EMIT_POST, [], None)

        tags = [self.post_tag(resolved)]
        if related:
            tags += self._hooks.apply_tags(
                TagStage.EMIT_POST_RELATED_POSTS, [], resolved
            )
            tags += self._hooks.apply_tags(
                TagStage.EMIT_POST_RELATED_TERMS,
                self.related_term_tags(resolved),
                resolved,
            )
            tags += self._hooks.apply_tags(
                TagStage.EMIT_POST_RELATED_AUTHORS,
                self.related_author_tags(resolved),
                resolved,
            )
        return self._hooks.apply_tags(TagStage.EMIT_POST, tags, resolved)

    def get_tags_for_purge_term(
        self,
        term: TermEntity | int | None,
        taxonomy: str = "",
        related: bool = True,
        always: bool = True,
    ) -> list[str]:
        """Tags to purge when a term changes: self, ancestors, tagged posts."""
        resolved = self._resolve_term(term, taxonomy)
        if resolved is None:
            return self._hooks.apply_tags(TagStage.PURGE_TERM, [], None, taxonomy)
        taxonomy = taxonomy or resolved.taxonomy

        tags = [self.term_tag(resolved)]
        if related:
            tags += self._hooks.apply_tags(
                TagStage.PURGE_TERM_ANCESTOR_TERMS,
                self.ancestor_term_tags(resolved, taxonomy),
                resolved,
                taxonomy,
            )
            tags += self._hooks.apply_tags(
                TagStage.PURGE_TERM_RELATED_POSTS,
                self.related_post_tags(resolved, taxonomy),
                resolved,
                taxonomy,
            )
        if always:
            tags = self.always_purged_tags() + tags
        return self._hooks.apply_tags(TagStage.PURGE_TERM, tags, resolved, taxonomy)

    def get_tags_for_emit_term(
        self,
        term: TermEntity | int | None,
        taxonomy: str = "",
        related: bool = True,
    ) -> list[str]:
        """Tags to attach to a term archive's cached response."""
        resolved = self._resolve_term(term, taxonomy)
        if resolved is None:
            return self._hooks.apply_tags(TagStage.EMIT_TERM, [], None, taxonomy)
        taxonomy = taxonomy or resolved.taxonomy

        tags = [self.term_tag(resolved)]
        if related:
            tags += self._hooks.apply_tags(
                TagStage.EMIT_TERM_ANCESTOR_TERMS,
                self.ancestor_term_tags(resolved, taxonomy),
                resolved,
                taxonomy,
            )
            tags += self._hooks.apply_tags(
                TagStage.EMIT_TERM_RELATED_POSTS,
                self.related_post_tags(resolved, taxonomy),
                resolved,
                taxonomy,
            )
        return self._hooks.apply_tags(TagStage.EMIT_TERM, tags, resolved, taxonomy)

    def get_tags_for_purge_user(self, user: UserEntity | int | None) -> list[str]:
        """Tags to purge when a user (author) changes: the author tag."""
        if user is None:
            return []
        if isinstance(user, int):
            resolved = self._repo.get_user(user)
            return [self.author_tag(resolved)] if resolved is not None else []
        return [self.author_tag(user)]
