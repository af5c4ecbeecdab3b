"""Response header values that tag cached pages for later purging.

Headers are never produced for logged-in viewers: their views must not
be cached by the edge.
"""

from __future__ import annotations

from collections.abc import Sequence

from edgepurge.application.services.settings_service import SettingsService, as_flag
from edgepurge.application.services.tag_builder import TagBuilder
from edgepurge.core.constants import CACHE_CONTROL_HEADER, EDGE_CACHE_TAG_HEADER
from edgepurge.domain.entities.content import PostEntity, TermEntity

TAG_HEADER_DELIMITER = ", "


class CacheHeaderService:
    """Builds Edge-Cache-Tag and Cache-Control values for a response."""

    def __init__(self, tag_builder: TagBuilder, settings: SettingsService) -> None:
        self._tags = tag_builder
        self._settings = settings

    def cache_control(self, logged_in: bool = False) -> str | None:
        """Configured Cache-Control value, or None when it should not be sent."""
        settings = self._settings.get_settings()
        if logged_in or not as_flag(settings["emit-cache-control"]):
            return None
        return str(settings["cache-default-header"] or "") or None

    def edge_cache_tag(self, tags: Sequence[str], logged_in: bool = False) -> str | None:
        """Join tags (plus the site-wide tags) into one header value."""
        if logged_in or not as_flag(self._settings.setting("emit-cache-tags")):
            return None
        tags = [*self._tags.always_cached_tags(), *self._tags.get_tags_for_emit_universal(), *tags]
        return TAG_HEADER_DELIMITER.join(dict.fromkeys(t for t in tags if t))

    def headers_for_post(
        self, post: PostEntity | int | None, logged_in: bool = False
    ) -> dict[str, str]:
        """Headers for a single post view."""
        related = as_flag(self._settings.setting("cache-related-tags"))
        tags = self._tags.get_tags_for_emit_post(post, related) if not logged_in else []
        return self._build(tags, logged_in)

    def headers_for_term(
        self,
        term: TermEntity | int | None,
        taxonomy: str = "",
        logged_in: bool = False,
    ) -> dict[str, str]:
        """Headers for a term archive view."""
        related = as_flag(self._settings.setting("cache-related-tags"))
        tags = (
            self._tags.get_tags_for_emit_term(term, taxonomy, related)
            if not logged_in
            else []
        )
        return self._build(tags, logged_in)

    def _build(self, tags: Sequence[str], logged_in: bool) -> dict[str, str]:
        headers: dict[str, str] = {}
        tag_value = self.edge_cache_tag(tags, logged_in)
        if tag_value:
            headers[EDGE_CACHE_TAG_HEADER] = tag_value
        control = self.cache_control(logged_in)
        if control:
            headers[CACHE_CONTROL_HEADER] = control
        return headers
