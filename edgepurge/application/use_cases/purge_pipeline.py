"""Purge pipeline: content-change event -> purge request -> normalized result.

One attempt runs synchronously to completion:
    Idle -> Eligible? -> TagsComputed -> PolicyApproved -> RequestSent -> Normalized
No retries. A failure is reported once (returned, logged, handed to the
purged listeners); the surrounding system surfaces it and the next event
or a manual purge retries.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from edgepurge.application.dtos.purge import PurgeOutcome
from edgepurge.application.interfaces.repositories import IContentRepository
from edgepurge.application.interfaces.services import ClientFactory
from edgepurge.application.services.hooks import HookRegistry
from edgepurge.application.services.purge_policy import PurgePolicy, fired_key
from edgepurge.application.services.settings_service import SettingsService, as_flag
from edgepurge.application.services.tag_builder import TagBuilder
from edgepurge.core.constants import CREDENTIALS_KEY
from edgepurge.core.purge_scope import PurgeScope, current_scope
from edgepurge.domain.entities.content import (
    ContentEntity,
    TermEntity,
    UserEntity,
)
from edgepurge.domain.entities.events import (
    ContentChangedEvent,
    PostChangedEvent,
    TermChangedEvent,
)
from edgepurge.domain.entities.purge_context import PurgeContext
from edgepurge.domain.enums import ObjectKind, PurgeMethod
from edgepurge.domain.exceptions import EdgePurgeException
from edgepurge.domain.value_objects.core import PurgeResponse

logger = logging.getLogger(__name__)

PURGE_ALL_ACTION = "plugin/purge_all"
PURGE_URLS_ACTION = "plugin/purge_url"


def _split_codes(value: Any) -> list[str]:
    if isinstance(value, str):
        return [code.strip() for code in value.split(",") if code.strip()]
    return [str(code) for code in value or []]


class PurgePipeline:
    """Owns the tag builder, policy and client factory for the process."""

    def __init__(
        self,
        repository: IContentRepository,
        settings: SettingsService,
        tag_builder: TagBuilder,
        policy: PurgePolicy,
        client_factory: ClientFactory,
        hooks: HookRegistry | None = None,
    ) -> None:
        self._repo = repository
        self._settings = settings
        self.tags = tag_builder
        self.policy = policy
        self._client_factory = client_factory
        self._hooks = hooks or HookRegistry()

    # ---- event entry points ----

    def handle_event(
        self, event: ContentChangedEvent, scope: PurgeScope | None = None
    ) -> PurgeOutcome:
        """Dispatch on the event's object kind."""
        if isinstance(event, TermChangedEvent):
            return self.handle_term_changed(event, scope)
        return self.handle_post_changed(event, scope)

    def handle_post_changed(
        self, event: PostChangedEvent, scope: PurgeScope | None = None
    ) -> PurgeOutcome:
        scope = scope or current_scope()
        if event.action not in self.policy.post_actions():
            return PurgeOutcome.skipped("action")
        post = self._repo.get_post(event.object_id)
        if not self.policy.is_post_eligible(post, scope):
            return PurgeOutcome.skipped("ineligible")
        return self._run(event.action, ObjectKind.POST, post, "", scope)

    def handle_term_changed(
        self, event: TermChangedEvent, scope: PurgeScope | None = None
    ) -> PurgeOutcome:
        scope = scope or current_scope()
        if event.action not in self.policy.term_actions():
            return PurgeOutcome.skipped("action")
        term = self._repo.get_term(event.term_id, event.taxonomy)
        if not self.policy.is_term_eligible(term, scope):
            return PurgeOutcome.skipped("ineligible")
        meta = {"term_taxonomy_id": event.term_taxonomy_id} if event.term_taxonomy_id else None
        return self._run(event.action, ObjectKind.TERM, term, event.taxonomy, scope, meta)

    def handle_user_changed(
        self, user_id: int, action: str, scope: PurgeScope | None = None
    ) -> PurgeOutcome:
        scope = scope or current_scope()
        user = self._repo.get_user(user_id)
        if not self.policy.is_user_eligible(user, scope):
            return PurgeOutcome.skipped("ineligible")
        return self._run(action, ObjectKind.USER, user, "", scope)

    def _run(
        self,
        action: str,
        kind: ObjectKind,
        entity: ContentEntity,
        taxonomy: str,
        scope: PurgeScope,
        meta: Mapping[str, Any] | None = None,
    ) -> PurgeOutcome:
        settings = self._settings.get_settings()
        try:
            context = self.purge_info(action, kind, entity, taxonomy, settings=settings)
            for name, value in (meta or {}).items():
                context.set_meta(name, value)
            approved = self.policy.do_purge(context, settings)
        except EdgePurgeException as exc:
            return PurgeOutcome.failed(self._aborted(action, exc, settings))
        if not approved:
            logger.debug("Purge vetoed: %s", context.to_log_string())
            return PurgeOutcome.skipped("policy", context)
        scope.mark_fired(fired_key(kind))
        response = self.purge_request(context, settings)
        return PurgeOutcome(purged=True, context=context, response=response)

    def _aborted(
        self, action: str, exc: EdgePurgeException, settings: Mapping[str, Any]
    ) -> PurgeResponse:
        """Misconfiguration found while building the context: no request is sent."""
        if as_flag(settings.get("log-errors")):
            logger.warning("Purge aborted for %s: %s", action, exc.message)
        return PurgeResponse.failure(exc.message)

    # ---- context assembly ----

    def purge_info(
        self,
        action: str,
        object_kind: ObjectKind | None = None,
        obj: ContentEntity | int | None = None,
        taxonomy: str = "",
        settings: Mapping[str, Any] | None = None,
    ) -> PurgeContext:
        """Build the context for a purge of obj (or of nothing, for site purges).

        Purge type/method/network come from settings (blank falls back to
        invalidate/url/staging); purge objects are computed for the method.
        """
        settings = settings if settings is not None else self._settings.get_settings()
        entity = self._resolve(object_kind, obj, taxonomy)
        context = PurgeContext(
            trigger_action=action,
            object_kind=object_kind,
            object_id=entity.id if entity is not None else (obj if isinstance(obj, int) else None),
            object_group=entity.group if entity is not None else "",
            hostname=str(settings.get("hostname") or ""),
            version=str(settings.get("version") or ""),
            **self.policy.purge_parameters(settings),
        )
        if object_kind is not None:
            context.purge_objects = self._purge_objects(context, entity, taxonomy, settings)
        return context

    def _resolve(
        self, kind: ObjectKind | None, obj: ContentEntity | int | None, taxonomy: str
    ) -> ContentEntity | None:
        if not isinstance(obj, int) or isinstance(obj, bool):
            return obj
        if kind is ObjectKind.POST:
            return self._repo.get_post(obj)
        if kind is ObjectKind.TERM:
            return self._repo.get_term(obj, taxonomy)
        if kind is ObjectKind.USER:
            return self._repo.get_user(obj)
        return None

    def _purge_objects(
        self,
        context: PurgeContext,
        entity: ContentEntity | None,
        taxonomy: str,
        settings: Mapping[str, Any],
    ) -> list[str]:
        method = context.wire_method
        if method == PurgeMethod.CPCODE.value:
            return _split_codes(settings.get("purge-cpcodes"))
        if method == PurgeMethod.URL.value:
            return [entity.url] if entity is not None and entity.url else []

        related = as_flag(settings.get("purge-related"))
        always = as_flag(settings.get("purge-default"))
        if isinstance(entity, TermEntity) or context.object_kind is ObjectKind.TERM:
            return self.tags.get_tags_for_purge_term(entity, taxonomy, related, always)
        if isinstance(entity, UserEntity) or context.object_kind is ObjectKind.USER:
            return self.tags.get_tags_for_purge_user(entity)
        return self.tags.get_tags_for_purge_post(entity, related, always)

    # ---- request ----

    def purge_request(
        self, context: PurgeContext, settings: Mapping[str, Any] | None = None
    ) -> PurgeResponse:
        """Send the purge described by context; never raises.

        Configuration errors (no usable signer, URL purge without hostname)
        become a failed response before any network attempt.
        """
        settings = settings if settings is not None else self._settings.get_settings()
        try:
            client = self._client_factory(settings[CREDENTIALS_KEY])
            response = client.purge(
                context.wire_method,
                context.path,
                context.purge_objects,
                hostname=context.hostname,
                log=as_flag(settings.get("log-purges")),
            )
        except EdgePurgeException as exc:
            response = PurgeResponse.failure(exc.message)

        if response.success:
            logger.info("Purged: %s", context.to_log_string())
        elif as_flag(settings.get("log-errors")):
            logger.warning("Purge failed (%s): %s", response.error, context.to_log_string())
        self._hooks.notify_purged(response, context)
        return response

    # ---- manual actions ----

    def purge_all(self) -> tuple[PurgeResponse, PurgeContext | None]:
        """Purge every cached object of the current site via its site tag.

        The context is None when the stored settings could not describe a purge.
        """
        settings = self._settings.get_settings()
        try:
            context = self.purge_info(PURGE_ALL_ACTION, settings=settings)
            context.purge_method = PurgeMethod.TAGS.value
        except EdgePurgeException as exc:
            return self._aborted(PURGE_ALL_ACTION, exc, settings), None
        context.purge_objects = self.tags.get_tags_for_purge_multisite_site()
        return self.purge_request(context, settings), context

    def purge_urls(self, urls: Sequence[str]) -> tuple[PurgeResponse, PurgeContext | None]:
        """Purge the given URLs on the configured hostname."""
        settings = self._settings.get_settings()
        try:
            context = self.purge_info(PURGE_URLS_ACTION, settings=settings)
            context.purge_method = PurgeMethod.URL.value
        except EdgePurgeException as exc:
            return self._aborted(PURGE_URLS_ACTION, exc, settings), None
        context.purge_objects = list(urls)
        return self.purge_request(context, settings), context

    def verify_credentials(self, overrides: Mapping[str, Any] | None = None) -> PurgeResponse:
        """Check that the (optionally overridden) credentials authenticate."""
        settings = self._settings.get_settings(overrides)
        try:
            client = self._client_factory(settings[CREDENTIALS_KEY])
            return client.test_creds(log=as_flag(settings.get("log-purges")))
        except EdgePurgeException as exc:
            return PurgeResponse.failure(exc.message)

    def validate_settings(
        self, new_settings: Mapping[str, Any] | None = None, verify_creds: bool = True
    ) -> tuple[dict[str, Any], list[dict[str, str]]]:
        """Complete settings plus problems found, optionally checking credentials live."""
        return self._settings.validate(
            new_settings,
            verify_creds=self.verify_credentials if verify_creds else None,
        )
