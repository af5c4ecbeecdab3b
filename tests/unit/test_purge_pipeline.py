"""Tests for PurgePipeline: event -> eligibility -> tags -> policy -> request."""

import json
import logging
from unittest.mock import MagicMock

import httpx
import pytest

from edgepurge.application.services.hooks import HookRegistry, ListStage
from edgepurge.application.use_cases.purge_pipeline import PurgePipeline
from edgepurge.core.constants import ERR_BAD_CLIENT, ERR_URL_WITHOUT_HOSTNAME
from edgepurge.core.purge_scope import PurgeScope
from edgepurge.domain.entities.content import PostEntity
from edgepurge.domain.entities.events import PostChangedEvent, TermChangedEvent
from edgepurge.domain.enums import ObjectKind
from edgepurge.infrastructure.content.memory_repository import InMemoryContentRepository
from edgepurge.infrastructure.external.akamai.factory import PurgeClientFactory
from edgepurge.infrastructure.persistence.settings_store import InMemorySettingsStore
from tests.fakes import API_HOST, ApiRecorder, stored_settings

SCENARIO_TAGS = {
    "tenant-p-42",
    "tenant-a-7",
    "tenant-t-3",
    "tenant-tm-post",
    "tenant-tm-home",
    "tenant-tm-feed",
    "tenant-tm-404",
}


def _objects(request: httpx.Request) -> list[str]:
    return json.loads(request.content)["objects"]


class TestPostChanged:
    def test_end_to_end_purge(self, pipeline: PurgePipeline, api: ApiRecorder) -> None:
        outcome = pipeline.handle_post_changed(PostChangedEvent(42, "save_post"), PurgeScope())

        assert outcome.purged is True
        assert outcome.response.success is True
        assert len(api.requests) == 1
        request = api.last
        assert str(request.url) == f"https://{API_HOST}/ccu/v3/invalidate/tags/"
        objects = _objects(request)
        assert set(objects) == SCENARIO_TAGS
        assert len(objects) == len(set(objects))
        assert outcome.context.object_kind is ObjectKind.POST
        assert outcome.context.object_group == "post"

    def test_second_post_event_in_same_scope_is_skipped(
        self, pipeline: PurgePipeline, api: ApiRecorder
    ) -> None:
        scope = PurgeScope()
        pipeline.handle_post_changed(PostChangedEvent(42, "save_post"), scope)
        outcome = pipeline.handle_post_changed(PostChangedEvent(42, "trashed_post"), scope)

        assert outcome.purged is False
        assert outcome.skipped_reason == "ineligible"
        assert len(api.requests) == 1

    def test_new_scope_purges_again(self, pipeline: PurgePipeline, api: ApiRecorder) -> None:
        pipeline.handle_post_changed(PostChangedEvent(42, "save_post"), PurgeScope())
        pipeline.handle_post_changed(PostChangedEvent(42, "save_post"), PurgeScope())
        assert len(api.requests) == 2

    def test_unknown_action_is_ignored(self, pipeline: PurgePipeline, api: ApiRecorder) -> None:
        outcome = pipeline.handle_post_changed(PostChangedEvent(42, "wp_insert_comment"))
        assert outcome.skipped_reason == "action"
        assert api.requests == []

    def test_action_list_is_filterable(
        self, pipeline: PurgePipeline, hooks: HookRegistry, api: ApiRecorder
    ) -> None:
        hooks.add_list_filter(ListStage.POST_ACTIONS, lambda actions: actions + ["edit_post"])
        assert pipeline.handle_post_changed(PostChangedEvent(42, "edit_post")).purged is True

    def test_ineligible_post_type(
        self,
        pipeline: PurgePipeline,
        repository: InMemoryContentRepository,
        api: ApiRecorder,
    ) -> None:
        repository.add_post(PostEntity(id=5, post_type="revision"))
        outcome = pipeline.handle_post_changed(PostChangedEvent(5, "save_post"))
        assert outcome.skipped_reason == "ineligible"
        assert api.requests == []

    def test_ineligible_status_never_reaches_tag_builder(
        self,
        pipeline: PurgePipeline,
        repository: InMemoryContentRepository,
    ) -> None:
        repository.add_post(PostEntity(id=6, status="auto-draft"))
        spy = MagicMock(wraps=pipeline.tags)
        pipeline.tags = spy

        outcome = pipeline.handle_post_changed(PostChangedEvent(6, "save_post"))

        assert outcome.skipped_reason == "ineligible"
        spy.get_tags_for_purge_post.assert_not_called()
        assert spy.method_calls == []

    def test_failed_gate_does_not_mark_scope(
        self, pipeline: PurgePipeline, settings_store: InMemorySettingsStore, api: ApiRecorder
    ) -> None:
        settings_store.save(stored_settings(purge_on_update=0))
        scope = PurgeScope()

        outcome = pipeline.handle_post_changed(PostChangedEvent(42, "save_post"), scope)

        assert outcome.skipped_reason == "policy"
        assert outcome.context is not None
        assert scope.fired == frozenset()
        assert api.requests == []


class TestPolicyOverrides:
    def test_veto_sends_nothing(
        self, pipeline: PurgePipeline, hooks: HookRegistry, api: ApiRecorder
    ) -> None:
        hooks.add_do_purge_filter(lambda decision, ctx: False)
        outcome = pipeline.handle_post_changed(PostChangedEvent(42, "save_post"))
        assert outcome.purged is False
        assert api.requests == []

    def test_force_sends_request(
        self,
        pipeline: PurgePipeline,
        hooks: HookRegistry,
        settings_store: InMemorySettingsStore,
        api: ApiRecorder,
    ) -> None:
        settings_store.save(stored_settings(purge_on_update=0))
        hooks.add_do_purge_filter(lambda decision, ctx: True)
        outcome = pipeline.handle_post_changed(PostChangedEvent(42, "save_post"))
        assert outcome.purged is True
        assert len(api.requests) == 1

    def test_filter_may_mutate_context(
        self, pipeline: PurgePipeline, hooks: HookRegistry, api: ApiRecorder
    ) -> None:
        def to_production(decision, ctx):
            ctx.purge_network = "production"
            ctx.purge_objects = ctx.purge_objects[:1]
            return decision

        hooks.add_do_purge_filter(to_production)
        pipeline.handle_post_changed(PostChangedEvent(42, "save_post"))
        assert api.last.url.path == "/ccu/v3/invalidate/tags/production"
        assert _objects(api.last) == ["tenant-tm-post"]


class TestPurgeMethods:
    def test_url_method_purges_post_url(
        self, pipeline: PurgePipeline, settings_store: InMemorySettingsStore, api: ApiRecorder
    ) -> None:
        settings_store.save(stored_settings(purge_method="arl", purge_network="staging"))
        pipeline.handle_post_changed(PostChangedEvent(42, "save_post"))

        assert api.last.url.path == "/ccu/v3/invalidate/url/staging"
        assert json.loads(api.last.content) == {
            "objects": ["https://example.com/hello/"],
            "hostname": "example.com",
        }

    def test_cpcode_method_uses_configured_codes(
        self, pipeline: PurgePipeline, settings_store: InMemorySettingsStore, api: ApiRecorder
    ) -> None:
        settings_store.save(stored_settings(purge_method="cpcode", purge_cpcodes="123, 456,123"))
        pipeline.handle_post_changed(PostChangedEvent(42, "save_post"))

        assert api.last.url.path == "/ccu/v3/invalidate/cpcode/"
        assert _objects(api.last) == ["123", "456"]

    def test_related_and_default_settings(
        self, pipeline: PurgePipeline, settings_store: InMemorySettingsStore, api: ApiRecorder
    ) -> None:
        settings_store.save(stored_settings(purge_related=0, purge_default=0))
        pipeline.handle_post_changed(PostChangedEvent(42, "save_post"))
        assert _objects(api.last) == ["tenant-p-42"]


class TestTermChanged:
    def test_term_purge(self, pipeline: PurgePipeline, api: ApiRecorder) -> None:
        event = TermChangedEvent(3, "edit_term", term_taxonomy_id=30, taxonomy="category")
        outcome = pipeline.handle_event(event, PurgeScope())

        assert outcome.purged is True
        assert outcome.context.meta == {"term_taxonomy_id": 30}
        assert "?term_taxonomy_id=30" in outcome.context.to_log_string()
        assert {"tenant-t-3", "tenant-p-42", "tenant-tm-home"} <= set(_objects(api.last))

    def test_non_cacheable_taxonomy(
        self, pipeline: PurgePipeline, api: ApiRecorder
    ) -> None:
        outcome = pipeline.handle_term_changed(TermChangedEvent(3, "edit_term", taxonomy="nav_menu"))
        assert outcome.purged is False
        assert api.requests == []

    def test_post_and_term_each_fire_once(self, pipeline: PurgePipeline, api: ApiRecorder) -> None:
        scope = PurgeScope()
        pipeline.handle_event(PostChangedEvent(42, "save_post"), scope)
        pipeline.handle_event(TermChangedEvent(3, "edit_term", taxonomy="category"), scope)
        pipeline.handle_event(TermChangedEvent(3, "delete_term", taxonomy="category"), scope)
        assert len(api.requests) == 2
        assert scope.fired == {"purge_post", "purge_term"}


class TestFailures:
    """Failures come back as data, are logged and reach the purged listeners."""

    def test_no_signer_fails_without_request(
        self,
        pipeline: PurgePipeline,
        http_client: httpx.Client,
        api: ApiRecorder,
        hooks: HookRegistry,
    ) -> None:
        received = []
        hooks.add_purged_listener(lambda response, ctx: received.append(response))
        pipeline._client_factory = PurgeClientFactory(lambda creds: None, http_client, "ua")

        outcome = pipeline.handle_post_changed(PostChangedEvent(42, "save_post"))

        assert outcome.purged is True
        assert outcome.response.error == ERR_BAD_CLIENT
        assert received == [outcome.response]
        assert api.requests == []

    def test_url_purge_without_hostname(
        self, pipeline: PurgePipeline, settings_store: InMemorySettingsStore, api: ApiRecorder
    ) -> None:
        settings_store.save(stored_settings(hostname=""))
        response, _ = pipeline.purge_urls(["https://example.com/"])
        assert response.error == ERR_URL_WITHOUT_HOSTNAME
        assert api.requests == []

    def test_api_error_logged_when_log_errors(
        self,
        pipeline: PurgePipeline,
        settings_store: InMemorySettingsStore,
        api: ApiRecorder,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        settings_store.save(stored_settings(log_errors=1))
        api.responder = lambda request: httpx.Response(403, json={"detail": "forbidden"})

        with caplog.at_level(logging.WARNING):
            outcome = pipeline.handle_post_changed(PostChangedEvent(42, "save_post"))

        assert outcome.response.error == "AKAMAI_API_ERROR: forbidden."
        assert "Purge failed (AKAMAI_API_ERROR: forbidden.)" in caplog.text
        assert "purgectx/- => save_post:post/post/42" in caplog.text

    def test_listener_error_does_not_propagate(
        self, pipeline: PurgePipeline, hooks: HookRegistry
    ) -> None:
        def broken(response, ctx):
            raise RuntimeError("listener bug")

        later = MagicMock()
        hooks.add_purged_listener(broken)
        hooks.add_purged_listener(later)
        outcome = pipeline.handle_post_changed(PostChangedEvent(42, "save_post"))
        assert outcome.response.success is True
        later.assert_called_once_with(outcome.response, outcome.context)

    @pytest.mark.parametrize(
        "setting, value",
        [("purge_method", "bogus"), ("purge_type", "obliterate"), ("purge_network", "everywhere")],
    )
    def test_invalid_stored_choice_is_a_failed_outcome(
        self,
        pipeline: PurgePipeline,
        settings_store: InMemorySettingsStore,
        api: ApiRecorder,
        _fresh_purge_scope: PurgeScope,
        setting: str,
        value: str,
    ) -> None:
        settings_store.save(stored_settings(**{setting: value}))

        outcome = pipeline.handle_post_changed(PostChangedEvent(42, "save_post"))

        assert outcome.purged is False
        assert outcome.skipped_reason == "error"
        assert outcome.response.success is False
        assert f"{value!r}" in outcome.response.error
        assert api.requests == []
        assert _fresh_purge_scope.fired == frozenset()

    def test_do_purge_filter_writing_bad_value(
        self, pipeline: PurgePipeline, hooks: HookRegistry, api: ApiRecorder
    ) -> None:
        def corrupt(decision, ctx):
            ctx.purge_network = "moon"
            return decision

        hooks.add_do_purge_filter(corrupt)
        outcome = pipeline.handle_term_changed(TermChangedEvent(3, "edit_term", taxonomy="category"))

        assert outcome.skipped_reason == "error"
        assert outcome.response.error.startswith("Invalid purge-network 'moon'")
        assert api.requests == []

    def test_aborted_purge_logged_when_log_errors(
        self,
        pipeline: PurgePipeline,
        settings_store: InMemorySettingsStore,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        settings_store.save(stored_settings(purge_method="bogus", log_errors=1))
        with caplog.at_level(logging.WARNING):
            pipeline.handle_post_changed(PostChangedEvent(42, "save_post"))
        assert "Purge aborted for save_post: Invalid purge-method 'bogus'" in caplog.text

    def test_rejecting_signer_factory_is_a_bad_client(
        self, pipeline: PurgePipeline, http_client: httpx.Client, api: ApiRecorder
    ) -> None:
        def reject(credentials):
            raise ValueError("client_secret is not valid base64")

        pipeline._client_factory = PurgeClientFactory(reject, http_client, "ua")

        outcome = pipeline.handle_post_changed(PostChangedEvent(42, "save_post"))

        assert outcome.purged is True
        assert outcome.response.error == ERR_BAD_CLIENT
        assert pipeline.verify_credentials().error == ERR_BAD_CLIENT
        assert api.requests == []


class TestManualActions:
    def test_purge_all(self, pipeline: PurgePipeline, api: ApiRecorder) -> None:
        response, context = pipeline.purge_all()
        assert response.success is True
        assert context.purge_method == "tags"
        assert _objects(api.last) == ["tenant-all"]
        assert api.last.url.path == "/ccu/v3/invalidate/tags/"

    def test_purge_all_asks_builder_for_site_tags(
        self, pipeline: PurgePipeline, api: ApiRecorder
    ) -> None:
        pipeline.tags = MagicMock(wraps=pipeline.tags)
        pipeline.purge_all()
        pipeline.tags.get_tags_for_purge_multisite_site.assert_called_once_with()

    def test_purge_urls(self, pipeline: PurgePipeline, api: ApiRecorder) -> None:
        response, _ = pipeline.purge_urls(["https://example.com/a/", "https://example.com/a/"])
        assert response.success is True
        assert json.loads(api.last.content) == {
            "objects": ["https://example.com/a/"],
            "hostname": "example.com",
        }

    def test_purge_urls_with_invalid_stored_type(
        self, pipeline: PurgePipeline, settings_store: InMemorySettingsStore, api: ApiRecorder
    ) -> None:
        settings_store.save(stored_settings(purge_type="obliterate"))
        response, context = pipeline.purge_urls(["https://example.com/a/"])
        assert response.success is False
        assert context is None
        assert api.requests == []

    def test_verify_credentials(self, pipeline: PurgePipeline, api: ApiRecorder) -> None:
        api.responder = lambda request: httpx.Response(401, json={"detail": "bad token"})
        response = pipeline.verify_credentials({"credentials": {"client-token": "other"}})
        assert response.error == "AKAMAI_API_ERROR: bad token."
        assert api.last.url.path == "/-/client-api/active-grants/implicit"

    def test_validate_settings_checks_credentials_live(
        self, pipeline: PurgePipeline, api: ApiRecorder
    ) -> None:
        api.responder = lambda request: httpx.Response(401, json={"detail": "bad token"})
        _, errors = pipeline.validate_settings()
        assert [e["code"] for e in errors] == ["invalid-credentials"]


class TestUserChanged:
    def test_user_purges_author_tag_once_per_scope(
        self, pipeline: PurgePipeline, api: ApiRecorder
    ) -> None:
        scope = PurgeScope()
        outcome = pipeline.handle_user_changed(7, "profile_update", scope)

        assert outcome.purged is True
        assert outcome.context.object_kind is ObjectKind.USER
        assert _objects(api.last) == ["tenant-a-7"]
        assert scope.fired == {"purge_user"}

        again = pipeline.handle_user_changed(7, "profile_update", scope)
        assert again.skipped_reason == "ineligible"
        assert len(api.requests) == 1

    def test_unknown_user(self, pipeline: PurgePipeline, api: ApiRecorder) -> None:
        assert pipeline.handle_user_changed(99, "profile_update").skipped_reason == "ineligible"
        assert api.requests == []
