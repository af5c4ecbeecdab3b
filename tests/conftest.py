"""Pytest configuration and fixtures for edgepurge.

Fixtures build the purge engine around one small site: post 42 (author 7)
filed under category term 3, site code "tenant". The Fast Purge API is
faked with httpx.MockTransport; every request it receives is recorded.
"""

from collections.abc import Iterator

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from edgepurge.application.services.hooks import HookRegistry
from edgepurge.application.services.purge_policy import PurgePolicy
from edgepurge.application.services.settings_service import SettingsService
from edgepurge.application.services.tag_builder import TagBuilder
from edgepurge.application.use_cases.purge_pipeline import PurgePipeline
from edgepurge.core.purge_scope import PurgeScope, purge_scope
from edgepurge.domain.entities.content import (
    PostEntity,
    SiteInfo,
    TermEntity,
    UserEntity,
)
from edgepurge.infrastructure.content.memory_repository import InMemoryContentRepository
from edgepurge.infrastructure.external.akamai.factory import PurgeClientFactory
from edgepurge.infrastructure.persistence.settings_store import InMemorySettingsStore
from edgepurge.main import create_app
from tests.fakes import USER_AGENT, ApiRecorder, FakeSigner, stored_settings


@pytest.fixture(autouse=True)
def _fresh_purge_scope() -> Iterator[PurgeScope]:
    """Every test runs in its own purge scope."""
    with purge_scope() as scope:
        yield scope


@pytest.fixture
def site() -> SiteInfo:
    return SiteInfo(url="https://example.com", platform_name="CMS", platform_version="6.4")


@pytest.fixture
def repository(site: SiteInfo) -> InMemoryContentRepository:
    """Post 42 by author 7, in category 3."""
    repo = InMemoryContentRepository(site)
    repo.add_user(UserEntity(id=7, roles=("author",)))
    repo.add_post(
        PostEntity(id=42, post_type="post", status="publish", author_id=7, url="https://example.com/hello/")
    )
    repo.add_term(TermEntity(id=3, taxonomy="category", term_taxonomy_id=30))
    repo.assign_terms(42, "category", [3])
    return repo


@pytest.fixture
def settings_store() -> InMemorySettingsStore:
    return InMemorySettingsStore(stored_settings())


@pytest.fixture
def settings_service(
    settings_store: InMemorySettingsStore, repository: InMemoryContentRepository
) -> SettingsService:
    return SettingsService(settings_store, site_url=lambda: repository.site_info().url)


@pytest.fixture
def hooks() -> HookRegistry:
    return HookRegistry()


@pytest.fixture
def tag_builder(
    repository: InMemoryContentRepository,
    settings_service: SettingsService,
    hooks: HookRegistry,
) -> TagBuilder:
    return TagBuilder(repository, settings_service, hooks)


@pytest.fixture
def policy(hooks: HookRegistry) -> PurgePolicy:
    return PurgePolicy(hooks)


@pytest.fixture
def api() -> ApiRecorder:
    return ApiRecorder()


@pytest.fixture
def http_client(api: ApiRecorder) -> Iterator[httpx.Client]:
    with httpx.Client(transport=httpx.MockTransport(api)) as client:
        yield client


@pytest.fixture
def signer() -> FakeSigner:
    return FakeSigner()


@pytest.fixture
def client_factory(signer: FakeSigner, http_client: httpx.Client) -> PurgeClientFactory:
    return PurgeClientFactory(lambda credentials: signer, http_client, USER_AGENT)


@pytest.fixture
def pipeline(
    repository: InMemoryContentRepository,
    settings_service: SettingsService,
    tag_builder: TagBuilder,
    policy: PurgePolicy,
    client_factory: PurgeClientFactory,
    hooks: HookRegistry,
) -> PurgePipeline:
    return PurgePipeline(
        repository, settings_service, tag_builder, policy, client_factory, hooks
    )


@pytest.fixture
def app(
    repository: InMemoryContentRepository,
    settings_store: InMemorySettingsStore,
    signer: FakeSigner,
    http_client: httpx.Client,
    hooks: HookRegistry,
):
    """FastAPI app wired to the test site and the fake Fast Purge API."""
    return create_app(
        content_repository=repository,
        settings_store=settings_store,
        signer_factory=lambda credentials: signer,
        http_client=http_client,
        hooks=hooks,
    )


@pytest.fixture
async def client(app) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
