"""FastAPI application entry point.

Wiring only: purge engine composition, lifespan, exception handlers,
middleware, routers. Settings are loaded inside create_app() so that tests
can set env (and clear the get_settings cache) before calling it.
"""

import httpx
from fastapi import FastAPI

from edgepurge.api.v1 import api_router
from edgepurge.application.interfaces import (
    IContentRepository,
    ISettingsStore,
    SignerFactory,
)
from edgepurge.application.services.cache_headers import CacheHeaderService
from edgepurge.application.services.hooks import HookRegistry
from edgepurge.application.services.purge_policy import PurgePolicy
from edgepurge.application.services.settings_service import SettingsService
from edgepurge.application.services.tag_builder import TagBuilder
from edgepurge.application.use_cases.purge_pipeline import PurgePipeline
from edgepurge.core.config import Settings, get_settings
from edgepurge.core.exception_handlers import register_exception_handlers
from edgepurge.core.lifespan import create_lifespan
from edgepurge.domain.entities.content import SiteInfo
from edgepurge.infrastructure.content.memory_repository import InMemoryContentRepository
from edgepurge.infrastructure.external.akamai.client import build_user_agent
from edgepurge.infrastructure.external.akamai.factory import (
    PurgeClientFactory,
    load_signer_factory,
)
from edgepurge.infrastructure.persistence.settings_store import (
    InMemorySettingsStore,
    JsonFileSettingsStore,
)
from edgepurge.middleware import PurgeScopeMiddleware


def _default_repository(settings: Settings) -> IContentRepository:
    return InMemoryContentRepository(
        SiteInfo(
            url=settings.site_url,
            is_multisite=settings.multisite,
            site_id=settings.site_id,
            platform_name=settings.platform_name,
            platform_version=settings.platform_version,
        )
    )


def _default_store(settings: Settings) -> ISettingsStore:
    if settings.settings_file:
        return JsonFileSettingsStore(settings.settings_file)
    return InMemorySettingsStore()


def create_app(
    content_repository: IContentRepository | None = None,
    settings_store: ISettingsStore | None = None,
    signer_factory: SignerFactory | None = None,
    http_client: httpx.Client | None = None,
    hooks: HookRegistry | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Every collaborator can be injected; anything omitted is built from
    environment settings (in-memory content, in-memory or JSON settings,
    the configured signer factory, a fresh httpx client).
    """
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    repository = content_repository or _default_repository(settings)
    store = settings_store or _default_store(settings)
    hooks = hooks or HookRegistry()
    owns_http_client = http_client is None
    http_client = http_client or httpx.Client(timeout=settings.http_timeout_seconds)
    signer_factory = signer_factory or load_signer_factory(settings.signer_factory)

    settings_service = SettingsService(store, site_url=lambda: repository.site_info().url)
    tag_builder = TagBuilder(repository, settings_service, hooks)
    client_factory = PurgeClientFactory(
        signer_factory,
        http_client,
        build_user_agent(repository.site_info(), settings.app_name, settings.app_version),
    )
    pipeline = PurgePipeline(
        repository,
        settings_service,
        tag_builder,
        PurgePolicy(hooks),
        client_factory,
        hooks,
    )

    app.state.content_repository = repository
    app.state.settings_service = settings_service
    app.state.hooks = hooks
    app.state.purge_pipeline = pipeline
    app.state.purge_client_factory = client_factory
    app.state.cache_headers = CacheHeaderService(tag_builder, settings_service)
    app.state.purge_http_client = http_client
    app.state.owns_http_client = owns_http_client

    register_exception_handlers(app)
    app.add_middleware(PurgeScopeMiddleware)
    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()
