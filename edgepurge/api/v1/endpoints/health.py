"""Health check endpoint for liveness probes and operator sanity checks."""

from fastapi import APIRouter, Request

from edgepurge.api.v1.dependencies import ContentRepositoryDep
from edgepurge.core.config import get_settings
from edgepurge.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check(request: Request, repository: ContentRepositoryDep) -> HealthResponse:
    factory = getattr(request.app.state, "purge_client_factory", None)
    return HealthResponse(
        version=get_settings().app_version,
        signer_configured=bool(factory and factory.signer_configured),
        multisite=repository.site_info().is_multisite,
    )
