"""Credential verification against the grants introspection endpoint."""

from fastapi import APIRouter

from edgepurge.api.v1.dependencies import PipelineDep
from edgepurge.schemas.purge import CredentialsVerifyRequest, PurgeResponseBody

router = APIRouter()


@router.post("/verify", response_model=PurgeResponseBody)
def verify_credentials(
    pipeline: PipelineDep, body: CredentialsVerifyRequest | None = None
) -> PurgeResponseBody:
    """Check stored credentials, or the overrides in the body when given."""
    overrides = body.settings if body is not None else None
    response = pipeline.verify_credentials(overrides)
    return PurgeResponseBody.from_response(
        response, "Credentials verified." if response.success else None
    )
