"""Health check API schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness plus whether purges can actually be signed."""

    status: str = Field(default="ok", description="Service status")
    version: str
    signer_configured: bool = Field(
        description="False means every purge fails fast with a bad-client error"
    )
    multisite: bool
