"""Pydantic request/response models for the HTTP API."""

from edgepurge.schemas.health import HealthResponse
from edgepurge.schemas.purge import (
    CacheHeadersResponse,
    CredentialsVerifyRequest,
    EventPurgeResponse,
    PostChangedRequest,
    PurgeResponseBody,
    PurgeUrlsRequest,
    TermChangedRequest,
)

__all__ = [
    "CacheHeadersResponse",
    "CredentialsVerifyRequest",
    "EventPurgeResponse",
    "HealthResponse",
    "PostChangedRequest",
    "PurgeResponseBody",
    "PurgeUrlsRequest",
    "TermChangedRequest",
]
