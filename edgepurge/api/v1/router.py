"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from edgepurge.api.v1.dependencies.
"""

from fastapi import APIRouter

from edgepurge.api.v1.endpoints import (
    cache_headers,
    credentials,
    events,
    health,
    purge,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(events.router, prefix="/events", tags=["events"])
api_router.include_router(purge.router, prefix="/purge", tags=["purge"])
api_router.include_router(
    credentials.router, prefix="/credentials", tags=["credentials"]
)
api_router.include_router(
    cache_headers.router, prefix="/cache-headers", tags=["cache-headers"]
)
