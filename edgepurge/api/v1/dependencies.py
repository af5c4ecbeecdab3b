"""Presentation-layer dependency injection.

The purge engine is composed once in create_app() and kept on app.state;
routes depend only on these accessors, never on infrastructure directly.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from edgepurge.application.interfaces.repositories import IContentRepository
from edgepurge.application.services.cache_headers import CacheHeaderService
from edgepurge.application.use_cases.purge_pipeline import PurgePipeline


def get_purge_pipeline(request: Request) -> PurgePipeline:
    """Return the process-wide purge pipeline."""
    pipeline = getattr(request.app.state, "purge_pipeline", None)
    if pipeline is None:
        raise HTTPException(status_code=503, detail="Purge pipeline not configured")
    return pipeline


def get_cache_header_service(request: Request) -> CacheHeaderService:
    service = getattr(request.app.state, "cache_headers", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Cache header service not configured")
    return service


PipelineDep = Annotated[PurgePipeline, Depends(get_purge_pipeline)]
CacheHeadersDep = Annotated[CacheHeaderService, Depends(get_cache_header_service)]


def get_content_repository(request: Request) -> IContentRepository:
    repository = getattr(request.app.state, "content_repository", None)
    if repository is None:
        raise HTTPException(status_code=503, detail="Content repository not configured")
    return repository


ContentRepositoryDep = Annotated[IContentRepository, Depends(get_content_repository)]
