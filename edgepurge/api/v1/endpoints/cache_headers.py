"""Preview of the cache headers a page view would carry."""

from fastapi import APIRouter, Query

from edgepurge.api.v1.dependencies import CacheHeadersDep, ContentRepositoryDep
from edgepurge.domain.exceptions import ResourceNotFoundException
from edgepurge.schemas.purge import CacheHeadersResponse

router = APIRouter()


@router.get("/posts/{post_id}", response_model=CacheHeadersResponse)
def post_headers(
    post_id: int,
    service: CacheHeadersDep,
    repository: ContentRepositoryDep,
    logged_in: bool = Query(default=False),
) -> CacheHeadersResponse:
    post = repository.get_post(post_id)
    if post is None:
        raise ResourceNotFoundException("post", post_id)
    return CacheHeadersResponse(headers=service.headers_for_post(post, logged_in))


@router.get("/terms/{term_id}", response_model=CacheHeadersResponse)
def term_headers(
    term_id: int,
    service: CacheHeadersDep,
    repository: ContentRepositoryDep,
    taxonomy: str = Query(default=""),
    logged_in: bool = Query(default=False),
) -> CacheHeadersResponse:
    term = repository.get_term(term_id, taxonomy)
    if term is None:
        raise ResourceNotFoundException("term", term_id)
    return CacheHeadersResponse(
        headers=service.headers_for_term(term, taxonomy, logged_in)
    )
