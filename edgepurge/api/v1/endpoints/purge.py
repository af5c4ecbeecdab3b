"""Manual purges: the whole site, or a list of URLs."""

from fastapi import APIRouter

from edgepurge.api.v1.dependencies import PipelineDep
from edgepurge.schemas.purge import PurgeResponseBody, PurgeUrlsRequest

router = APIRouter()


@router.post("/all", response_model=PurgeResponseBody)
def purge_all(pipeline: PipelineDep) -> PurgeResponseBody:
    """Purge every cached object of the current site."""
    response, context = pipeline.purge_all()
    message = None
    if response.success:
        message = (
            f"Purge all successful (using cache tag '{context.purge_objects[0]}', "
            f"on {context.purge_network} network)."
        )
    return PurgeResponseBody.from_response(response, message)


@router.post("/urls", response_model=PurgeResponseBody)
def purge_urls(body: PurgeUrlsRequest, pipeline: PipelineDep) -> PurgeResponseBody:
    """Purge the given URLs on the configured hostname."""
    response, context = pipeline.purge_urls(body.urls)
    message = None
    if response.success:
        message = f"Purged {len(context.purge_objects)} URL(s) on {context.hostname}."
    return PurgeResponseBody.from_response(response, message)
