"""Content-change event ingestion: thin routes delegating to PurgePipeline.

Routes are sync so the blocking purge request runs in the threadpool.
"""

import logging

from fastapi import APIRouter

from edgepurge.api.v1.dependencies import PipelineDep
from edgepurge.application.dtos.purge import PurgeOutcome
from edgepurge.domain.entities.events import PostChangedEvent, TermChangedEvent
from edgepurge.schemas.purge import (
    EventPurgeResponse,
    PostChangedRequest,
    PurgeResponseBody,
    TermChangedRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(outcome: PurgeOutcome) -> EventPurgeResponse:
    return EventPurgeResponse(
        purged=outcome.purged,
        skipped_reason=outcome.skipped_reason,
        response=(
            PurgeResponseBody.from_response(outcome.response)
            if outcome.response is not None
            else None
        ),
        context=outcome.context.to_dict() if outcome.context is not None else None,
    )


@router.post("/posts", response_model=EventPurgeResponse)
def post_changed(body: PostChangedRequest, pipeline: PipelineDep) -> EventPurgeResponse:
    """Purge the tags of a changed post (and its related objects)."""
    event = PostChangedEvent(object_id=body.object_id, action=body.action)
    return _to_response(pipeline.handle_post_changed(event))


@router.post("/terms", response_model=EventPurgeResponse)
def term_changed(body: TermChangedRequest, pipeline: PipelineDep) -> EventPurgeResponse:
    """Purge the tags of a changed term (its ancestors and tagged posts)."""
    event = TermChangedEvent(
        term_id=body.term_id,
        action=body.action,
        term_taxonomy_id=body.term_taxonomy_id,
        taxonomy=body.taxonomy,
    )
    return _to_response(pipeline.handle_term_changed(event))
