"""Purge API schemas: content-change events, manual purges, header previews."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from edgepurge.domain.value_objects.core import PurgeResponse


class PostChangedRequest(BaseModel):
    """A post lifecycle event (save_post, trashed_post, ...)."""

    object_id: int = Field(..., ge=1)
    action: str = Field(..., min_length=1)


class TermChangedRequest(BaseModel):
    """A term lifecycle event (edit_term, delete_term)."""

    term_id: int = Field(..., ge=1)
    action: str = Field(..., min_length=1)
    term_taxonomy_id: int = Field(default=0, ge=0)
    taxonomy: str = ""


class PurgeUrlsRequest(BaseModel):
    """URLs to purge on the configured hostname."""

    urls: list[str] = Field(..., min_length=1)

    @field_validator("urls")
    @classmethod
    def strip_blank(cls, v: list[str]) -> list[str]:
        urls = [u.strip() for u in v if u and u.strip()]
        if not urls:
            raise ValueError("at least one non-blank URL is required")
        return urls


class CredentialsVerifyRequest(BaseModel):
    """Optional settings overrides (e.g. credentials being edited) to check."""

    settings: dict[str, Any] = Field(default_factory=dict)


class PurgeResponseBody(BaseModel):
    """Normalized purge outcome."""

    success: bool
    error: str | None = None
    status_code: int | None = None
    message: str | None = None

    @classmethod
    def from_response(
        cls, response: PurgeResponse, message: str | None = None
    ) -> "PurgeResponseBody":
        return cls(**response.to_dict(), message=message)


class EventPurgeResponse(BaseModel):
    """Result of handling one content-change event."""

    purged: bool
    skipped_reason: str | None = None
    response: PurgeResponseBody | None = None
    context: dict[str, Any] | None = None


class CacheHeadersResponse(BaseModel):
    """Headers a cached view of the object would carry."""

    headers: dict[str, str] = Field(default_factory=dict)
