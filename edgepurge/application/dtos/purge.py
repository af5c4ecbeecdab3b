"""DTOs for purge use cases."""

from dataclasses import dataclass

from edgepurge.domain.entities.purge_context import PurgeContext
from edgepurge.domain.value_objects.core import PurgeResponse


@dataclass(frozen=True)
class PurgeOutcome:
    """Result of handling one content-change event.

    purged is True only when a request was sent; skipped_reason names
    the gate that stopped the pipeline otherwise. "error" means the
    settings could not describe a purge and response carries the reason.
    """

    purged: bool
    context: PurgeContext | None = None
    response: PurgeResponse | None = None
    skipped_reason: str | None = None

    @classmethod
    def skipped(cls, reason: str, context: PurgeContext | None = None) -> "PurgeOutcome":
        return cls(purged=False, context=context, skipped_reason=reason)

    @classmethod
    def failed(cls, response: PurgeResponse) -> "PurgeOutcome":
        return cls(purged=False, response=response, skipped_reason="error")
