"""Domain value objects for edgepurge.

Value objects are immutable and validate themselves on construction.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PurgeResponse:
    """Normalized outcome of one purge or credential-check request.

    Invariant: success is False exactly when error is set.

    Attributes:
        success: True when the API accepted the request.
        raw_response: The transport response (or transport error), if any.
        error: Human-readable failure description, None on success.
    """

    success: bool
    raw_response: Any = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.success == (self.error is not None):
            raise ValueError(
                "PurgeResponse requires success=False exactly when error is set"
            )

    @classmethod
    def failure(cls, error: str, raw_response: Any = None) -> "PurgeResponse":
        """Build a failed response carrying the given error message."""
        return cls(success=False, raw_response=raw_response, error=error)

    @property
    def status_code(self) -> int | None:
        """HTTP status of the raw response when it has one."""
        return getattr(self.raw_response, "status_code", None)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable summary (raw response reduced to its status)."""
        return {
            "success": self.success,
            "error": self.error,
            "status_code": self.status_code,
        }
