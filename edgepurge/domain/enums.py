"""Domain enumerations for purge events and purge requests."""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class ObjectKind(_ValuesMixin, str, Enum):
    """Kind of content object that triggered a purge.

    Carried explicitly on every event from the moment it enters the
    pipeline; never inferred from the object's runtime type.
    """

    POST = "post"
    TERM = "term"
    USER = "user"


class PurgeType(_ValuesMixin, str, Enum):
    """Fast Purge action: mark stale (invalidate) or remove (delete)."""

    INVALIDATE = "invalidate"
    DELETE = "delete"


class PurgeMethod(_ValuesMixin, str, Enum):
    """What the purge objects are: cache tags, URLs or CP codes.

    ARL is the legacy settings alias for URL; it is translated only when
    the wire path is built.
    """

    TAGS = "tags"
    URL = "url"
    CPCODE = "cpcode"
    ARL = "arl"

    @property
    def wire_value(self) -> str:
        """Return the value sent in the API path."""
        if self is PurgeMethod.ARL:
            return PurgeMethod.URL.value
        return self.value


class PurgeNetwork(_ValuesMixin, str, Enum):
    """Edge network to purge. ALL maps to an empty path segment."""

    STAGING = "staging"
    PRODUCTION = "production"
    ALL = "all"

    @property
    def wire_value(self) -> str:
        """Return the value sent in the API path."""
        if self is PurgeNetwork.ALL:
            return ""
        return self.value
