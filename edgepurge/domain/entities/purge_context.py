"""Purge context: the mutable description of one purge event.

Built once per triggering event, mutated by do-purge filters before the
request is sent, discarded after the response is handed to listeners.
Stores the user-facing purge method and network values (e.g. 'arl',
'all'); translation to wire values happens only when building the path.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlencode

from edgepurge.core.constants import (
    DEFAULT_PURGE_METHOD,
    DEFAULT_PURGE_NETWORK,
    DEFAULT_PURGE_TYPE,
    PURGE_PATH_TEMPLATE,
)
from edgepurge.domain.enums import ObjectKind, PurgeMethod, PurgeNetwork, PurgeType
from edgepurge.domain.exceptions import ValidationException

DEFAULT_LOG_FORMAT = (
    "purgectx/{version} => {action}:{kind}/{group}/{id}{meta} ; "
    "p:{path} ; h:{hostname} ; o:{objects}"
)


def _checked(value: str | None, allowed: list[str], default: str, field: str) -> str:
    """Return value (or default when blank) after checking it is allowed."""
    if not value:
        return default
    if value not in allowed:
        raise ValidationException(
            f"Invalid {field} {value!r}; expected one of {', '.join(allowed)}",
            field=field,
        )
    return value


class PurgeContext:
    """Complete metadata for one purge request to the Fast Purge v3 API."""

    def __init__(
        self,
        trigger_action: str,
        object_kind: ObjectKind | None = None,
        object_id: int | None = None,
        object_group: str = "",
        hostname: str = "",
        purge_type: str | None = None,
        purge_method: str | None = None,
        purge_network: str | None = None,
        purge_objects: list[str] | None = None,
        version: str = "",
        meta: dict[str, Any] | None = None,
    ) -> None:
        self.trigger_action = trigger_action
        self.object_kind = object_kind
        self.object_id = object_id
        self.object_group = object_group
        self.hostname = hostname
        self.purge_type = purge_type
        self.purge_method = purge_method
        self.purge_network = purge_network
        self.purge_objects = list(purge_objects or [])
        self.version = version or "-"
        self.meta: dict[str, Any] = dict(meta or {})

    @property
    def purge_type(self) -> str:
        return self._purge_type

    @purge_type.setter
    def purge_type(self, value: str | None) -> None:
        self._purge_type = _checked(
            value, PurgeType.values(), DEFAULT_PURGE_TYPE, "purge-type"
        )

    @property
    def purge_method(self) -> str:
        return self._purge_method

    @purge_method.setter
    def purge_method(self, value: str | None) -> None:
        self._purge_method = _checked(
            value, PurgeMethod.values(), DEFAULT_PURGE_METHOD, "purge-method"
        )

    @property
    def purge_network(self) -> str:
        return self._purge_network

    @purge_network.setter
    def purge_network(self, value: str | None) -> None:
        self._purge_network = _checked(
            value, PurgeNetwork.values(), DEFAULT_PURGE_NETWORK, "purge-network"
        )

    @property
    def wire_method(self) -> str:
        """Purge method as sent to the API ('arl' becomes 'url')."""
        return PurgeMethod(self._purge_method).wire_value

    @property
    def wire_network(self) -> str:
        """Purge network as sent to the API ('all' becomes '')."""
        return PurgeNetwork(self._purge_network).wire_value

    @property
    def path(self) -> str:
        """The Fast Purge v3 request path for this context."""
        return PURGE_PATH_TEMPLATE.format(
            purge_type=self.purge_type,
            purge_method=self.wire_method,
            purge_network=self.wire_network,
        )

    def set_meta(self, name: str, value: Any) -> dict[str, Any]:
        """Set an extension metadata field and return the whole map."""
        self.meta[name] = value
        return self.meta

    def to_dict(self) -> dict[str, Any]:
        """Dasherized view, interchangeable with a settings mapping."""
        return {
            "trigger-action": self.trigger_action,
            "object-kind": self.object_kind.value if self.object_kind else "",
            "object-id": self.object_id,
            "object-group": self.object_group,
            "hostname": self.hostname,
            "purge-type": self.purge_type,
            "purge-method": self.purge_method,
            "purge-network": self.purge_network,
            "purge-objects": list(self.purge_objects),
            "path": self.path,
            "version": self.version,
            "meta": dict(self.meta),
        }

    def to_log_string(self, fmt: str = DEFAULT_LOG_FORMAT) -> str:
        """One-line serialization used in purge log records."""
        meta = "?" + urlencode(self.meta) if self.meta else ""
        return fmt.format(
            version=self.version,
            action=self.trigger_action,
            kind=self.object_kind.value if self.object_kind else "",
            group=self.object_group,
            id=self.object_id if self.object_id is not None else "",
            meta=meta,
            path=self.path,
            hostname=self.hostname,
            objects=",".join(self.purge_objects),
        )

    def __repr__(self) -> str:
        return f"PurgeContext({self.to_log_string()})"
