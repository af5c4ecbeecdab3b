"""Domain value objects."""

from edgepurge.domain.value_objects.core import PurgeResponse

__all__ = ["PurgeResponse"]
