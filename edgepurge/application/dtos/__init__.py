"""Application DTOs."""

from edgepurge.application.dtos.purge import PurgeOutcome

__all__ = ["PurgeOutcome"]
