"""Application services: settings, tags, policy, hooks, cache headers."""

from edgepurge.application.services.cache_headers import CacheHeaderService
from edgepurge.application.services.hooks import HookRegistry, ListStage, TagStage
from edgepurge.application.services.purge_policy import PurgePolicy
from edgepurge.application.services.settings_service import SettingsService
from edgepurge.application.services.tag_builder import TagBuilder

__all__ = [
    "CacheHeaderService",
    "HookRegistry",
    "ListStage",
    "PurgePolicy",
    "SettingsService",
    "TagBuilder",
    "TagStage",
]
