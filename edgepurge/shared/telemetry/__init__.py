"""Logging setup."""

from edgepurge.shared.telemetry.logging import PurgeScopeFilter, setup_logging

__all__ = ["PurgeScopeFilter", "setup_logging"]
