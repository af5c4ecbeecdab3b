"""Logging configuration for the application."""

import logging
import sys

from edgepurge.core.config import get_settings
from edgepurge.core.purge_scope import peek_scope

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [fired=%(purge_fired)s] %(message)s"

# httpx logs every request line at INFO; the purge client logs its own.
_QUIET_LOGGERS = ("httpx", "httpcore")


class PurgeScopeFilter(logging.Filter):
    """Stamp each record with the object kinds already purged in this context."""

    def filter(self, record: logging.LogRecord) -> bool:
        scope = peek_scope()
        record.purge_fired = ",".join(sorted(scope.fired)) if scope and scope.fired else "-"
        return True


def setup_logging() -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise settings.log_level.
    Output goes to stdout; every record carries the current purge scope.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level)
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(PurgeScopeFilter())
    logging.basicConfig(level=log_level, format=LOG_FORMAT, handlers=[handler])
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))
