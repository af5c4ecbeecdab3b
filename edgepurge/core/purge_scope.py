"""Request-scoped purge guard using contextvars.

A purge for a given object kind fires at most once per execution
context (one inbound request or one process invocation). The scope is
not a durable lock: two concurrent requests touching the same object
each get their own scope and may both purge.

Usage:
    with purge_scope() as scope:
        service.handle_post_changed(event)   # uses current_scope()
        service.handle_post_changed(event, scope=scope)  # explicit
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar


class PurgeScope:
    """Monotonic set of coarse action keys that already fired."""

    def __init__(self) -> None:
        self._fired: set[str] = set()

    def has_fired(self, key: str) -> bool:
        return key in self._fired

    def mark_fired(self, key: str) -> None:
        self._fired.add(key)

    @property
    def fired(self) -> frozenset[str]:
        return frozenset(self._fired)


_current_scope: ContextVar[PurgeScope | None] = ContextVar(
    "current_purge_scope", default=None
)


def current_scope() -> PurgeScope:
    """Return the scope for this context, creating one if none is open."""
    scope = _current_scope.get()
    if scope is None:
        scope = PurgeScope()
        _current_scope.set(scope)
    return scope


def peek_scope() -> PurgeScope | None:
    """Return the open scope without creating one."""
    return _current_scope.get()


@contextmanager
def purge_scope() -> Iterator[PurgeScope]:
    """Open a fresh scope for the duration of the block."""
    scope = PurgeScope()
    token = _current_scope.set(scope)
    try:
        yield scope
    finally:
        _current_scope.reset(token)
