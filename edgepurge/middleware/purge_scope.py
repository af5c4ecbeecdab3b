"""Purge scope middleware.

Opens a fresh PurgeScope for every HTTP request so that each object kind
purges at most once per request, however many change events the request
produces. Uses raw ASGI (no BaseHTTPMiddleware) so the context variable
is visible to the route and to sync routes run in the threadpool.
"""

from typing import Callable

from edgepurge.core.purge_scope import purge_scope


def PurgeScopeMiddleware(app: Callable) -> Callable:
    """Wrap each HTTP request in its own purge scope. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        with purge_scope():
            await app(scope, receive, send)

    return asgi_app
