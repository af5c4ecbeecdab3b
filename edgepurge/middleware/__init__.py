"""HTTP middleware. Applied in main app; first added = outermost."""

from edgepurge.middleware.purge_scope import PurgeScopeMiddleware

__all__ = ["PurgeScopeMiddleware"]
