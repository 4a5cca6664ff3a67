"""HTTP middleware."""

from productcache.api.middleware.correlation import CorrelationMiddleware

__all__ = ["CorrelationMiddleware"]
