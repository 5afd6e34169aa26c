"""
Middleware package for the travel history service.
"""

from .request_context import RequestContextMiddleware

__all__ = [
    "RequestContextMiddleware",
]
