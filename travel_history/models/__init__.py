"""
Models package for the travel history service.

Contains the ORM table mapping and the internal records used by the
timeline engine.
"""

from .internal_models import BlogPost, Stay

__all__ = [
    "BlogPost",
    "Stay",
]
