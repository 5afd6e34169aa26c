"""
Internal data models for the travel history service.

These are the plain records the timeline engine reasons about. They are
decoupled from the ORM so the engine can run against any store.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class BlogPost:
    """Link to the blog post written about a stay"""
    url: str
    name: str  # display name shown in the front end, not necessarily the post title


@dataclass(frozen=True)
class Stay:
    """
    A visit to one location over the half-open interval [start, end).

    ``end`` is None while the stay is ongoing or its end is unknown.
    """
    id: int
    start: datetime
    end: Optional[datetime]
    group: str
    name: str
    country: str
    timezone_offset: int
    blog_post: Optional[BlogPost] = None
    map_url: Optional[str] = None

    def is_open(self) -> bool:
        return self.end is None
