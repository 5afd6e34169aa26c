"""
Timeline queries over a snapshot of stays.

Every function is pure: it takes the full list of stays as currently stored
plus any reference instants and returns the matching stay(s). Stays are
treated as half-open intervals [start, end), with ``end=None`` meaning the
stay is still open.

Ties between stays sharing a start are broken by id, so "latest" means the
highest (start, id) and "earliest" the lowest.
"""
from datetime import datetime
from typing import Iterable, List, Optional

from travel_history.models.internal_models import BlogPost, Stay


def _chronological(stays: Iterable[Stay]) -> List[Stay]:
    return sorted(stays, key=lambda stay: (stay.start, stay.id))


def _latest(stays: Iterable[Stay]) -> Optional[Stay]:
    ordered = _chronological(stays)
    return ordered[-1] if ordered else None


def _earliest(stays: Iterable[Stay]) -> Optional[Stay]:
    ordered = _chronological(stays)
    return ordered[0] if ordered else None


def current_stay(stays: Iterable[Stay], now: datetime) -> Optional[Stay]:
    """The stay in progress at ``now``; a stay ending exactly at ``now`` is over."""
    return _latest(
        stay for stay in stays
        if stay.start < now and (stay.end is None or now < stay.end)
    )


def next_stay(stays: Iterable[Stay], now: datetime) -> Optional[Stay]:
    """The earliest stay starting strictly after ``now``."""
    return _earliest(stay for stay in stays if stay.start > now)


def stay_at(stays: Iterable[Stay], target: datetime) -> Optional[Stay]:
    """
    The stay someone was in at ``target``.

    Unlike current_stay the end boundary is inclusive: a stay whose end equals
    ``target`` still counts.
    """
    return _latest(
        stay for stay in stays
        if stay.start < target and (stay.end is None or stay.end >= target)
    )


def stays_during(
    stays: Iterable[Stay], period_start: datetime, period_end: datetime
) -> List[Stay]:
    """
    All stays overlapping the window [period_start, period_end), oldest first.

    A reversed window is not rejected here; it goes through the same two
    comparisons as any other window.
    """
    return _chronological(
        stay for stay in stays
        if stay.start < period_end and (stay.end is None or period_start < stay.end)
    )


def previous_stay(stays: Iterable[Stay], target: datetime) -> Optional[Stay]:
    """The latest stay starting before ``target``, whether or not it has ended."""
    return _latest(stay for stay in stays if stay.start < target)


def latest_blog_post(stays: Iterable[Stay]) -> Optional[BlogPost]:
    latest = _latest(stay for stay in stays if stay.blog_post is not None)
    return latest.blog_post if latest else None


def open_stays_before(stays: Iterable[Stay], start: datetime) -> List[Stay]:
    """Every open stay that began before ``start``."""
    return [stay for stay in stays if stay.is_open() and stay.start < start]
