"""
History Service - answers location queries and records new stays
"""
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from travel_history.models.internal_models import BlogPost, Stay
from travel_history.services import timeline
from travel_history.services.stay_store import StayStore

logger = logging.getLogger(__name__)

DEFAULT_GROUP = "unknown"
DEFAULT_COUNTRY = "unknown"
DEFAULT_TIMEZONE_OFFSET = 0


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class HistoryService:
    """
    Intermediary between the stay store and the HTTP layer.

    Each call re-reads the full list of stays from the store; nothing is
    cached between calls.
    """

    def __init__(self, store: StayStore, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.clock = clock

    async def get_complete_history(self) -> List[Stay]:
        return await self.store.fetch_all()

    async def get_current_location(self) -> Optional[Stay]:
        """Get the stay in progress right now, or None"""
        return timeline.current_stay(await self.store.fetch_all(), self.clock())

    async def get_next_location(self) -> Optional[Stay]:
        """Get the next planned stay, if one has been recorded"""
        return timeline.next_stay(await self.store.fetch_all(), self.clock())

    async def get_historical_location(self, target: datetime) -> Optional[Stay]:
        return timeline.stay_at(await self.store.fetch_all(), target)

    async def get_historical_period(self, start: datetime, end: datetime) -> List[Stay]:
        """Get every stay overlapping [start, end), in chronological order"""
        return timeline.stays_during(await self.store.fetch_all(), start, end)

    async def get_previous_location(self, target: datetime) -> Optional[Stay]:
        return timeline.previous_stay(await self.store.fetch_all(), target)

    async def get_latest_blog_post(self) -> Optional[BlogPost]:
        return timeline.latest_blog_post(await self.store.fetch_all())

    async def add_trip(
        self,
        start: datetime,
        end: Optional[datetime],
        name: str,
        group: Optional[str] = None,
        country: Optional[str] = None,
        timezone_offset: Optional[int] = None,
    ) -> Stay:
        """
        Add a new stay to the history.

        Any open stay that started before this one is closed at ``start``.
        Fields left as None are inherited from the stay immediately before
        ``start`` in the history as it was before closing anything, falling
        back to "unknown" / 0.

        Args:
            start: When the stay began
            end: When the stay ends, or None if not known yet
            name: Place name
            group: Trip label
            country: Country name
            timezone_offset: Offset from UTC in hours

        Returns:
            The stored stay with its assigned id
        """
        existing = await self.store.fetch_all()

        for stay in timeline.open_stays_before(existing, start):
            logger.info(
                f"Closing open stay {stay.id} ({stay.name}) at {start.isoformat()}",
                extra={"stay_id": stay.id},
            )
            await self.store.update_end(stay.id, start)

        previous = timeline.previous_stay(existing, start)

        if group is None:
            group = previous.group if previous else DEFAULT_GROUP
        if country is None:
            country = previous.country if previous else DEFAULT_COUNTRY
        if timezone_offset is None:
            timezone_offset = previous.timezone_offset if previous else DEFAULT_TIMEZONE_OFFSET

        stay = await self.store.insert(start, end, group, name, country, timezone_offset)
        logger.info(f"Added stay {stay.id} at {name}", extra={"stay_id": stay.id, "group": group})
        return stay

    async def update_location(
        self,
        stay_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        group: Optional[str] = None,
        name: Optional[str] = None,
        country: Optional[str] = None,
        timezone_offset: Optional[int] = None,
    ) -> bool:
        """
        Update some or all of the details of a stay.

        Only the fields that are not None are written, one store write each.

        Returns:
            False if no stay has that id (nothing is written), True otherwise
        """
        if not await self._exists(stay_id):
            return False

        if start is not None:
            await self.store.update_start(stay_id, start)
        if end is not None:
            await self.store.update_end(stay_id, end)
        if group is not None:
            await self.store.update_group(stay_id, group)
        if name is not None:
            await self.store.update_name(stay_id, name)
        if country is not None:
            await self.store.update_country(stay_id, country)
        if timezone_offset is not None:
            await self.store.update_timezone(stay_id, timezone_offset)

        return True

    async def add_blog_post(self, stay_id: int, url: str, name: str) -> bool:
        if not await self._exists(stay_id):
            return False
        await self.store.set_blog_post(stay_id, url, name)
        return True

    async def add_map(self, stay_id: int, url: str) -> bool:
        if not await self._exists(stay_id):
            return False
        await self.store.set_map_url(stay_id, url)
        return True

    async def delete_blog_post(self, stay_id: int) -> bool:
        if not await self._exists(stay_id):
            return False
        await self.store.clear_blog_post(stay_id)
        return True

    async def _exists(self, stay_id: int) -> bool:
        if await self.store.fetch_by_id(stay_id) is None:
            logger.info(f"No stay with id {stay_id}, nothing written", extra={"stay_id": stay_id})
            return False
        return True
