"""
Stay Store - persistence interface for stays and its SQLAlchemy implementation
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from travel_history.core.exceptions import StoreUnavailableError
from travel_history.core.validation import as_utc
from travel_history.models.history import HistoryRecord
from travel_history.models.internal_models import BlogPost, Stay

logger = logging.getLogger(__name__)


class StayStore(ABC):
    """Interface for stay persistence operations."""

    @abstractmethod
    async def fetch_all(self) -> List[Stay]:
        """Return every stored stay."""
        ...

    @abstractmethod
    async def fetch_by_id(self, stay_id: int) -> Optional[Stay]:
        """Return a stay by id, or None if not found."""
        ...

    @abstractmethod
    async def insert(
        self,
        start: datetime,
        end: Optional[datetime],
        group: str,
        name: str,
        country: str,
        timezone_offset: int,
    ) -> Stay:
        """Persist a new stay; the store assigns its id."""
        ...

    @abstractmethod
    async def update_start(self, stay_id: int, value: datetime) -> None: ...

    @abstractmethod
    async def update_end(self, stay_id: int, value: datetime) -> None: ...

    @abstractmethod
    async def update_group(self, stay_id: int, value: str) -> None: ...

    @abstractmethod
    async def update_name(self, stay_id: int, value: str) -> None: ...

    @abstractmethod
    async def update_country(self, stay_id: int, value: str) -> None: ...

    @abstractmethod
    async def update_timezone(self, stay_id: int, value: int) -> None: ...

    @abstractmethod
    async def set_blog_post(self, stay_id: int, url: str, name: str) -> None:
        """Set both blog post columns together."""
        ...

    @abstractmethod
    async def clear_blog_post(self, stay_id: int) -> None:
        """Clear both blog post columns together."""
        ...

    @abstractmethod
    async def set_map_url(self, stay_id: int, url: str) -> None: ...


def _to_stay(record: HistoryRecord) -> Stay:
    blog_post = None
    if record.blog_post_url is not None and record.blog_post_name is not None:
        blog_post = BlogPost(url=record.blog_post_url, name=record.blog_post_name)

    return Stay(
        id=record.id,
        start=as_utc(record.start_time),
        end=as_utc(record.end_time),
        group=record.group,
        name=record.name,
        country=record.country,
        timezone_offset=record.timezone_offset,
        blog_post=blog_post,
        map_url=record.map_url,
    )


class SqlAlchemyStayStore(StayStore):
    """Stay store backed by the ``history`` table. Every write commits on its own."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def fetch_all(self) -> List[Stay]:
        try:
            stmt = select(HistoryRecord).order_by(HistoryRecord.id).execution_options(populate_existing=True)
            result = await self.db.execute(stmt)
            return [_to_stay(record) for record in result.scalars().all()]
        except SQLAlchemyError as exc:
            logger.error(f"Failed to fetch stays: {exc}", exc_info=True)
            raise StoreUnavailableError("fetch_all") from exc

    async def fetch_by_id(self, stay_id: int) -> Optional[Stay]:
        try:
            record = await self.db.get(HistoryRecord, stay_id, populate_existing=True)
        except SQLAlchemyError as exc:
            logger.error(f"Failed to fetch stay {stay_id}: {exc}", exc_info=True)
            raise StoreUnavailableError("fetch_by_id", {"stay_id": stay_id}) from exc
        return _to_stay(record) if record else None

    async def insert(
        self,
        start: datetime,
        end: Optional[datetime],
        group: str,
        name: str,
        country: str,
        timezone_offset: int,
    ) -> Stay:
        record = HistoryRecord(
            start_time=as_utc(start),
            end_time=as_utc(end),
            group=group,
            name=name,
            country=country,
            timezone_offset=timezone_offset,
        )
        try:
            self.db.add(record)
            await self.db.commit()
            await self.db.refresh(record)
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error(f"Failed to insert stay '{name}': {exc}", exc_info=True)
            raise StoreUnavailableError("insert") from exc
        return _to_stay(record)

    async def update_start(self, stay_id: int, value: datetime) -> None:
        await self._update(stay_id, start_time=as_utc(value))

    async def update_end(self, stay_id: int, value: datetime) -> None:
        await self._update(stay_id, end_time=as_utc(value))

    async def update_group(self, stay_id: int, value: str) -> None:
        await self._update(stay_id, group=value)

    async def update_name(self, stay_id: int, value: str) -> None:
        await self._update(stay_id, name=value)

    async def update_country(self, stay_id: int, value: str) -> None:
        await self._update(stay_id, country=value)

    async def update_timezone(self, stay_id: int, value: int) -> None:
        await self._update(stay_id, timezone_offset=value)

    async def set_blog_post(self, stay_id: int, url: str, name: str) -> None:
        await self._update(stay_id, blog_post_url=url, blog_post_name=name)

    async def clear_blog_post(self, stay_id: int) -> None:
        await self._update(stay_id, blog_post_url=None, blog_post_name=None)

    async def set_map_url(self, stay_id: int, url: str) -> None:
        await self._update(stay_id, map_url=url)

    async def _update(self, stay_id: int, **values: Any) -> None:
        stmt = update(HistoryRecord).where(HistoryRecord.id == stay_id).values(**values)
        try:
            await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error(
                f"Failed to update stay {stay_id}: {exc}",
                exc_info=True,
                extra={"stay_id": stay_id, "fields": sorted(values)},
            )
            raise StoreUnavailableError("update", {"stay_id": stay_id, "fields": sorted(values)}) from exc
