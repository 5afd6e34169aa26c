"""
Shared FastAPI dependencies: stay store, history service, write-key check.
"""
import logging
from typing import Optional

from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from travel_history.config.settings import Settings, get_settings
from travel_history.core.db import get_db
from travel_history.core.exceptions import InvalidAuthKeyError, MissingAuthKeyError
from travel_history.core.security import verify_write_key
from travel_history.services.history_service import HistoryService
from travel_history.services.stay_store import SqlAlchemyStayStore, StayStore

logger = logging.getLogger(__name__)


def get_stay_store(db: AsyncSession = Depends(get_db)) -> StayStore:
    return SqlAlchemyStayStore(db)


def get_history_service(store: StayStore = Depends(get_stay_store)) -> HistoryService:
    return HistoryService(store)


def get_request_id(request: Request) -> str:
    return getattr(request.state, 'request_id', 'unknown')


async def require_write_key(
    request: Request,
    key: Optional[str] = Query(None, description="Write key, if not sent as a header"),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Reject write requests that do not carry the configured key.

    The key is read from the configured header first, then from the ``key``
    query parameter.
    """
    header_name = settings.security.api_key_header
    supplied = request.headers.get(header_name) or key

    if not supplied:
        raise MissingAuthKeyError(header_name)

    if not settings.security.auth_key:
        logger.warning("Write rejected: no write key is configured (set SECURITY_AUTH_KEY)")

    if not verify_write_key(supplied, settings.security.auth_key):
        logger.warning(
            f"Invalid write key for {request.method} {request.url.path}",
            extra={
                'request_id': get_request_id(request),
                'client_ip': request.client.host if request.client else 'unknown',
            }
        )
        raise InvalidAuthKeyError()
