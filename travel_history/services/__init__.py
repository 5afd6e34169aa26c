# Business logic services

from .history_service import HistoryService
from .stay_store import StayStore, SqlAlchemyStayStore

__all__ = [
    "HistoryService",
    "StayStore",
    "SqlAlchemyStayStore",
]
