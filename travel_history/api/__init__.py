# API endpoints and routers

from .history_endpoints import router as history_router
from .health_endpoints import router as health_router

__all__ = [
    "history_router",
    "health_router",
]
