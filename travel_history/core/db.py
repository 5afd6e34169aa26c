from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from typing import AsyncGenerator

from travel_history.config.settings import settings

engine = create_async_engine(
    settings.database.url, echo=settings.database.echo, pool_pre_ping=True
)
SessionLocal = async_sessionmaker(
    bind=engine, autoflush=False, expire_on_commit=False
)

# SQLAlchemy declarative base for models
Base = declarative_base()


async def init_models() -> None:
    """Create any missing tables. The service owns its single table."""
    # Registers HistoryRecord on Base.metadata
    from travel_history.models import history  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    async with SessionLocal() as db:
        yield db
