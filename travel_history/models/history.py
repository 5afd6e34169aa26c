"""
History model for persisted stays
"""
from sqlalchemy import Column, Integer, String, DateTime

from travel_history.core.db import Base


class HistoryRecord(Base):
    """
    One row per stay at a location.
    The blog post columns are written and cleared together.
    """
    __tablename__ = "history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    end_time = Column(DateTime(timezone=True), nullable=True)
    group = Column("group", String(600), nullable=False)
    name = Column(String(600), nullable=False)
    country = Column(String(600), nullable=False)
    timezone_offset = Column(Integer, nullable=False, default=0)
    blog_post_url = Column(String(6000), nullable=True)
    blog_post_name = Column(String(6000), nullable=True)
    map_url = Column(String(6000), nullable=True)
