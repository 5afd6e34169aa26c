"""
Stay schemas for API requests/responses
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from datetime import datetime
from typing import Optional

from travel_history.core.validation import as_utc


class BlogPostRead(BaseModel):
    """Schema for a stay's blog post link"""
    url: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class StayRead(BaseModel):
    """Schema for stay read response"""
    id: int
    start: datetime
    end: Optional[datetime]
    group: str
    name: str
    country: str
    timezone_offset: int
    blog_post: Optional[BlogPostRead] = None
    map_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class StayCreate(BaseModel):
    """Schema for recording a new stay. Omitted fields are inherited from the previous stay."""
    start: datetime
    end: Optional[datetime] = None
    name: str = Field(..., min_length=1, max_length=600)
    group: Optional[str] = Field(None, max_length=600)
    country: Optional[str] = Field(None, max_length=600)
    timezone_offset: Optional[int] = None

    @field_validator('start', 'end')
    @classmethod
    def normalize_to_utc(cls, v):
        return as_utc(v)

    @model_validator(mode='after')
    def check_end_after_start(self):
        if self.end is not None and self.end < self.start:
            raise ValueError("end must not be before start")
        return self


class StayUpdate(BaseModel):
    """Schema for updating a stay. Only supplied, non-null fields are written."""
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    name: Optional[str] = Field(None, min_length=1, max_length=600)
    group: Optional[str] = Field(None, max_length=600)
    country: Optional[str] = Field(None, max_length=600)
    timezone_offset: Optional[int] = None

    @field_validator('start', 'end')
    @classmethod
    def normalize_to_utc(cls, v):
        return as_utc(v)

    @model_validator(mode='after')
    def check_end_after_start(self):
        if self.start is not None and self.end is not None and self.end < self.start:
            raise ValueError("end must not be before start")
        return self


class BlogPostAttach(BaseModel):
    """Schema for attaching a blog post to a stay"""
    url: str = Field(..., min_length=1, max_length=6000)
    name: str = Field(..., min_length=1, max_length=6000)


class MapAttach(BaseModel):
    """Schema for attaching a map image to a stay"""
    url: str = Field(..., min_length=1, max_length=6000)
