# File: outreach_cms/schemas/event.py
from datetime import datetime
from typing import List, Optional

from pydantic import field_validator

from outreach_cms.schemas.base import CamelModel, ContentOut, IdInput, Pagination, to_naive_utc


class EventCreate(CamelModel):
    # Presence of title/description/date/image_url is checked by the endpoint
    # so the 400 can name every required field at once.
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[datetime] = None
    image_url: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v):
        return to_naive_utc(v)


class EventUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[datetime] = None
    image_url: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v):
        return to_naive_utc(v)


class EventUpdateRequest(EventUpdate):
    event_id: IdInput = None


class Event(ContentOut):
    title: str
    description: str
    date: datetime
    image_url: str
    location: Optional[str] = None
    category: Optional[str] = None


class EventListResponse(CamelModel):
    events: List[Event]
    pagination: Pagination


class EventMutationResponse(CamelModel):
    message: str
    event: Event
