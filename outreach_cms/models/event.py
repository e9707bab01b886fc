# File: outreach_cms/models/event.py
from sqlalchemy import Column, DateTime, Index, String, Text

from outreach_cms.models.base import ContentBaseModel


class Event(ContentBaseModel):
    __tablename__ = "events"

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    date = Column(DateTime, nullable=False)
    image_url = Column(String(1000), nullable=False)

    location = Column(String(255), nullable=True)
    category = Column(String(100), nullable=True)

    __table_args__ = (
        Index("ix_events_date_created_at", "date", "created_at"),
    )
