# File: outreach_cms/models/base.py
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from outreach_cms.db.database import Base


def utcnow() -> datetime:
    """Naive UTC timestamp; every DateTime column stores UTC without tzinfo"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BaseModel(Base):
    __abstract__ = True

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class ContentBaseModel(BaseModel):
    """Admin-managed content: timestamps plus a weak reference to the creator"""
    __abstract__ = True

    updated_at = Column(DateTime, nullable=False, default=utcnow)
    created_by = Column(String(64), nullable=True)  # formatted user id, no FK
