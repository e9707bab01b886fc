# File: outreach_cms/schemas/base.py
from datetime import date, datetime, time, timezone
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from outreach_cms.core.identifiers import ResourceId


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class RecordOut(CamelModel):
    id: str
    created_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def format_id(cls, v):
        return ResourceId.format(v)


class ContentOut(RecordOut):
    updated_at: datetime
    created_by: Optional[str] = None


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class MessageResponse(BaseModel):
    message: str


def to_naive_utc(value: Any) -> Any:
    """Coerce ISO strings, dates and aware datetimes into naive UTC datetimes"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time.min)
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.strip())
        except ValueError:
            raise ValueError("Invalid date format")
    else:
        raise ValueError("Invalid date format")
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def coerce_id_input(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


# Identifier supplied by a client; parsed with ResourceId by the endpoint
IdInput = Annotated[Optional[str], BeforeValidator(coerce_id_input)]
