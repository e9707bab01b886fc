# File: outreach_cms/crud/event.py
from datetime import date, datetime, time, timedelta
from typing import Optional, Sequence, Union, Any

from sqlalchemy.orm import Session

from outreach_cms.crud.base import CRUDBase, DEFAULT_LIMIT, DEFAULT_PAGE, Page
from outreach_cms.models.event import Event
from outreach_cms.schemas.event import EventCreate, EventUpdate

DateBound = Union[date, datetime]


class CRUDEvent(CRUDBase[Event, EventCreate, EventUpdate]):
    search_fields = ("title", "description")

    def order_by(self) -> Sequence[Any]:
        return (Event.date.desc(), Event.created_at.desc(), Event.id.desc())

    def get_page(
        self,
        db: Session,
        *,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
        search: Optional[str] = None,
        start_date: Optional[DateBound] = None,
        end_date: Optional[DateBound] = None,
    ) -> Page[Event]:
        """
        Both date bounds are inclusive. A bare date as end bound covers that
        whole calendar day.
        """
        query = self.apply_search(db.query(Event), search)

        if start_date is not None:
            if not isinstance(start_date, datetime):
                start_date = datetime.combine(start_date, time.min)
            query = query.filter(Event.date >= start_date)

        if end_date is not None:
            if isinstance(end_date, datetime):
                query = query.filter(Event.date <= end_date)
            else:
                next_day = datetime.combine(end_date + timedelta(days=1), time.min)
                query = query.filter(Event.date < next_day)

        return self.paginate(query, page=page, limit=limit)


event = CRUDEvent(Event)
