# File: outreach_cms/crud/base.py
from dataclasses import dataclass
from math import ceil
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from outreach_cms.core.identifiers import ResourceId
from outreach_cms.db.database import Base
from outreach_cms.models.base import utcnow

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


@dataclass
class Page(Generic[ModelType]):
    items: List[ModelType]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return ceil(self.total / self.limit) if self.limit else 0

    @property
    def pagination(self) -> Dict[str, int]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "total_pages": self.total_pages,
        }


def like_pattern(search: str) -> str:
    """Substring pattern with LIKE wildcards escaped (escape char is backslash)"""
    escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Repository for one content collection.

    Storage errors (sqlalchemy.exc.SQLAlchemyError) propagate to the caller;
    "not found" is reported as None / False.
    """

    # text columns OR-combined by the `search` filter
    search_fields: Sequence[str] = ()

    def __init__(self, model: Type[ModelType]):
        self.model = model

    def order_by(self) -> Sequence[Any]:
        return (self.model.created_at.desc(), self.model.id.desc())

    def get(self, db: Session, id: Union[ResourceId, str, int]) -> Optional[ModelType]:
        rid = ResourceId.parse(id)
        if rid is None:
            return None
        return db.query(self.model).filter(self.model.id == int(rid)).first()

    def apply_search(self, query: Query, search: Optional[str]) -> Query:
        if not search or not self.search_fields:
            return query
        pattern = like_pattern(search)
        return query.filter(
            or_(*[getattr(self.model, f).ilike(pattern, escape="\\") for f in self.search_fields])
        )

    def paginate(self, query: Query, *, page: int, limit: int) -> Page[ModelType]:
        if page < 1 or limit < 1:
            raise ValueError("page and limit must be >= 1")
        total = query.order_by(None).count()
        items = (
            query.order_by(*self.order_by())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return Page(items=items, page=page, limit=limit, total=total)

    def get_page(
        self,
        db: Session,
        *,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
        search: Optional[str] = None,
    ) -> Page[ModelType]:
        query = self.apply_search(db.query(self.model), search)
        return self.paginate(query, page=page, limit=limit)

    def create(self, db: Session, *, obj_in: CreateSchemaType, created_by: Union[ResourceId, str, int]) -> ModelType:
        now = utcnow()
        db_obj = self.model(
            **obj_in.model_dump(exclude_unset=True),
            created_at=now,
            updated_at=now,
            created_by=ResourceId.format(created_by),
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def update(
        self, db: Session, *, id: Union[ResourceId, str, int], obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> bool:
        """Apply only the supplied fields; updated_at is always refreshed."""
        rid = ResourceId.parse(id)
        if rid is None:
            return False
        if isinstance(obj_in, dict):
            update_data = dict(obj_in)
        else:
            update_data = obj_in.model_dump(exclude_unset=True)
        update_data["updated_at"] = utcnow()

        updated = (
            db.query(self.model)
            .filter(self.model.id == int(rid))
            .update(update_data, synchronize_session=False)
        )
        db.commit()
        return updated > 0

    def remove(self, db: Session, *, id: Union[ResourceId, str, int]) -> bool:
        rid = ResourceId.parse(id)
        if rid is None:
            return False
        deleted = (
            db.query(self.model)
            .filter(self.model.id == int(rid))
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted > 0
