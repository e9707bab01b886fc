# File: outreach_cms/crud/user.py
from typing import List, Optional, Union
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from outreach_cms.core.identifiers import ResourceId
from outreach_cms.core.security import get_password_hash, verify_password
from outreach_cms.models.base import utcnow
from outreach_cms.models.user import User, UserRole

logger = logging.getLogger(__name__)


class CRUDUser:
    """Credential store: accounts, password hashes and roles."""

    def get(self, db: Session, id: Union[ResourceId, str, int]) -> Optional[User]:
        rid = ResourceId.parse(id)
        if rid is None:
            return None
        return db.query(User).filter(User.id == int(rid)).first()

    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        # Exact, case-sensitive match. Storage errors are not caught here so
        # callers can tell "no such user" from "database unavailable".
        return db.query(User).filter(User.email == email).first()

    def create_user(self, db: Session, *, email: str, password: str) -> Optional[User]:
        """Returns None when the email is already registered."""
        if self.get_by_email(db, email=email) is not None:
            return None

        db_obj = User(
            email=email,
            hashed_password=get_password_hash(password),
            role=UserRole.USER,
            created_at=utcnow(),
        )
        db.add(db_obj)
        try:
            db.commit()
        except IntegrityError:
            # concurrent signup with the same email won the unique index
            db.rollback()
            logger.info(f"Duplicate registration rejected for {email}")
            return None
        db.refresh(db_obj)
        return db_obj

    def authenticate(self, db: Session, *, email: str, password: str) -> Optional[User]:
        user = self.get_by_email(db, email=email)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    def get_all(self, db: Session) -> List:
        """All accounts without the password hash column, newest first"""
        return (
            db.query(User.id, User.email, User.role, User.created_at)
            .order_by(User.created_at.desc(), User.id.desc())
            .all()
        )

    def update_role(self, db: Session, *, id: Union[ResourceId, str, int], role: UserRole) -> bool:
        """True only when a record actually changed role."""
        rid = ResourceId.parse(id)
        if rid is None:
            return False
        role = UserRole(role)
        updated = (
            db.query(User)
            .filter(User.id == int(rid), User.role != role)
            .update({"role": role}, synchronize_session=False)
        )
        db.commit()
        return updated > 0

    def remove(self, db: Session, *, id: Union[ResourceId, str, int]) -> bool:
        rid = ResourceId.parse(id)
        if rid is None:
            return False
        deleted = db.query(User).filter(User.id == int(rid)).delete(synchronize_session=False)
        db.commit()
        return deleted > 0


user = CRUDUser()
