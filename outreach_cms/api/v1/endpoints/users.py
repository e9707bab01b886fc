# File: outreach_cms/api/v1/endpoints/users.py
from typing import Any, Optional
import logging

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from outreach_cms import crud, schemas
from outreach_cms.core import deps
from outreach_cms.core.exceptions import ConflictError, DependencyError, NotFoundError, ValidationError
from outreach_cms.core.identifiers import ResourceId
from outreach_cms.db.database import get_db
from outreach_cms.models.user import User, UserRole
from outreach_cms.schemas.user import MIN_PASSWORD_LENGTH

logger = logging.getLogger(__name__)
router = APIRouter()


def validate_credentials(credentials: schemas.UserCredentials) -> None:
    """Shared by signup and admin user creation"""
    if not credentials.email or not credentials.password:
        raise ValidationError("Email and password are required")
    if len(credentials.password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")


@router.get("", response_model=schemas.UserListResponse)
def list_users(
    *,
    db: Session = Depends(get_db),
    current_admin: User = Depends(deps.get_current_admin),
) -> Any:
    return {"users": crud.user.get_all(db)}


@router.post("", status_code=201, response_model=schemas.UserMutationResponse)
def create_user(
    *,
    db: Session = Depends(get_db),
    current_admin: User = Depends(deps.get_current_admin),
    user_in: schemas.UserCredentials,
) -> Any:
    validate_credentials(user_in)

    user = crud.user.create_user(db, email=user_in.email, password=user_in.password)
    if not user:
        raise ConflictError("User already exists")

    logger.info(f"✅ User {user.email} created by admin {current_admin.email}")
    return {"message": "User created successfully", "user": user}


@router.put("", response_model=schemas.UserMutationResponse)
def update_user_role(
    *,
    db: Session = Depends(get_db),
    current_admin: User = Depends(deps.get_current_admin),
    role_in: schemas.UserRoleUpdate,
) -> Any:
    valid_roles = {r.value for r in UserRole}
    if not role_in.user_id or role_in.role not in valid_roles:
        raise ValidationError("Invalid request data")

    target = crud.user.get(db, role_in.user_id)
    if not target:
        raise NotFoundError("User not found")

    changed = crud.user.update_role(db, id=target.id, role=UserRole(role_in.role))
    if changed:
        logger.info(f"🔑 {current_admin.email} set role of {target.email} to {role_in.role}")

    db.refresh(target)
    return {"message": "User role updated successfully", "user": target}


@router.delete("", response_model=schemas.MessageResponse)
def delete_user(
    *,
    db: Session = Depends(get_db),
    current_admin: User = Depends(deps.get_current_admin),
    user_id: Optional[str] = Query(None, alias="userId"),
    body: Optional[schemas.UserDeleteRequest] = Body(None),
) -> Any:
    """Delete an account. The id may be sent as ?userId= or as {"userId": ...}."""
    raw_id = user_id or (body.user_id if body else None)
    if not raw_id:
        raise ValidationError("User ID is required")

    target_id = ResourceId.parse(raw_id)
    if target_id is not None and int(target_id) == current_admin.id:
        raise ValidationError("Cannot delete your own account")

    target = crud.user.get(db, raw_id)
    if not target:
        raise NotFoundError("User not found")

    target_email = target.email
    if not crud.user.remove(db, id=target.id):
        raise DependencyError("Failed to delete user")

    logger.info(f"🗑️ User {target_email} deleted by admin {current_admin.email}")
    return {"message": "User deleted successfully"}
