# File: outreach_cms/api/v1/endpoints/auth.py
from typing import Any
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from outreach_cms import crud, schemas
from outreach_cms.api.v1.endpoints.users import validate_credentials
from outreach_cms.core import deps, security
from outreach_cms.core.config import Settings
from outreach_cms.core.exceptions import (
    AuthenticationError,
    ConflictError,
    DependencyError,
    ValidationError,
)
from outreach_cms.core.identifiers import ResourceId
from outreach_cms.db.database import get_db
from outreach_cms.models.user import User

logger = logging.getLogger(__name__)
router = APIRouter()


def issue_token(user: User, config: Settings) -> dict:
    claims = security.TokenClaims(
        user_id=ResourceId.format(user.id),
        email=user.email,
        role=user.role.value,
    )
    return {
        "token": security.create_access_token(claims, config=config),
        "user": {"id": user.id, "email": user.email, "role": user.role},
    }


@router.post("/signup", response_model=schemas.AuthResponse)
def signup(
    *,
    db: Session = Depends(get_db),
    config: Settings = Depends(deps.get_settings),
    credentials: schemas.UserCredentials,
) -> Any:
    validate_credentials(credentials)
    config.require_jwt_secret()

    user = crud.user.create_user(db, email=credentials.email, password=credentials.password)
    if not user:
        raise ConflictError("User already exists")

    logger.info(f"✅ New account registered: {user.email}")
    return {"message": "User created successfully", **issue_token(user, config)}


@router.post("/login", response_model=schemas.AuthResponse)
def login(
    *,
    db: Session = Depends(get_db),
    config: Settings = Depends(deps.get_settings),
    credentials: schemas.UserCredentials,
) -> Any:
    config.require_jwt_secret()

    if not credentials.email or not credentials.password:
        raise ValidationError("Email and password are required")

    try:
        user = crud.user.authenticate(db, email=credentials.email, password=credentials.password)
    except SQLAlchemyError as e:
        logger.error(f"❌ Database error during login lookup: {e}")
        raise DependencyError("Database connection error", details=str(e)) from e

    if not user:
        logger.info(f"Login failed for {credentials.email}")
        raise AuthenticationError("Invalid email or password")

    logger.info(f"🔓 Login: {user.email} ({user.role.value})")
    return {"message": "Login successful", **issue_token(user, config)}
