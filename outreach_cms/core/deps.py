# File: outreach_cms/core/deps.py
from datetime import timedelta
from typing import NamedTuple, Optional
import logging

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from outreach_cms import crud
from outreach_cms.core.config import Settings
from outreach_cms.core.exceptions import ConfigurationError
from outreach_cms.core.security import decode_token
from outreach_cms.db.database import get_db
from outreach_cms.models.user import User, UserRole
from outreach_cms.services.storage import ObjectStore
from outreach_cms.services.uploads import UploadBroker

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class AdminCheck(NamedTuple):
    error: Optional[str]
    status: int
    user: Optional[User]


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_object_store(request: Request) -> ObjectStore:
    store = getattr(request.app.state, "object_store", None)
    if store is None:
        raise ConfigurationError("Object storage is not configured")
    return store


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    return authorization[len(BEARER_PREFIX):]


def verify_admin(authorization: Optional[str], db: Session, config: Settings) -> AdminCheck:
    """
    Check an Authorization header value for a valid token belonging to an admin.
    Never raises for bad client input and never touches the token's lifetime.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        return AdminCheck(error="Unauthorized", status=401, user=None)

    claims = decode_token(token, config=config)
    if claims is None:
        return AdminCheck(error="Invalid token", status=401, user=None)

    # the stored role wins over the role claim, so demotions apply at once
    user = crud.user.get_by_email(db, email=claims.email)
    if not user or user.role != UserRole.ADMIN:
        return AdminCheck(error="Admin access required", status=403, user=None)

    return AdminCheck(error=None, status=0, user=user)


def get_current_admin(
    request: Request,
    db: Session = Depends(get_db),
    config: Settings = Depends(get_settings),
) -> User:
    check = verify_admin(request.headers.get("authorization"), db, config)
    if check.error:
        logger.info(f"Admin check failed for {request.method} {request.url.path}: {check.status} {check.error}")
        raise HTTPException(status_code=check.status, detail=check.error)
    return check.user


def _broker(namespace: str, request: Request) -> UploadBroker:
    config = get_settings(request)
    return UploadBroker(
        get_object_store(request),
        namespace,
        ticket_ttl=timedelta(minutes=config.UPLOAD_URL_EXPIRE_MINUTES),
        max_size=config.MAX_UPLOAD_SIZE,
    )


def get_event_upload_broker(request: Request) -> UploadBroker:
    return _broker("events", request)


def get_partner_upload_broker(request: Request) -> UploadBroker:
    return _broker("partners", request)
