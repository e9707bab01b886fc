# File: outreach_cms/api/v1/endpoints/events.py
from dataclasses import asdict
from typing import Any, Optional
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from outreach_cms import crud, schemas
from outreach_cms.api.v1.endpoints.common import MAX_LIMIT, MAX_PAGE, missing_fields, parse_date_param
from outreach_cms.core import deps
from outreach_cms.core.exceptions import DependencyError, NotFoundError, ValidationError
from outreach_cms.db.database import get_db
from outreach_cms.models.user import User
from outreach_cms.services.uploads import UploadBroker

logger = logging.getLogger(__name__)
router = APIRouter()

REQUIRED_FIELDS = ("title", "description", "date", "image_url")


@router.get("", response_model=schemas.EventListResponse)
def list_events(
    *,
    db: Session = Depends(get_db),
    current_admin: User = Depends(deps.get_current_admin),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(10, ge=1, le=MAX_LIMIT),
    search: Optional[str] = None,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
) -> Any:
    """Paginated events, newest event date first."""
    result = crud.event.get_page(
        db,
        page=page,
        limit=limit,
        search=search or None,
        start_date=parse_date_param(start_date, "startDate"),
        end_date=parse_date_param(end_date, "endDate"),
    )
    return {"events": result.items, "pagination": result.pagination}


@router.post("", status_code=201, response_model=schemas.EventMutationResponse)
def create_event(
    *,
    db: Session = Depends(get_db),
    current_admin: User = Depends(deps.get_current_admin),
    broker: UploadBroker = Depends(deps.get_event_upload_broker),
    event_in: schemas.EventCreate,
) -> Any:
    if missing_fields(event_in.model_dump(), REQUIRED_FIELDS):
        raise ValidationError("Title, description, date, and imageUrl are required")
    if not broker.references_committed_upload(event_in.image_url):
        raise ValidationError("imageUrl must reference an uploaded image")

    event = crud.event.create(db, obj_in=event_in, created_by=current_admin.id)
    logger.info(f"✅ Event {event.id} created by {current_admin.email}")
    return {"message": "Event created successfully", "event": event}


@router.put("", response_model=schemas.EventMutationResponse)
def update_event(
    *,
    db: Session = Depends(get_db),
    current_admin: User = Depends(deps.get_current_admin),
    broker: UploadBroker = Depends(deps.get_event_upload_broker),
    event_in: schemas.EventUpdateRequest,
) -> Any:
    if not event_in.event_id:
        raise ValidationError("Event ID is required")

    changes = event_in.model_dump(exclude_unset=True, exclude={"event_id"})
    if not changes:
        raise ValidationError(
            "At least one field (title, description, date, imageUrl, location, or category) is required"
        )

    existing = crud.event.get(db, event_in.event_id)
    if not existing:
        raise NotFoundError("Event not found")

    if missing_fields(changes, [f for f in REQUIRED_FIELDS if f in changes]):
        raise ValidationError("Title, description, date, and imageUrl cannot be empty")
    if "image_url" in changes and not broker.references_committed_upload(changes["image_url"]):
        raise ValidationError("imageUrl must reference an uploaded image")

    if not crud.event.update(db, id=existing.id, obj_in=schemas.EventUpdate(**changes)):
        raise NotFoundError("Event not found")

    logger.info(f"Event {existing.id} updated by {current_admin.email}: {sorted(changes)}")
    return {"message": "Event updated successfully", "event": crud.event.get(db, existing.id)}


@router.delete("", response_model=schemas.MessageResponse)
def delete_event(
    *,
    db: Session = Depends(get_db),
    current_admin: User = Depends(deps.get_current_admin),
    event_id: Optional[str] = Query(None, alias="eventId"),
) -> Any:
    if not event_id:
        raise ValidationError("Event ID is required")

    existing = crud.event.get(db, event_id)
    if not existing:
        raise NotFoundError("Event not found")

    event_pk = existing.id
    # the image stays in storage; events do not own their uploads
    if not crud.event.remove(db, id=event_pk):
        raise DependencyError("Failed to delete event")

    logger.info(f"🗑️ Event {event_pk} deleted by {current_admin.email}")
    return {"message": "Event deleted successfully"}


@router.post("/upload", response_model=schemas.UploadTicket)
def request_event_image_upload(
    *,
    current_admin: User = Depends(deps.get_current_admin),
    broker: UploadBroker = Depends(deps.get_event_upload_broker),
    upload_in: schemas.UploadRequest,
) -> Any:
    """
    Issue a signed URL the admin UI uploads the image to directly.

    The object only becomes usable as an event image after /upload/commit.
    """
    ticket = broker.request_upload(
        upload_in.content_type,
        file_name=upload_in.file_name,
        file_size=upload_in.file_size,
    )
    return schemas.UploadTicket(**asdict(ticket))


@router.post("/upload/commit", response_model=schemas.UploadCommitResponse)
def commit_event_image_upload(
    *,
    current_admin: User = Depends(deps.get_current_admin),
    broker: UploadBroker = Depends(deps.get_event_upload_broker),
    commit_in: schemas.UploadCommitRequest,
) -> Any:
    committed = broker.commit_upload(commit_in.file_path)
    return schemas.UploadCommitResponse(**asdict(committed))
