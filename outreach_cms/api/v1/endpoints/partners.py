# File: outreach_cms/api/v1/endpoints/partners.py
from typing import Any, Optional
import logging

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.orm import Session

from outreach_cms import crud, schemas
from outreach_cms.api.v1.endpoints.common import MAX_LIMIT, MAX_PAGE, missing_fields
from outreach_cms.core import deps
from outreach_cms.core.exceptions import DependencyError, NotFoundError, ValidationError
from outreach_cms.db.database import get_db
from outreach_cms.models.user import User
from outreach_cms.services.uploads import UploadBroker

logger = logging.getLogger(__name__)
router = APIRouter()

REQUIRED_FIELDS = ("name", "logo_url")


@router.get("", response_model=schemas.PartnerListResponse)
def list_partners(
    *,
    db: Session = Depends(get_db),
    current_admin: User = Depends(deps.get_current_admin),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(10, ge=1, le=MAX_LIMIT),
    search: Optional[str] = None,
) -> Any:
    result = crud.partner.get_page(db, page=page, limit=limit, search=search or None)
    return {"partners": result.items, "pagination": result.pagination}


@router.post("", status_code=201, response_model=schemas.PartnerMutationResponse)
def create_partner(
    *,
    db: Session = Depends(get_db),
    current_admin: User = Depends(deps.get_current_admin),
    partner_in: schemas.PartnerCreate,
) -> Any:
    if missing_fields(partner_in.model_dump(), REQUIRED_FIELDS):
        raise ValidationError("Name and logo URL are required")

    partner = crud.partner.create(db, obj_in=partner_in, created_by=current_admin.id)
    logger.info(f"✅ Partner {partner.id} created by {current_admin.email}")
    return {"message": "Partner created successfully", "partner": partner}


@router.put("", response_model=schemas.PartnerMutationResponse)
def update_partner(
    *,
    db: Session = Depends(get_db),
    current_admin: User = Depends(deps.get_current_admin),
    partner_in: schemas.PartnerUpdateRequest,
) -> Any:
    if not partner_in.partner_id:
        raise ValidationError("Partner ID is required")

    changes = partner_in.model_dump(exclude_unset=True, exclude={"partner_id"})
    if not changes:
        raise ValidationError("At least one field (name or logoUrl) is required")

    existing = crud.partner.get(db, partner_in.partner_id)
    if not existing:
        raise NotFoundError("Partner not found")

    if missing_fields(changes, changes.keys()):
        raise ValidationError("Name and logo URL cannot be empty")

    if not crud.partner.update(db, id=existing.id, obj_in=schemas.PartnerUpdate(**changes)):
        raise NotFoundError("Partner not found")

    return {"message": "Partner updated successfully", "partner": crud.partner.get(db, existing.id)}


@router.delete("", response_model=schemas.MessageResponse)
def delete_partner(
    *,
    db: Session = Depends(get_db),
    current_admin: User = Depends(deps.get_current_admin),
    partner_id: Optional[str] = Query(None, alias="partnerId"),
) -> Any:
    if not partner_id:
        raise ValidationError("Partner ID is required")

    existing = crud.partner.get(db, partner_id)
    if not existing:
        raise NotFoundError("Partner not found")

    partner_pk = existing.id
    if not crud.partner.remove(db, id=partner_pk):
        raise DependencyError("Failed to delete partner")

    logger.info(f"🗑️ Partner {partner_pk} deleted by {current_admin.email}")
    return {"message": "Partner deleted successfully"}


@router.post("/upload", response_model=schemas.DirectUploadResponse)
def upload_partner_logo(
    *,
    current_admin: User = Depends(deps.get_current_admin),
    broker: UploadBroker = Depends(deps.get_partner_upload_broker),
    file: Optional[UploadFile] = File(None),
) -> Any:
    """
    Receive a logo as multipart form data and publish it straight away.

    - **file**: image file, at most 5MB
    """
    if file is None or not file.filename:
        raise ValidationError("No file provided")

    # one byte past the limit is enough to reject without buffering huge files
    data = file.file.read(broker.max_size + 1)
    stored = broker.store_direct(data, file.filename, file.content_type)

    logger.info(f"📤 Partner logo uploaded by {current_admin.email}: {stored.file_name}")
    return {"message": "File uploaded successfully", "url": stored.url, "file_name": stored.file_name}
