# File: outreach_cms/api/v1/endpoints/team_members.py
from typing import Any, Optional
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from outreach_cms import crud, schemas
from outreach_cms.api.v1.endpoints.common import MAX_LIMIT, MAX_PAGE, missing_fields
from outreach_cms.core import deps
from outreach_cms.core.exceptions import DependencyError, NotFoundError, ValidationError
from outreach_cms.db.database import get_db
from outreach_cms.models.user import User
from outreach_cms.schemas.team_member import is_valid_linkedin_url

logger = logging.getLogger(__name__)
router = APIRouter()

REQUIRED_FIELDS = ("name", "role", "linkedin_link")


@router.get("", response_model=schemas.TeamMemberListResponse)
def list_team_members(
    *,
    db: Session = Depends(get_db),
    current_admin: User = Depends(deps.get_current_admin),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(10, ge=1, le=MAX_LIMIT),
    search: Optional[str] = None,
) -> Any:
    result = crud.team_member.get_page(db, page=page, limit=limit, search=search or None)
    return {"team_members": result.items, "pagination": result.pagination}


@router.post("", status_code=201, response_model=schemas.TeamMemberMutationResponse)
def create_team_member(
    *,
    db: Session = Depends(get_db),
    current_admin: User = Depends(deps.get_current_admin),
    member_in: schemas.TeamMemberCreate,
) -> Any:
    if missing_fields(member_in.model_dump(), REQUIRED_FIELDS):
        raise ValidationError("Name, role, and LinkedIn link are required")
    if not is_valid_linkedin_url(member_in.linkedin_link):
        raise ValidationError("Invalid LinkedIn URL format")

    member = crud.team_member.create(db, obj_in=member_in, created_by=current_admin.id)
    logger.info(f"✅ Team member {member.id} created by {current_admin.email}")
    return {"message": "Team member created successfully", "team_member": member}


@router.put("", response_model=schemas.TeamMemberMutationResponse)
def update_team_member(
    *,
    db: Session = Depends(get_db),
    current_admin: User = Depends(deps.get_current_admin),
    member_in: schemas.TeamMemberUpdateRequest,
) -> Any:
    changes = member_in.model_dump(exclude_unset=True, exclude={"team_member_id"})
    if not member_in.team_member_id or not changes:
        raise ValidationError(
            "Team member ID and at least one field (name, role, or linkedinLink) are required"
        )

    existing = crud.team_member.get(db, member_in.team_member_id)
    if not existing:
        raise NotFoundError("Team member not found")

    if missing_fields(changes, changes.keys()):
        raise ValidationError("Name, role, and LinkedIn link cannot be empty")
    if "linkedin_link" in changes and not is_valid_linkedin_url(changes["linkedin_link"]):
        raise ValidationError("Invalid LinkedIn URL format")

    if not crud.team_member.update(db, id=existing.id, obj_in=schemas.TeamMemberUpdate(**changes)):
        raise NotFoundError("Team member not found")

    return {
        "message": "Team member updated successfully",
        "team_member": crud.team_member.get(db, existing.id),
    }


@router.delete("", response_model=schemas.MessageResponse)
def delete_team_member(
    *,
    db: Session = Depends(get_db),
    current_admin: User = Depends(deps.get_current_admin),
    team_member_id: Optional[str] = Query(None, alias="teamMemberId"),
) -> Any:
    if not team_member_id:
        raise ValidationError("Team member ID is required")

    existing = crud.team_member.get(db, team_member_id)
    if not existing:
        raise NotFoundError("Team member not found")

    member_pk = existing.id
    if not crud.team_member.remove(db, id=member_pk):
        raise DependencyError("Failed to delete team member")

    logger.info(f"🗑️ Team member {member_pk} deleted by {current_admin.email}")
    return {"message": "Team member deleted successfully"}
