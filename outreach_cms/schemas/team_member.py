# File: outreach_cms/schemas/team_member.py
from typing import List, Optional
import re

from outreach_cms.schemas.base import CamelModel, ContentOut, IdInput, Pagination

LINKEDIN_URL_PATTERN = re.compile(r"^https?://(www\.)?linkedin\.com/.+", re.IGNORECASE)


def is_valid_linkedin_url(url: Optional[str]) -> bool:
    return bool(url) and LINKEDIN_URL_PATTERN.match(url) is not None


class TeamMemberCreate(CamelModel):
    name: Optional[str] = None
    role: Optional[str] = None
    linkedin_link: Optional[str] = None


class TeamMemberUpdate(CamelModel):
    name: Optional[str] = None
    role: Optional[str] = None
    linkedin_link: Optional[str] = None


class TeamMemberUpdateRequest(TeamMemberUpdate):
    team_member_id: IdInput = None


class TeamMember(ContentOut):
    name: str
    role: str
    linkedin_link: str


class TeamMemberListResponse(CamelModel):
    team_members: List[TeamMember]
    pagination: Pagination


class TeamMemberMutationResponse(CamelModel):
    message: str
    team_member: TeamMember
