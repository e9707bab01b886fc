# File: outreach_cms/crud/team_member.py
from outreach_cms.crud.base import CRUDBase
from outreach_cms.models.team_member import TeamMember
from outreach_cms.schemas.team_member import TeamMemberCreate, TeamMemberUpdate


class CRUDTeamMember(CRUDBase[TeamMember, TeamMemberCreate, TeamMemberUpdate]):
    search_fields = ("name", "role")


team_member = CRUDTeamMember(TeamMember)
