# File: outreach_cms/models/team_member.py
from sqlalchemy import Column, String

from outreach_cms.models.base import ContentBaseModel


class TeamMember(ContentBaseModel):
    __tablename__ = "team_members"

    name = Column(String(255), nullable=False)
    role = Column(String(255), nullable=False)  # display label, unrelated to UserRole
    linkedin_link = Column(String(500), nullable=False)
