# File: outreach_cms/schemas/auth.py
from pydantic import field_validator

from outreach_cms.core.identifiers import ResourceId
from outreach_cms.models.user import UserRole
from outreach_cms.schemas.base import CamelModel


class AuthUser(CamelModel):
    id: str
    email: str
    role: UserRole

    @field_validator("id", mode="before")
    @classmethod
    def format_id(cls, v):
        return ResourceId.format(v)


class AuthResponse(CamelModel):
    message: str
    token: str
    user: AuthUser
