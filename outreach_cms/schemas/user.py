# File: outreach_cms/schemas/user.py
from typing import List, Optional

from outreach_cms.models.user import UserRole
from outreach_cms.schemas.base import CamelModel, IdInput, RecordOut

MIN_PASSWORD_LENGTH = 6


class UserCredentials(CamelModel):
    """Body of signup, login and admin user creation"""
    email: Optional[str] = None
    password: Optional[str] = None


class UserRoleUpdate(CamelModel):
    user_id: IdInput = None
    role: Optional[str] = None


class UserDeleteRequest(CamelModel):
    user_id: IdInput = None


class User(RecordOut):
    """Public view of an account; the password hash is never part of it"""
    email: str
    role: UserRole


class UserListResponse(CamelModel):
    users: List[User]


class UserMutationResponse(CamelModel):
    message: str
    user: User
