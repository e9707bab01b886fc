from .base import BaseModel, ContentBaseModel
from .user import User, UserRole
from .event import Event
from .partner import Partner
from .team_member import TeamMember

__all__ = ["BaseModel", "ContentBaseModel", "User", "UserRole", "Event", "Partner", "TeamMember"]
