from .user import user
from .event import event
from .partner import partner
from .team_member import team_member

__all__ = ["user", "event", "partner", "team_member"]
