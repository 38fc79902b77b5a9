from lovculator.models.user import User, UserStatus
from lovculator.models.follow import Follow

__all__ = ["User", "UserStatus", "Follow"]
