from lovculator.schemas.user import ProfileSummary, UserProfile
from lovculator.schemas.follow import Edge, ToggleResult, FollowStatus, FollowCounts

__all__ = [
    "ProfileSummary", "UserProfile",
    "Edge", "ToggleResult", "FollowStatus", "FollowCounts"
]
