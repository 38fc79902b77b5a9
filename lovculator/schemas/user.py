from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ProfileSummary(BaseModel):
    id: int
    username: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    is_following: bool = False


class UserProfile(ProfileSummary):
    follower_count: int = 0
    following_count: int = 0
    created_at: datetime
