from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class Edge(BaseModel):
    follower_id: int
    target_id: int
    created_at: datetime


class ToggleResult(BaseModel):
    following: bool


class FollowStatus(BaseModel):
    is_following: bool
    followed_at: Optional[datetime] = None


class FollowCounts(BaseModel):
    user_id: int
    follower_count: int = 0
    following_count: int = 0
