from datetime import datetime
from pydantic import BaseModel

from app.db.models import FollowStatus
from app.schemas.user import UserSummary


class FollowEdgeOut(BaseModel):
    id: int
    follower_id: int
    following_id: int
    status: FollowStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class FollowerEntry(FollowEdgeOut):
    follower: UserSummary


class FollowingEntry(FollowEdgeOut):
    following: UserSummary
