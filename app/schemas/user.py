from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, computed_field


class UserSummary(BaseModel):
    """Identity projection safe to hand to other users."""
    id: int
    username: str
    profile_picture: Optional[str] = None
    public_id: Optional[str] = None

    class Config:
        from_attributes = True


class UserProfile(UserSummary):
    email: str
    bio: Optional[str] = None
    website: Optional[str] = None
    created_at: datetime


class FriendList(BaseModel):
    user: UserSummary
    friends: List[UserSummary]

    @computed_field
    @property
    def friend_count(self) -> int:
        return len(self.friends)
