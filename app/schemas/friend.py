from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from app.db.models import FriendRequestStatus


class FriendCapabilities(BaseModel):
    """What the receiver enables for the new friend when confirming."""
    chat_enabled: bool = False
    video_enabled: bool = False
    feed_enabled: bool = False


class FriendRequestOut(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    status: FriendRequestStatus
    chat_enabled: bool
    video_enabled: bool
    feed_enabled: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class FriendRequestSender(BaseModel):
    id: int
    username: str
    profile_picture: Optional[str] = None

    class Config:
        from_attributes = True


class FriendRequestEntry(FriendRequestOut):
    sender: FriendRequestSender
    message: str
