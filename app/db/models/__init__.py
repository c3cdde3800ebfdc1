"""
SQLAlchemy database models.

- base: Base declarative class
- user: User accounts and the symmetric friends association
- social: Follow edges and friend requests

Import any model from this module:
    from app.db.models import User, FollowEdge, FriendRequest
"""

# Base class (must be imported first)
from .base import Base

# User models
from .user import User, user_friends

# Social graph models
from .social import FollowEdge, FollowStatus, FriendRequest, FriendRequestStatus

__all__ = [
    "Base",
    "User",
    "user_friends",
    "FollowEdge",
    "FollowStatus",
    "FriendRequest",
    "FriendRequestStatus",
]
