"""User account model and the friends association."""

from datetime import datetime, timezone
from typing import List, TYPE_CHECKING

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .social import FollowEdge, FriendRequest


# Symmetric friendship is stored as two directed rows, one per direction.
user_friends = Table(
    "user_friends",
    Base.metadata,
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("friend_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    """User account model."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    public_id: Mapped[str] = mapped_column(String(11), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String, nullable=False)
    profile_picture: Mapped[str | None] = mapped_column(String, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    website: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Relationships
    friends: Mapped[List["User"]] = relationship(
        secondary=user_friends,
        primaryjoin=lambda: User.id == user_friends.c.user_id,
        secondaryjoin=lambda: User.id == user_friends.c.friend_id,
        back_populates="friend_of",
    )
    friend_of: Mapped[List["User"]] = relationship(
        secondary=user_friends,
        primaryjoin=lambda: User.id == user_friends.c.friend_id,
        secondaryjoin=lambda: User.id == user_friends.c.user_id,
        back_populates="friends",
    )
    followers: Mapped[List["FollowEdge"]] = relationship(
        foreign_keys="FollowEdge.following_id",
        back_populates="following",
        passive_deletes=True,
    )
    following: Mapped[List["FollowEdge"]] = relationship(
        foreign_keys="FollowEdge.follower_id",
        back_populates="follower",
        passive_deletes=True,
    )
    sent_friend_requests: Mapped[List["FriendRequest"]] = relationship(
        foreign_keys="FriendRequest.sender_id",
        back_populates="sender",
        passive_deletes=True,
    )
    received_friend_requests: Mapped[List["FriendRequest"]] = relationship(
        foreign_keys="FriendRequest.receiver_id",
        back_populates="receiver",
        passive_deletes=True,
    )

    @property
    def all_friends(self) -> List["User"]:
        """
        Union of both association directions, de-duplicated by id.
        Requires `friends` and `friend_of` to be loaded.
        """
        seen: dict[int, "User"] = {}
        for friend in [*self.friends, *self.friend_of]:
            seen.setdefault(friend.id, friend)
        return list(seen.values())
