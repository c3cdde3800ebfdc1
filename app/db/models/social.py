"""Follow edges and friend requests."""

import enum
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .user import User


def _now():
    return datetime.now(timezone.utc)


class FollowStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class FriendRequestStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"


class FollowEdge(Base):
    """Directional follow relationship from `follower` to `following`."""

    __tablename__ = "follows"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    follower_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    following_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(String(16), default=FollowStatus.PENDING.value, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_now, onupdate=_now, nullable=False
    )

    # Relationships
    follower: Mapped["User"] = relationship(foreign_keys=[follower_id], back_populates="following")
    following: Mapped["User"] = relationship(foreign_keys=[following_id], back_populates="followers")

    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_follows_follower_following"),
        CheckConstraint("follower_id <> following_id", name="ck_follows_no_self_follow"),
        CheckConstraint("status IN ('pending', 'accepted', 'rejected')", name="ck_follows_status"),
        Index("ix_follows_following_id_status", "following_id", "status"),
    )


class FriendRequest(Base):
    """
    Directional friend request. Capability flags are written when the
    receiver confirms; status only ever moves pending -> accepted.
    """

    __tablename__ = "friend_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    sender_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    receiver_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(String(16), default=FriendRequestStatus.PENDING.value, nullable=False)
    chat_enabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    video_enabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    feed_enabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_now, onupdate=_now, nullable=False
    )

    # Relationships
    sender: Mapped["User"] = relationship(foreign_keys=[sender_id], back_populates="sent_friend_requests")
    receiver: Mapped["User"] = relationship(foreign_keys=[receiver_id], back_populates="received_friend_requests")

    __table_args__ = (
        CheckConstraint("status IN ('pending', 'accepted')", name="ck_friend_requests_status"),
        Index("ix_friend_requests_receiver_id_status", "receiver_id", "status"),
        Index("ix_friend_requests_sender_id_receiver_id", "sender_id", "receiver_id"),
    )
