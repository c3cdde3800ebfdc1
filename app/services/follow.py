import logging

from sqlalchemy.orm import selectinload

from app.db.models import FollowEdge, FollowStatus
from app.db.store import Store
from app.schemas.follow import FollowEdgeOut, FollowerEntry, FollowingEntry
from app.services.errors import (
    AlreadyFollowing,
    FollowNotFound,
    NotFollowing,
    NotPending,
    RequestAlreadyPending,
    SelfFollowError,
    StoreConflict,
    Unauthorized,
)

log = logging.getLogger(__name__)


class FollowService:
    """Directional follow edges: pending -> accepted | rejected, rejected -> pending."""

    def __init__(self, store: Store):
        self.store = store

    async def _get_edge(self, follower_id: int, following_id: int, *, lock: bool = False) -> FollowEdge | None:
        return await self.store.find(
            FollowEdge,
            follower_id=follower_id,
            following_id=following_id,
            for_update=lock,
        )

    @staticmethod
    def _raise_for_existing(edge: FollowEdge) -> None:
        if edge.status == FollowStatus.ACCEPTED.value:
            raise AlreadyFollowing(follow_id=edge.id)
        if edge.status == FollowStatus.PENDING.value:
            raise RequestAlreadyPending(follow_id=edge.id)

    async def get_followers(self, user_id: int) -> list[FollowerEntry]:
        edges = await self.store.find_many(
            FollowEdge,
            following_id=user_id,
            status=FollowStatus.ACCEPTED.value,
            options=[selectinload(FollowEdge.follower)],
        )
        return [FollowerEntry.model_validate(e) for e in edges]

    async def get_following(self, user_id: int) -> list[FollowingEntry]:
        edges = await self.store.find_many(
            FollowEdge,
            follower_id=user_id,
            status=FollowStatus.ACCEPTED.value,
            options=[selectinload(FollowEdge.following)],
        )
        return [FollowingEntry.model_validate(e) for e in edges]

    async def get_pending_follows(self, user_id: int) -> list[FollowerEntry]:
        edges = await self.store.find_many(
            FollowEdge,
            following_id=user_id,
            status=FollowStatus.PENDING.value,
            options=[selectinload(FollowEdge.follower)],
        )
        return [FollowerEntry.model_validate(e) for e in edges]

    async def send_follow_request(self, follower_id: int, following_id: int) -> FollowEdgeOut:
        if follower_id == following_id:
            raise SelfFollowError(user_id=follower_id)

        try:
            async with self.store.transaction():
                existing = await self._get_edge(follower_id, following_id, lock=True)
                if existing is not None:
                    self._raise_for_existing(existing)
                    # Rejected: resend on the same row.
                    edge = await self.store.update(existing, status=FollowStatus.PENDING.value)
                    action = "resent"
                else:
                    edge = await self.store.create(
                        FollowEdge,
                        follower_id=follower_id,
                        following_id=following_id,
                        status=FollowStatus.PENDING.value,
                    )
                    action = "created"
        except StoreConflict:
            # Lost a race with a concurrent request for the same pair.
            existing = await self._get_edge(follower_id, following_id)
            if existing is None:
                raise
            log.warning("Concurrent follow request detected: %s -> %s", follower_id, following_id)
            self._raise_for_existing(existing)
            raise

        log.info("Follow request %s %s: %s -> %s", edge.id, action, follower_id, following_id)
        return FollowEdgeOut.model_validate(edge)

    async def _respond(self, edge_id: int, acting_user_id: int, target: FollowStatus, verb: str) -> FollowEdgeOut:
        async with self.store.transaction():
            edge = await self.store.find(FollowEdge, id=edge_id, for_update=True)
            if edge is None:
                raise FollowNotFound(follow_id=edge_id)
            if edge.following_id != acting_user_id:
                raise Unauthorized(
                    f"You are not authorized to {verb} this follow request.",
                    follow_id=edge_id,
                    user_id=acting_user_id,
                )
            if edge.status != FollowStatus.PENDING.value:
                raise NotPending(follow_id=edge_id, status=edge.status)
            edge = await self.store.update(edge, status=target.value)

        log.info("Follow request %s %s by user %s", edge_id, target.value, acting_user_id)
        return FollowEdgeOut.model_validate(edge)

    async def accept_follow_request(self, edge_id: int, acting_user_id: int) -> FollowEdgeOut:
        return await self._respond(edge_id, acting_user_id, FollowStatus.ACCEPTED, "accept")

    async def reject_follow_request(self, edge_id: int, acting_user_id: int) -> FollowEdgeOut:
        return await self._respond(edge_id, acting_user_id, FollowStatus.REJECTED, "reject")

    async def unfollow_user(self, follower_id: int, following_id: int) -> None:
        async with self.store.transaction():
            edge = await self.store.find(
                FollowEdge,
                follower_id=follower_id,
                following_id=following_id,
                for_update=True,
            )
            if edge is None or edge.status != FollowStatus.ACCEPTED.value:
                raise NotFollowing(follower_id=follower_id, following_id=following_id)
            await self.store.delete(edge)

        log.info("User %s unfollowed user %s", follower_id, following_id)

    async def accept_edge(self, follower_id: int, following_id: int) -> FollowEdge:
        """
        Mark follower -> following as accepted, creating the edge if needed.
        Does not commit; callers run it inside their own transaction.
        """
        return await self.store.upsert(
            FollowEdge,
            key={"follower_id": follower_id, "following_id": following_id},
            create={"status": FollowStatus.ACCEPTED.value},
            update={"status": FollowStatus.ACCEPTED.value},
        )
