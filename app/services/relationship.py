"""
Confirming a friend request.

Accepting turns a pending FriendRequest into a friendship: the request is
marked accepted with the receiver's capability flags, both follow edges are
set to accepted, and both users are added to each other's friends set. All
four writes share one transaction; if any of them fails, none is kept.
"""
import logging

from app.db.models import FriendRequest, FriendRequestStatus, user_friends
from app.db.store import Store
from app.schemas.friend import FriendCapabilities, FriendRequestOut
from app.services.errors import RequestNotFound, RequestNotPending, Unauthorized
from app.services.follow import FollowService

log = logging.getLogger(__name__)


class RelationshipService:

    def __init__(
        self,
        store: Store,
        follows: FollowService | None = None,
    ):
        self.store = store
        self.follows = follows or FollowService(store)

    async def confirm_friend_request(
        self,
        request_id: int,
        receiver_id: int,
        capabilities: FriendCapabilities | None = None,
    ) -> FriendRequestOut:
        capabilities = capabilities or FriendCapabilities()

        async with self.store.transaction():
            request = await self.store.find(FriendRequest, id=request_id, for_update=True)
            if request is None:
                raise RequestNotFound(request_id=request_id)
            if request.receiver_id != receiver_id:
                raise Unauthorized(
                    "You are not authorized to confirm this friend request.",
                    request_id=request_id,
                    user_id=receiver_id,
                )
            if request.status != FriendRequestStatus.PENDING.value:
                raise RequestNotPending(request_id=request_id, status=request.status)

            sender_id = request.sender_id
            request = await self.store.update(
                request,
                status=FriendRequestStatus.ACCEPTED.value,
                chat_enabled=capabilities.chat_enabled,
                video_enabled=capabilities.video_enabled,
                feed_enabled=capabilities.feed_enabled,
            )
            await self.follows.accept_edge(sender_id, receiver_id)
            await self.follows.accept_edge(receiver_id, sender_id)
            await self.store.link(user_friends, user_id=sender_id, friend_id=receiver_id)
            await self.store.link(user_friends, user_id=receiver_id, friend_id=sender_id)
            result = FriendRequestOut.model_validate(request)

        log.info(
            "Friend request %s confirmed: users %s and %s are now friends",
            request_id, sender_id, receiver_id,
        )
        return result
