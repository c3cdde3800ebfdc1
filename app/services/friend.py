import logging

from sqlalchemy import and_, or_
from sqlalchemy.orm import selectinload

from app.db.models import FriendRequest, FriendRequestStatus
from app.db.store import Store
from app.schemas.friend import FriendRequestEntry, FriendRequestOut, FriendRequestSender
from app.services.errors import DuplicateRequest, SelfFriendRequest

log = logging.getLogger(__name__)

FRIEND_REQUEST_MESSAGE = "{username} sent you a friend request."


class FriendRequestService:

    def __init__(self, store: Store):
        self.store = store

    async def send_friend_request(self, sender_id: int, receiver_id: int) -> FriendRequestOut:
        """
        Create a pending request sender -> receiver.

        Only the sender -> receiver direction is checked for duplicates, so two
        users requesting each other end up with two independent requests.
        """
        if sender_id == receiver_id:
            raise SelfFriendRequest(user_id=sender_id)

        async with self.store.transaction():
            existing = await self.store.find(
                FriendRequest,
                FriendRequest.status.in_(
                    [FriendRequestStatus.PENDING.value, FriendRequestStatus.ACCEPTED.value]
                ),
                sender_id=sender_id,
                receiver_id=receiver_id,
                for_update=True,
            )
            if existing is not None:
                raise DuplicateRequest(request_id=existing.id, status=existing.status)

            request = await self.store.create(
                FriendRequest,
                sender_id=sender_id,
                receiver_id=receiver_id,
                status=FriendRequestStatus.PENDING.value,
            )

        log.info("Friend request %s created: %s -> %s", request.id, sender_id, receiver_id)
        return FriendRequestOut.model_validate(request)

    async def check_if_already_friends(self, user_a: int, user_b: int) -> bool:
        accepted = await self.store.find(
            FriendRequest,
            or_(
                and_(FriendRequest.sender_id == user_a, FriendRequest.receiver_id == user_b),
                and_(FriendRequest.sender_id == user_b, FriendRequest.receiver_id == user_a),
            ),
            status=FriendRequestStatus.ACCEPTED.value,
        )
        return accepted is not None

    async def get_friend_requests_for_user(self, receiver_id: int) -> list[FriendRequestEntry]:
        requests = await self.store.find_many(
            FriendRequest,
            receiver_id=receiver_id,
            status=FriendRequestStatus.PENDING.value,
            options=[selectinload(FriendRequest.sender)],
        )
        entries = []
        for request in requests:
            sender = FriendRequestSender.model_validate(request.sender)
            entries.append(
                FriendRequestEntry(
                    **FriendRequestOut.model_validate(request).model_dump(),
                    sender=sender,
                    message=FRIEND_REQUEST_MESSAGE.format(username=sender.username),
                )
            )
        return entries
