import pytest

from app.db.models import FriendRequestStatus
from app.services.errors import DuplicateRequest, SelfFriendRequest


async def test_send_friend_request_creates_pending(services, make_user):
    alice, bob = await make_user("alice"), await make_user("bob")

    request = await services.friends.send_friend_request(alice.id, bob.id)

    assert request.status == FriendRequestStatus.PENDING
    assert (request.sender_id, request.receiver_id) == (alice.id, bob.id)
    assert not (request.chat_enabled or request.video_enabled or request.feed_enabled)


async def test_duplicate_pending_request(services, make_user):
    alice, bob = await make_user("alice"), await make_user("bob")
    await services.friends.send_friend_request(alice.id, bob.id)

    with pytest.raises(DuplicateRequest):
        await services.friends.send_friend_request(alice.id, bob.id)


async def test_duplicate_after_accept(services, make_user):
    alice, bob = await make_user("alice"), await make_user("bob")
    request = await services.friends.send_friend_request(alice.id, bob.id)
    await services.relationships.confirm_friend_request(request.id, bob.id)

    with pytest.raises(DuplicateRequest):
        await services.friends.send_friend_request(alice.id, bob.id)


async def test_reverse_direction_request_is_allowed(services, make_user):
    alice, bob = await make_user("alice"), await make_user("bob")
    first = await services.friends.send_friend_request(alice.id, bob.id)

    second = await services.friends.send_friend_request(bob.id, alice.id)

    assert second.id != first.id


async def test_cannot_befriend_yourself(services, make_user):
    alice = await make_user("alice")

    with pytest.raises(SelfFriendRequest):
        await services.friends.send_friend_request(alice.id, alice.id)


async def test_pending_request_is_not_friendship(services, make_user):
    alice, bob = await make_user("alice"), await make_user("bob")
    await services.friends.send_friend_request(alice.id, bob.id)

    assert await services.friends.check_if_already_friends(alice.id, bob.id) is False
    assert await services.friends.check_if_already_friends(bob.id, alice.id) is False


async def test_friend_requests_for_user(services, make_user):
    alice = await make_user("alice", profile_picture="alice.png")
    bob, carol = await make_user("bob"), await make_user("carol")
    from_alice = await services.friends.send_friend_request(alice.id, bob.id)
    from_carol = await services.friends.send_friend_request(carol.id, bob.id)
    await services.relationships.confirm_friend_request(from_carol.id, bob.id)
    await services.friends.send_friend_request(bob.id, alice.id)

    entries = await services.friends.get_friend_requests_for_user(bob.id)

    assert [e.id for e in entries] == [from_alice.id]
    entry = entries[0]
    assert entry.message == "alice sent you a friend request."
    assert entry.sender.model_dump() == {"id": alice.id, "username": "alice", "profile_picture": "alice.png"}
    assert await services.friends.get_friend_requests_for_user(carol.id) == []
