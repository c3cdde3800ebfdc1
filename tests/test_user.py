import re

import pytest

from app.db.models import user_friends
from app.services.errors import EmailInUse, UserNotFound, UsernameInUse
from app.services.user import generate_public_id

PUBLIC_ID = re.compile(r"^[A-Za-z0-9]{3}-[A-Za-z0-9]{3}-[A-Za-z0-9]{3}$")


def test_generate_public_id_format():
    ids = {generate_public_id() for _ in range(50)}
    assert all(PUBLIC_ID.match(i) for i in ids)
    assert len(ids) > 1


async def test_register_user(services):
    profile = await services.users.register_user(
        "dana@example.com", "s3cret!", "dana", bio="hi",
    )

    assert profile.username == "dana"
    assert profile.email == "dana@example.com"
    assert profile.bio == "hi"
    assert PUBLIC_ID.match(profile.public_id)
    assert "password_hash" not in profile.model_dump()


async def test_authenticate(services):
    await services.users.register_user("dana@example.com", "s3cret!", "dana")

    assert (await services.users.authenticate("dana@example.com", "s3cret!")).username == "dana"
    assert await services.users.authenticate("dana@example.com", "wrong") is None
    assert await services.users.authenticate("nobody@example.com", "s3cret!") is None


async def test_register_duplicate_email(services):
    await services.users.register_user("dana@example.com", "pw", "dana")

    with pytest.raises(EmailInUse):
        await services.users.register_user("dana@example.com", "pw", "dana2")


async def test_register_duplicate_username(services):
    await services.users.register_user("dana@example.com", "pw", "dana")

    with pytest.raises(UsernameInUse):
        await services.users.register_user("other@example.com", "pw", "dana")


async def test_get_profile(services, make_user):
    alice = await make_user("alice", website="https://alice.dev")

    profile = await services.users.get_profile(alice.id)

    assert profile.website == "https://alice.dev"
    with pytest.raises(UserNotFound):
        await services.users.get_profile(999)


async def test_friend_count_is_union_of_both_directions(services, store, make_user):
    alice, bob, carol = await make_user("alice"), await make_user("bob"), await make_user("carol")
    async with store.transaction():
        await store.link(user_friends, user_id=alice.id, friend_id=bob.id)
        await store.link(user_friends, user_id=bob.id, friend_id=alice.id)
        await store.link(user_friends, user_id=carol.id, friend_id=alice.id)

    alice_friends = await services.users.get_friends(alice.id)
    carol_friends = await services.users.get_friends(carol.id)

    assert alice_friends.friend_count == 2
    assert sorted(f.username for f in alice_friends.friends) == ["bob", "carol"]
    assert carol_friends.friend_count == 1
    assert alice_friends.model_dump()["friend_count"] == 2


async def test_get_friends_missing_user(services):
    with pytest.raises(UserNotFound):
        await services.users.get_friends(999)


async def test_search_users(services, make_user):
    await make_user("alice")
    await make_user("Malik")
    await make_user("bob")

    found = await services.users.search_users("ALI")

    assert [u.username for u in found] == ["Malik", "alice"]
    assert await services.users.search_users("   ") == []
    assert len(await services.users.search_users("a", limit=1)) == 1


async def test_search_treats_wildcards_literally(services, make_user):
    await make_user("alice")
    await make_user("bob")
    await make_user("john_doe")

    assert await services.users.search_users("%") == []
    assert await services.users.search_users("johnXdoe") == []
    assert [u.username for u in await services.users.search_users("_")] == ["john_doe"]
    assert [u.username for u in await services.users.search_users("n_d")] == ["john_doe"]


async def test_update_profile_picture(services, make_user):
    alice = await make_user("alice")

    updated = await services.users.update_profile_picture(alice.id, "https://cdn.example.com/alice.png")

    assert updated.profile_picture == "https://cdn.example.com/alice.png"
    profile = await services.users.get_profile(alice.id)
    assert profile.profile_picture == "https://cdn.example.com/alice.png"

    cleared = await services.users.update_profile_picture(alice.id, None)
    assert cleared.profile_picture is None


async def test_update_profile_picture_missing_user(services):
    with pytest.raises(UserNotFound) as exc:
        await services.users.update_profile_picture(999, "https://cdn.example.com/x.png")
    assert exc.value.context == {"user_id": 999}
