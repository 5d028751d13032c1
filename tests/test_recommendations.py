import pytest

from streamify.core.errors import NotFoundError
from streamify.services.social_graph import RecommendationSelector, SocialGraphPolicy
from tests.fakes import InMemoryFriendRequestLedger, new_id


@pytest.fixture
def selector(directory):
    return RecommendationSelector(directory)


@pytest.mark.asyncio
async def test_excludes_self_and_users_not_onboarded(selector, directory):
    alice = directory.add_user("Alice")
    bob = directory.add_user("Bob")
    directory.add_user("Carol", onboarded=False)

    users = await selector.recommend(alice.id)

    assert [u.id for u in users] == [bob.id]


@pytest.mark.asyncio
async def test_excludes_friends_after_acceptance(selector, directory):
    alice = directory.add_user("Alice")
    bob = directory.add_user("Bob")
    dave = directory.add_user("Dave")
    graph = SocialGraphPolicy(directory, InMemoryFriendRequestLedger(directory))

    assert {u.id for u in await selector.recommend(alice.id)} == {bob.id, dave.id}

    request = await graph.send_friend_request(alice.id, bob.id)
    await graph.accept_friend_request(request.id, bob.id)

    assert [u.id for u in await selector.recommend(alice.id)] == [dave.id]
    assert [u.id for u in await selector.recommend(bob.id)] == [dave.id]


@pytest.mark.asyncio
async def test_pending_request_does_not_exclude(selector, directory):
    alice = directory.add_user("Alice")
    bob = directory.add_user("Bob")
    graph = SocialGraphPolicy(directory, InMemoryFriendRequestLedger(directory))
    await graph.send_friend_request(alice.id, bob.id)

    assert [u.id for u in await selector.recommend(alice.id)] == [bob.id]


@pytest.mark.asyncio
async def test_unknown_user(selector):
    with pytest.raises(NotFoundError):
        await selector.recommend(new_id())
