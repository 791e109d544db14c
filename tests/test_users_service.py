import pytest
import pytest_asyncio

from src.engagement.service import EngagementService
from src.users.exceptions import UserAlreadyExistsException
from src.users.schemas import UserProfileUpdate, UserUpsert
from src.users.service import UsersService
from tests.helpers import create_post, create_user


@pytest.fixture
def service():
    return UsersService()


@pytest_asyncio.fixture
async def directory(session_factory):
    await create_user(session_factory, "u1", username="JohnDoe", first_name="John")
    await create_user(session_factory, "u2", username="janedoe", first_name="Jane")
    await create_user(session_factory, "u3", username="mike", first_name="Mike")
    await create_user(session_factory, "u4", username="sarah", first_name="Sarah")
    await create_user(session_factory, "u5", username="tom", first_name="Tom")


async def test_search_matches_username_substring_case_insensitively(db, directory, service):
    results = await service.search_users("DOE", None, db)

    assert sorted(user.id for user in results) == ["u1", "u2"]


async def test_search_matches_names(db, directory, session_factory, service):
    await create_user(session_factory, "u6", username="x1", first_name="Mark", last_name="Lee")
    results = await service.search_users("ark", None, db)
    assert [user.id for user in results] == ["u6"]

    results = await service.search_users("LEE", None, db)
    assert [user.id for user in results] == ["u6"]


async def test_search_is_capped(db, session_factory, service):
    for i in range(25):
        await create_user(session_factory, f"user{i}")

    results = await service.search_users("user", None, db)

    assert len(results) == 20


async def test_search_treats_wildcards_literally(db, directory, session_factory, service):
    await create_user(session_factory, "u9", username="a_b")

    results = await service.search_users("_", None, db)
    assert [user.id for user in results] == ["u9"]

    assert await service.search_users("%", None, db) == []


async def test_user_with_counts(db, users, session_factory, service):
    engagement = EngagementService()
    await create_post(session_factory, "bob")
    await create_post(session_factory, "bob")
    await engagement.follow_user("alice", "bob", db)
    await engagement.follow_user("carol", "bob", db)
    await engagement.follow_user("bob", "carol", db)

    bob = await service.get_user_with_counts("bob", "alice", db)

    assert bob.followers_count == 2
    assert bob.following_count == 1
    assert bob.posts_count == 2
    assert bob.is_following is True
    assert (await service.get_user_with_counts("bob", None, db)).is_following is False
    assert (await service.get_user_with_counts("bob", "bob", db)).is_following is False


async def test_get_missing_user(db, users, service):
    assert await service.get_user_with_counts("nobody", None, db) is None
    assert await service.get_user_by_username("nobody", None, db) is None


async def test_get_user_by_username(db, users, service):
    user = await service.get_user_by_username("carol", None, db)
    assert user.id == "carol"


async def test_followers_and_following(db, users, service):
    engagement = EngagementService()
    await engagement.follow_user("alice", "bob", db)
    await engagement.follow_user("carol", "bob", db)

    followers = await service.get_followers("bob", None, db)
    following = await service.get_following("alice", None, db)

    assert sorted(user.id for user in followers) == ["alice", "carol"]
    assert [user.id for user in following] == ["bob"]


async def test_update_merges_only_provided_fields(db, users, service):
    updated = await service.update_user("bob", UserProfileUpdate(bio="hello"), db)

    assert updated.bio == "hello"
    assert updated.first_name == "Bob"
    assert updated.username == "bob"


async def test_update_rejects_taken_username(db, users, service):
    with pytest.raises(UserAlreadyExistsException):
        await service.update_user("bob", UserProfileUpdate(username="carol"), db)


async def test_update_missing_user(db, users, service):
    assert await service.update_user("nobody", UserProfileUpdate(bio="x"), db) is None


async def test_upsert_creates_then_refreshes(db, service):
    created = await service.upsert_user(UserUpsert(id="sub-1", email="a@example.com", first_name="A"), db)
    assert created.first_name == "A"

    updated = await service.upsert_user(UserUpsert(id="sub-1", first_name="B"), db)
    assert updated.first_name == "B"
    assert updated.email == "a@example.com"


async def test_upsert_returns_user_inserted_concurrently(db, session_factory, service, monkeypatch):
    await create_user(session_factory, "sub-1", email="a@example.com", first_name="A")
    real_get_user = service.get_user
    lookups = []

    async def get_user_missed_once(user_id, session):
        lookups.append(user_id)
        if len(lookups) == 1:
            return None
        return await real_get_user(user_id, session)

    monkeypatch.setattr(service, "get_user", get_user_missed_once)

    user = await service.upsert_user(UserUpsert(id="sub-1", first_name="B"), db)

    assert user.id == "sub-1"
    assert user.first_name == "B"
    assert user.email == "a@example.com"
    assert len(lookups) == 2


async def test_ban_and_unban(db, users, service):
    assert await service.ban_user("bob", db) is True
    assert (await service.get_user_with_counts("bob", None, db)).is_banned is True

    assert await service.unban_user("bob", db) is True
    assert await service.ban_user("nobody", db) is False


async def test_all_users(db, users, service):
    users_page = await service.get_all_users(db)
    assert sorted(user.id for user in users_page) == ["alice", "bob", "carol"]
