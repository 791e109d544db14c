import pytest

from src.engagement.service import EngagementService
from src.posts.exceptions import PostNotFoundException
from src.posts.schemas import PostCreate
from src.posts.service import PostService
from tests.helpers import create_post, create_user


@pytest.fixture
def service():
    return PostService()


@pytest.fixture
def engagement():
    return EngagementService()


async def test_create_and_get_post(db, users, service):
    created = await service.create_post(PostCreate(content="hello"), "bob", db)

    post = await service.get_post(created.id, "carol", db)
    assert post.content == "hello"
    assert post.likes_count == 0
    assert post.is_liked is False
    assert post.is_bookmarked is False
    assert post.user.id == "bob"
    assert post.is_repost is False


async def test_create_post_strips_content(db, users, service):
    created = await service.create_post(PostCreate(content="  hi there  "), "bob", db)
    assert created.content == "hi there"


def test_blank_content_is_rejected():
    with pytest.raises(ValueError):
        PostCreate(content="   ")


async def test_repost_marks_original(db, users, service):
    original = await service.create_post(PostCreate(content="original"), "bob", db)
    repost = await service.create_post(
        PostCreate(content="look at this", original_post_id=original.id), "carol", db
    )

    assert repost.is_repost is True
    assert repost.original_post_id == original.id
    refreshed = await service.get_post(original.id, None, db)
    assert refreshed.reposts_count == 1


async def test_repost_of_missing_post_fails(db, users, service):
    with pytest.raises(PostNotFoundException):
        await service.create_post(PostCreate(content="x", original_post_id=404), "bob", db)


async def test_reply_stores_parent(db, users, service):
    parent = await service.create_post(PostCreate(content="question"), "bob", db)
    reply = await service.create_post(PostCreate(content="answer", parent_post_id=parent.id), "carol", db)

    assert reply.parent_post_id == parent.id
    assert reply.is_repost is False


async def test_get_missing_post_returns_none(db, users, service):
    assert await service.get_post(12345, None, db) is None


async def test_feed_contains_followed_and_own_posts_newest_first(db, session_factory, service, engagement):
    for user_id in ("viewer", "u1", "u2", "stranger"):
        await create_user(session_factory, user_id)
    first = await create_post(session_factory, "u1", "u1 first")
    stranger = await create_post(session_factory, "stranger", "not followed")
    own = await create_post(session_factory, "viewer", "mine")
    last = await create_post(session_factory, "u2", "u2 last")

    await engagement.follow_user("viewer", "u1", db)
    await engagement.follow_user("viewer", "u2", db)

    feed = await service.get_feed_posts("viewer", db)

    assert [post.id for post in feed] == [last, own, first]
    assert stranger not in [post.id for post in feed]
    assert {post.user_id for post in feed} <= {"viewer", "u1", "u2"}


async def test_feed_without_follows_shows_own_posts(db, session_factory, service):
    await create_user(session_factory, "loner")
    await create_user(session_factory, "other")
    own = await create_post(session_factory, "loner", "just me")
    await create_post(session_factory, "other", "someone else")

    feed = await service.get_feed_posts("loner", db)

    assert [post.id for post in feed] == [own]


async def test_feed_pagination(db, users, session_factory, service):
    ids = [await create_post(session_factory, "alice", f"post {i}") for i in range(5)]

    page = await service.get_feed_posts("alice", db, limit=2, offset=1)

    assert [post.id for post in page] == [ids[3], ids[2]]


async def test_likes_count_reflects_new_likes(db, users, session_factory, service, engagement):
    post_id = await create_post(session_factory, "bob")
    assert (await service.get_post(post_id, "alice", db)).likes_count == 0

    await engagement.like_post("alice", post_id, db)
    await engagement.like_post("carol", post_id, db)

    post = await service.get_post(post_id, "alice", db)
    assert post.likes_count == 2
    assert post.is_liked is True
    assert (await service.get_post(post_id, "bob", db)).is_liked is False


async def test_explore_enriches_every_post(db, users, session_factory, service, engagement):
    liked = await create_post(session_factory, "bob", "liked")
    other = await create_post(session_factory, "carol", "other")
    await engagement.like_post("alice", liked, db)
    await engagement.bookmark_post("alice", other, db)

    posts = {post.id: post for post in await service.get_explore_posts("alice", db)}

    assert posts[liked].likes_count == 1
    assert posts[liked].is_liked is True
    assert posts[liked].is_bookmarked is False
    assert posts[other].likes_count == 0
    assert posts[other].is_bookmarked is True


async def test_user_posts(db, users, session_factory, service):
    bob_post = await create_post(session_factory, "bob")
    await create_post(session_factory, "carol")

    posts = await service.get_user_posts("bob", None, db)

    assert [post.id for post in posts] == [bob_post]


async def test_bookmarked_posts_ordered_by_bookmark(db, users, session_factory, service, engagement):
    older = await create_post(session_factory, "bob", "older")
    newer = await create_post(session_factory, "bob", "newer")
    await engagement.bookmark_post("alice", newer, db)
    await engagement.bookmark_post("alice", older, db)

    posts = await service.get_bookmarked_posts("alice", db)

    assert [post.id for post in posts] == [older, newer]
    assert all(post.is_bookmarked for post in posts)


async def test_non_owner_cannot_delete(db, users, session_factory, service):
    post_id = await create_post(session_factory, "bob")

    assert await service.delete_post(post_id, "carol", db) is False
    assert await service.get_post(post_id, None, db) is not None


async def test_owner_delete(db, users, session_factory, service):
    post_id = await create_post(session_factory, "bob")

    assert await service.delete_post(post_id, "bob", db) is True
    assert await service.get_post(post_id, None, db) is None
    assert await service.delete_post(post_id, "bob", db) is False


async def test_admin_delete_removes_any_post(db, users, session_factory, service):
    post_id = await create_post(session_factory, "bob")

    assert await service.delete_post_as_admin(post_id, db) is True
    assert await service.get_post(post_id, None, db) is None


async def test_deleting_original_keeps_reposts(db, users, session_factory, service):
    original = await service.create_post(PostCreate(content="original"), "bob", db)
    repost = await service.create_post(PostCreate(content="rt", original_post_id=original.id), "carol", db)

    assert await service.delete_post(original.id, "bob", db) is True

    async with session_factory() as fresh:
        remaining = await service.get_post(repost.id, None, fresh)
    assert remaining is not None
    assert remaining.original_post_id is None
