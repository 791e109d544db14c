from src.notifications.dependencies import get_connection_manager
from tests.helpers import auth_headers, create_post


class RecordingWebSocket:
    def __init__(self):
        self.sent = []

    async def send_json(self, data):
        self.sent.append(data)


# Auth

async def test_requests_without_token_are_rejected(client, users):
    response = await client.post("/api/posts", json={"content": "hello"})
    assert response.status_code == 401

    response = await client.get("/api/posts/feed")
    assert response.status_code == 401


async def test_missing_targets_need_a_token_first(client, users):
    assert (await client.post("/api/posts/9999/like")).status_code == 401
    assert (await client.delete("/api/posts/9999/bookmark")).status_code == 401
    assert (await client.post("/api/users/nobody/follow")).status_code == 401
    response = await client.post("/api/posts/9999/comments", json={"content": "hi"})
    assert response.status_code == 401


async def test_invalid_token_is_rejected(client, users):
    response = await client.get("/api/auth/user", headers={"Authorization": "Bearer nonsense"})
    assert response.status_code == 401


async def test_first_request_creates_user(client):
    headers = auth_headers("newcomer", email="new@example.com", first_name="New")

    response = await client.get("/api/auth/user", headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == "newcomer"
    assert body["email"] == "new@example.com"
    assert body["is_admin"] is False


async def test_sync_refreshes_profile(client, users):
    response = await client.post("/api/auth/sync", headers=auth_headers("bob", first_name="Robert"))

    assert response.status_code == 200
    assert response.json()["first_name"] == "Robert"


async def test_token_from_cookie(client, users):
    headers = auth_headers("bob")
    token = headers["Authorization"].split(" ", 1)[1]

    response = await client.get("/api/auth/user", headers={"Cookie": f"access_token={token}"})

    assert response.status_code == 200
    assert response.json()["id"] == "bob"


# Posts

async def test_create_and_fetch_post(client, users):
    response = await client.post("/api/posts", json={"content": "hello"}, headers=auth_headers("bob"))
    assert response.status_code == 201
    post_id = response.json()["id"]

    response = await client.get(f"/api/posts/{post_id}", headers=auth_headers("carol"))

    assert response.status_code == 200
    body = response.json()
    assert body["content"] == "hello"
    assert body["likes_count"] == 0
    assert body["is_liked"] is False
    assert body["user"]["id"] == "bob"


async def test_blank_post_is_a_bad_request(client, users):
    response = await client.post("/api/posts", json={"content": "   "}, headers=auth_headers("bob"))
    assert response.status_code == 400

    response = await client.post("/api/posts", json={}, headers=auth_headers("bob"))
    assert response.status_code == 400


async def test_repost_of_missing_post_is_not_found(client, users):
    response = await client.post(
        "/api/posts", json={"content": "rt", "original_post_id": 999}, headers=auth_headers("bob")
    )
    assert response.status_code == 404


async def test_missing_post_is_not_found(client, users):
    response = await client.get("/api/posts/999")
    assert response.status_code == 404


async def test_listings(client, users, session_factory):
    bob_post = await create_post(session_factory, "bob", "from bob")
    carol_post = await create_post(session_factory, "carol", "from carol")
    await client.post("/api/users/bob/follow", headers=auth_headers("alice"))

    explore = await client.get("/api/posts/explore")
    assert [post["id"] for post in explore.json()] == [carol_post, bob_post]

    listing = await client.get("/api/posts", params={"limit": 1})
    assert [post["id"] for post in listing.json()] == [carol_post]

    feed = await client.get("/api/posts/feed", headers=auth_headers("alice"))
    assert [post["id"] for post in feed.json()] == [bob_post]

    user_posts = await client.get("/api/posts/user/carol")
    assert [post["id"] for post in user_posts.json()] == [carol_post]


async def test_invalid_pagination_is_a_bad_request(client, users):
    response = await client.get("/api/posts/explore", params={"limit": 0})
    assert response.status_code == 400

    response = await client.get("/api/posts/explore", params={"limit": 1000})
    assert response.status_code == 400


async def test_delete_post(client, users, session_factory):
    post_id = await create_post(session_factory, "bob")

    response = await client.delete(f"/api/posts/{post_id}", headers=auth_headers("carol"))
    assert response.status_code == 403
    assert (await client.get(f"/api/posts/{post_id}")).status_code == 200

    response = await client.delete(f"/api/posts/{post_id}", headers=auth_headers("bob"))
    assert response.status_code == 200
    assert (await client.get(f"/api/posts/{post_id}")).status_code == 404


async def test_delete_missing_post_is_not_found(client, users):
    response = await client.delete("/api/posts/999", headers=auth_headers("bob"))
    assert response.status_code == 404


# Engagement

async def test_like_toggle(client, users, session_factory):
    post_id = await create_post(session_factory, "bob")
    headers = auth_headers("alice")

    first = await client.post(f"/api/posts/{post_id}/like", headers=headers)
    second = await client.post(f"/api/posts/{post_id}/like", headers=headers)

    assert first.status_code == 200
    assert first.json() == {"post_id": post_id, "is_liked": True, "changed": True, "likes_count": 1}
    assert second.json()["changed"] is False
    assert second.json()["likes_count"] == 1

    post = await client.get(f"/api/posts/{post_id}", headers=headers)
    assert post.json()["is_liked"] is True

    removed = await client.delete(f"/api/posts/{post_id}/like", headers=headers)
    assert removed.json() == {"post_id": post_id, "is_liked": False, "changed": True, "likes_count": 0}

    again = await client.delete(f"/api/posts/{post_id}/like", headers=headers)
    assert again.json()["changed"] is False


async def test_like_missing_post_is_not_found(client, users):
    response = await client.post("/api/posts/999/like", headers=auth_headers("alice"))
    assert response.status_code == 404


async def test_like_publishes_event(client, users, session_factory):
    post_id = await create_post(session_factory, "bob")
    socket = RecordingWebSocket()
    get_connection_manager().active_connections.add(socket)

    await client.post(f"/api/posts/{post_id}/like", headers=auth_headers("alice"))
    await client.post(f"/api/posts/{post_id}/like", headers=auth_headers("alice"))

    assert socket.sent == [{
        "type": "new_like",
        "data": {"post_id": post_id, "user_id": "alice", "likes_count": 1},
    }]


async def test_create_post_publishes_event(client, users):
    socket = RecordingWebSocket()
    get_connection_manager().active_connections.add(socket)

    response = await client.post("/api/posts", json={"content": "live"}, headers=auth_headers("bob"))

    assert len(socket.sent) == 1
    assert socket.sent[0]["type"] == "new_post"
    assert socket.sent[0]["data"]["id"] == response.json()["id"]
    assert socket.sent[0]["data"]["content"] == "live"


async def test_bookmarks(client, users, session_factory):
    post_id = await create_post(session_factory, "bob")
    headers = auth_headers("alice")

    response = await client.post(f"/api/posts/{post_id}/bookmark", headers=headers)
    assert response.json() == {"post_id": post_id, "is_bookmarked": True, "changed": True}

    bookmarks = await client.get("/api/bookmarks", headers=headers)
    assert [post["id"] for post in bookmarks.json()] == [post_id]
    assert bookmarks.json()[0]["is_bookmarked"] is True

    response = await client.delete(f"/api/posts/{post_id}/bookmark", headers=headers)
    assert response.json()["changed"] is True
    assert (await client.get("/api/bookmarks", headers=headers)).json() == []


async def test_follow_toggle(client, users):
    headers = auth_headers("alice")

    first = await client.post("/api/users/bob/follow", headers=headers)
    second = await client.post("/api/users/bob/follow", headers=headers)

    assert first.json() == {"user_id": "bob", "is_following": True, "changed": True, "followers_count": 1}
    assert second.json()["changed"] is False

    profile = await client.get("/api/users/bob", headers=headers)
    assert profile.json()["is_following"] is True
    assert profile.json()["followers_count"] == 1

    removed = await client.delete("/api/users/bob/follow", headers=headers)
    assert removed.json()["followers_count"] == 0


async def test_follow_self_is_a_bad_request(client, users):
    response = await client.post("/api/users/alice/follow", headers=auth_headers("alice"))
    assert response.status_code == 400


async def test_follow_missing_user_is_not_found(client, users):
    response = await client.post("/api/users/nobody/follow", headers=auth_headers("alice"))
    assert response.status_code == 404


# Comments

async def test_comments(client, users, session_factory):
    post_id = await create_post(session_factory, "bob")

    response = await client.post(
        f"/api/posts/{post_id}/comments", json={"content": " nice "}, headers=auth_headers("carol")
    )
    assert response.status_code == 201
    assert response.json()["content"] == "nice"
    assert response.json()["user"]["id"] == "carol"

    comments = await client.get(f"/api/posts/{post_id}/comments")
    assert [comment["content"] for comment in comments.json()] == ["nice"]

    post = await client.get(f"/api/posts/{post_id}")
    assert post.json()["comments_count"] == 1


async def test_comment_validation(client, users, session_factory):
    post_id = await create_post(session_factory, "bob")

    response = await client.post(f"/api/posts/{post_id}/comments", json={"content": ""}, headers=auth_headers("carol"))
    assert response.status_code == 400

    response = await client.post("/api/posts/999/comments", json={"content": "x"}, headers=auth_headers("carol"))
    assert response.status_code == 404


# Users

async def test_user_lookups(client, users):
    assert (await client.get("/api/users/carol")).json()["first_name"] == "Carol"
    assert (await client.get("/api/users/carol/by-username")).json()["id"] == "carol"
    assert (await client.get("/api/users/nobody")).status_code == 404
    assert (await client.get("/api/users/nobody/by-username")).status_code == 404


async def test_user_search(client, users):
    response = await client.get("/api/users/search/JON")

    assert [user["id"] for user in response.json()] == ["bob"]


async def test_followers_listing(client, users):
    await client.post("/api/users/bob/follow", headers=auth_headers("alice"))

    followers = await client.get("/api/users/bob/followers")
    following = await client.get("/api/users/alice/following")

    assert [user["id"] for user in followers.json()] == ["alice"]
    assert [user["id"] for user in following.json()] == ["bob"]
    assert (await client.get("/api/users/nobody/followers")).status_code == 404


async def test_update_profile(client, users):
    response = await client.put(
        "/api/users/profile", json={"bio": "hi", "username": "bobby"}, headers=auth_headers("bob")
    )
    assert response.status_code == 200
    assert response.json()["username"] == "bobby"
    assert response.json()["bio"] == "hi"

    response = await client.put("/api/users/profile", json={"username": "carol"}, headers=auth_headers("bob"))
    assert response.status_code == 409


# Admin

async def test_admin_routes_require_admin(client, users):
    headers = auth_headers("bob")

    assert (await client.get("/api/admin/users", headers=headers)).status_code == 403
    assert (await client.get("/api/admin/posts", headers=headers)).status_code == 403
    assert (await client.post("/api/admin/users/carol/ban", headers=headers)).status_code == 403


async def test_admin_listings(client, users, session_factory):
    await create_post(session_factory, "bob")
    headers = auth_headers("alice")

    all_users = await client.get("/api/admin/users", headers=headers)
    all_posts = await client.get("/api/admin/posts", headers=headers)

    assert sorted(user["id"] for user in all_users.json()) == ["alice", "bob", "carol"]
    assert len(all_posts.json()) == 1


async def test_admin_delete_any_post(client, users, session_factory):
    post_id = await create_post(session_factory, "bob")

    response = await client.delete(f"/api/admin/posts/{post_id}", headers=auth_headers("alice"))
    assert response.status_code == 200
    assert (await client.get(f"/api/posts/{post_id}")).status_code == 404

    response = await client.delete(f"/api/admin/posts/{post_id}", headers=auth_headers("alice"))
    assert response.status_code == 404


async def test_ban_blocks_mutations_but_keeps_posts(client, users, session_factory):
    post_id = await create_post(session_factory, "bob", "still here")
    admin = auth_headers("alice")

    response = await client.post("/api/admin/users/bob/ban", headers=admin)
    assert response.status_code == 200

    response = await client.post("/api/posts", json={"content": "x"}, headers=auth_headers("bob"))
    assert response.status_code == 403

    explore = await client.get("/api/posts/explore", headers=auth_headers("bob"))
    assert [post["id"] for post in explore.json()] == [post_id]

    await client.post("/api/admin/users/bob/unban", headers=admin)
    response = await client.post("/api/posts", json={"content": "back"}, headers=auth_headers("bob"))
    assert response.status_code == 201


async def test_ban_missing_user_is_not_found(client, users):
    response = await client.post("/api/admin/users/nobody/ban", headers=auth_headers("alice"))
    assert response.status_code == 404


async def test_health(client):
    assert (await client.get("/health")).json() == {"status": "ok"}
