from typing import Dict

from src.auth.utils import create_access_token
from src.posts.models import Post
from src.users.models import User


def auth_headers(user_id: str, **claims) -> Dict[str, str]:
    token = create_access_token({"sub": user_id, **claims})
    return {"Authorization": f"Bearer {token}"}


async def create_user(session_factory, user_id: str, username: str = None, **fields) -> User:
    async with session_factory() as session:
        user = User(id=user_id, username=username or user_id, **fields)
        session.add(user)
        await session.commit()
        return user


async def create_post(session_factory, user_id: str, content: str = "post", **fields) -> int:
    async with session_factory() as session:
        post = Post(user_id=user_id, content=content, **fields)
        session.add(post)
        await session.commit()
        return post.id
