"""
Mapping from storage rows to response models.

The feed code never hands ORM objects to the API layer: each (Post, User)
row is turned into a PostResponse here, together with the counts and viewer
flags computed for the page.
"""
from typing import Dict, List, Sequence, Tuple

from src.engagement.counts import PostCounts, ViewerFlags
from src.posts.models import Post
from src.posts.schemas import AuthorResponse, PostResponse
from src.users.models import User


def to_author_response(user: User) -> AuthorResponse:
    return AuthorResponse(
        id=user.id,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
        profile_image_url=user.profile_image_url,
    )


def to_post_response(post: Post, author: User, counts: PostCounts, flags: ViewerFlags) -> PostResponse:
    return PostResponse(
        id=post.id,
        user_id=post.user_id,
        content=post.content,
        image_url=post.image_url,
        parent_post_id=post.parent_post_id,
        is_repost=bool(post.is_repost),
        original_post_id=post.original_post_id,
        user=to_author_response(author),
        likes_count=counts.likes,
        comments_count=counts.comments,
        reposts_count=counts.reposts,
        is_liked=post.id in flags.liked,
        is_bookmarked=post.id in flags.bookmarked,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


def to_post_responses(
    rows: Sequence[Tuple[Post, User]],
    counts: Dict[int, PostCounts],
    flags: ViewerFlags,
) -> List[PostResponse]:
    """Keeps the row order; the query already sorted the page."""
    return [
        to_post_response(post, author, counts.get(post.id, PostCounts()), flags)
        for post, author in rows
    ]
