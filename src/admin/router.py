"""
Router for moderation endpoints; every route requires an administrator
"""
import logging
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db
from src.auth.dependencies import get_current_admin_user
from src.users.models import User
from src.users.schemas import UserWithCounts
from src.users.service import UsersService
from src.users.dependencies import get_users_service
from src.users.exceptions import UserNotFoundException, UserValidationException
from src.posts.schemas import PostResponse, MessageResponse
from src.posts.service import PostService
from src.posts.dependencies import get_post_service
from src.posts.exceptions import PostNotFoundException
from src.pagination import OffsetParams, get_admin_offset_params

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/users", response_model=List[UserWithCounts])
async def get_all_users(
    pagination: OffsetParams = Depends(get_admin_offset_params),
    current_user: User = Depends(get_current_admin_user),
    service: UsersService = Depends(get_users_service),
    db: AsyncSession = Depends(get_db)
):
    """All users, newest first (default page size 50)"""
    return await service.get_all_users(db, pagination.limit, pagination.offset)


@router.get("/posts", response_model=List[PostResponse])
async def get_all_posts(
    pagination: OffsetParams = Depends(get_admin_offset_params),
    current_user: User = Depends(get_current_admin_user),
    service: PostService = Depends(get_post_service),
    db: AsyncSession = Depends(get_db)
):
    return await service.get_all_posts_admin(db, pagination.limit, pagination.offset)


@router.delete("/posts/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: int,
    current_user: User = Depends(get_current_admin_user),
    service: PostService = Depends(get_post_service),
    db: AsyncSession = Depends(get_db)
):
    """Delete any post regardless of its author"""
    if not await service.delete_post_as_admin(post_id, db):
        raise PostNotFoundException()
    return MessageResponse(message="Post deleted successfully")


@router.post("/users/{user_id}/ban", response_model=MessageResponse)
async def ban_user(
    user_id: str,
    current_user: User = Depends(get_current_admin_user),
    service: UsersService = Depends(get_users_service),
    db: AsyncSession = Depends(get_db)
):
    """
    Ban a user
    - Banned users get 403 on every authenticated endpoint
    - Their existing posts stay visible
    """
    if user_id == current_user.id:
        raise UserValidationException("Administrators cannot ban themselves")
    if not await service.ban_user(user_id, db):
        raise UserNotFoundException()
    return MessageResponse(message="User banned successfully")


@router.post("/users/{user_id}/unban", response_model=MessageResponse)
async def unban_user(
    user_id: str,
    current_user: User = Depends(get_current_admin_user),
    service: UsersService = Depends(get_users_service),
    db: AsyncSession = Depends(get_db)
):
    if not await service.unban_user(user_id, db):
        raise UserNotFoundException()
    return MessageResponse(message="User unbanned successfully")
