"""
Router for Users module
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db
from src.users.service import UsersService
from src.users.schemas import UserProfileUpdate, UserResponse, UserWithCounts
from src.users.dependencies import get_users_service
from src.users.exceptions import UserException, UserNotFoundException
from src.auth.dependencies import get_current_active_user, get_current_user_optional
from src.users.models import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def _viewer_id(user: Optional[User]) -> Optional[str]:
    return user.id if user else None


@router.get("/search/{query}", response_model=List[UserWithCounts])
async def search_users(
    query: str,
    current_user: Optional[User] = Depends(get_current_user_optional),
    service: UsersService = Depends(get_users_service),
    db: AsyncSession = Depends(get_db)
):
    """
    Search users

    - Case-insensitive substring match on username, first name and last name
    - At most 20 results
    """
    try:
        return await service.search_users(query, _viewer_id(current_user), db)
    except Exception:
        logger.exception("Error searching users for %r", query)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to search users"
        )


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    user_data: UserProfileUpdate,
    current_user: User = Depends(get_current_active_user),
    service: UsersService = Depends(get_users_service),
    db: AsyncSession = Depends(get_db)
):
    """
    Update the current user's profile
    - Only the fields present in the body are changed
    - **username**: must be unique (409 otherwise)
    """
    user_id = current_user.id
    try:
        user = await service.update_user(user_id, user_data, db)
    except UserException:
        raise
    except Exception:
        logger.exception("Error updating profile of user %s", user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update profile"
        )
    if user is None:
        raise UserNotFoundException()
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserWithCounts)
async def get_user(
    user_id: str,
    current_user: Optional[User] = Depends(get_current_user_optional),
    service: UsersService = Depends(get_users_service),
    db: AsyncSession = Depends(get_db)
):
    """User profile with follower, following and post counts"""
    user = await service.get_user_with_counts(user_id, _viewer_id(current_user), db)
    if user is None:
        raise UserNotFoundException()
    return user


@router.get("/{username}/by-username", response_model=UserWithCounts)
async def get_user_by_username(
    username: str,
    current_user: Optional[User] = Depends(get_current_user_optional),
    service: UsersService = Depends(get_users_service),
    db: AsyncSession = Depends(get_db)
):
    user = await service.get_user_by_username(username, _viewer_id(current_user), db)
    if user is None:
        raise UserNotFoundException()
    return user


@router.get("/{user_id}/followers", response_model=List[UserWithCounts])
async def get_followers(
    user_id: str,
    current_user: Optional[User] = Depends(get_current_user_optional),
    service: UsersService = Depends(get_users_service),
    db: AsyncSession = Depends(get_db)
):
    """Users following the given user"""
    if await service.get_user(user_id, db) is None:
        raise UserNotFoundException()
    return await service.get_followers(user_id, _viewer_id(current_user), db)


@router.get("/{user_id}/following", response_model=List[UserWithCounts])
async def get_following(
    user_id: str,
    current_user: Optional[User] = Depends(get_current_user_optional),
    service: UsersService = Depends(get_users_service),
    db: AsyncSession = Depends(get_db)
):
    """Users the given user follows"""
    if await service.get_user(user_id, db) is None:
        raise UserNotFoundException()
    return await service.get_following(user_id, _viewer_id(current_user), db)
