"""
Dependencies for Users module
"""
from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db
from src.users.exceptions import UserNotFoundException
from src.users.models import User
from src.users.service import UsersService


def get_users_service() -> UsersService:
    """Dependency to get UsersService instance"""
    return UsersService()


async def require_user_id(
    user_id: str,
    db: AsyncSession = Depends(get_db)
) -> str:
    """
    Return user_id if the user exists, otherwise raise 404

    Raises:
        UserNotFoundException: if the user does not exist
    """
    result = await db.execute(select(User.id).where(User.id == user_id))
    if result.first() is None:
        raise UserNotFoundException()
    return user_id
