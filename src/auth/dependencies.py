from typing import Optional

from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.exceptions import (
    TokenMissingException,
    TokenNotValidException,
    UserBannedException,
    AdminRequiredException,
)
from src.auth.schemas import TokenClaims
from src.auth.service import AuthService
from src.auth.utils import decode_access_token, extract_bearer_token
from src.config import settings
from src.database import get_db
from src.users.models import User


def get_auth_service() -> AuthService:
    """Get AuthService instance"""
    return AuthService()

def _read_token(request: Request) -> Optional[str]:
    # Cookie first, Authorization header as fallback
    token = request.cookies.get(settings.ACCESS_TOKEN_COOKIE_NAME)
    if not token:
        token = extract_bearer_token(request.headers.get("Authorization"))
    return token

def get_token_from_cookie_or_header(request: Request) -> str:
    """
    Get token from cookie (preferred) or Authorization header (fallback)
    """
    token = _read_token(request)
    if not token:
        raise TokenMissingException()
    return token

async def get_token_claims(token: str = Depends(get_token_from_cookie_or_header)) -> TokenClaims:
    payload = decode_access_token(token)
    if payload is None:
        raise TokenNotValidException()
    return TokenClaims.model_validate(payload)

async def get_user_by_id(user_id: str, db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()

async def get_current_user(
    claims: TokenClaims = Depends(get_token_claims),
    db: AsyncSession = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """Resolve the token subject to a User, creating it on first sight"""
    user = await get_user_by_id(claims.sub, db)
    if user is None:
        user = await auth_service.sync_user(claims, db)
    return user

async def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    if current_user.is_banned:
        raise UserBannedException()
    return current_user

async def get_current_admin_user(current_user: User = Depends(get_current_active_user)) -> User:
    if not current_user.is_admin:
        raise AdminRequiredException()
    return current_user

async def get_current_user_optional(
    request: Request,
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """
    Get current user optionally - returns User if authenticated, None if not
    Useful for read endpoints that personalise flags for a signed-in viewer
    """
    token = _read_token(request)
    if not token:
        return None

    payload = decode_access_token(token)
    if payload is None:
        return None

    user = await get_user_by_id(payload["sub"], db)
    if user is None or user.is_banned:
        return None
    return user
