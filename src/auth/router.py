from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.dependencies import get_current_active_user, get_token_claims, get_auth_service
from src.auth.exceptions import UserBannedException
from src.auth.schemas import TokenClaims
from src.auth.service import AuthService
from src.database import get_db
from src.users.models import User
from src.users.schemas import UserResponse

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.get("/user", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_active_user)):
    """Current signed-in user"""
    return UserResponse.model_validate(current_user)


@router.post("/sync", response_model=UserResponse)
async def sync_user(
    claims: TokenClaims = Depends(get_token_claims),
    service: AuthService = Depends(get_auth_service),
    db: AsyncSession = Depends(get_db)
):
    """
    Refresh the local profile from the identity provider's token claims

    - Creates the user on first sync
    - Overwrites email, names and avatar with the values present in the token
    """
    user = await service.sync_user(claims, db)
    if user.is_banned:
        raise UserBannedException()
    return UserResponse.model_validate(user)
