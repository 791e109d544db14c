import logging
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.schemas import TokenClaims
from src.users.models import User
from src.users.schemas import UserUpsert
from src.users.service import UsersService

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self):
        """Initialize AuthService"""
        self.users_service = UsersService()

    async def sync_user(self, claims: TokenClaims, db: AsyncSession) -> User:
        """
        Create or refresh the local user from identity provider claims.

        Only claims present in the token overwrite stored profile fields.
        """
        user_data = UserUpsert(id=claims.sub, **claims.model_dump(exclude={"sub"}, exclude_none=True))
        user = await self.users_service.upsert_user(user_data, db)
        logger.debug("Synced user %s from token claims", claims.sub)
        return user
