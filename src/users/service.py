"""
Service layer for Users: directory lookups, search, profile updates and moderation flags
"""
import logging
from typing import List, Optional, Sequence

from sqlalchemy import select, update, or_, desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from src.config import settings
from src.engagement.counts import EngagementCounts, UserCounts
from src.engagement.models import Follow
from src.users.models import User
from src.users.schemas import UserUpsert, UserProfileUpdate, UserResponse, UserWithCounts
from src.users.exceptions import UserAlreadyExistsException

logger = logging.getLogger(__name__)


class UsersService:
    def __init__(self):
        """Initialize UsersService"""
        self.engagement_counts = EngagementCounts()

    async def _with_counts(self, users: Sequence[User], viewer_id: Optional[str], db: AsyncSession) -> List[UserWithCounts]:
        user_ids = [user.id for user in users]
        counts = await self.engagement_counts.for_users(user_ids, db)
        followed = await self.engagement_counts.following_among(viewer_id, user_ids, db)

        result = []
        for user in users:
            user_counts = counts.get(user.id, UserCounts())
            result.append(UserWithCounts(
                **UserResponse.model_validate(user).model_dump(),
                followers_count=user_counts.followers,
                following_count=user_counts.following,
                posts_count=user_counts.posts,
                is_following=user.id in followed,
            ))
        return result

    async def get_user(self, user_id: str, db: AsyncSession) -> Optional[User]:
        """Get user row by ID"""
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_with_counts(self, user_id: str, viewer_id: Optional[str], db: AsyncSession) -> Optional[UserWithCounts]:
        """Get user by ID with follower/following/post counts; None when missing"""
        user = await self.get_user(user_id, db)
        if user is None:
            return None
        users = await self._with_counts([user], viewer_id, db)
        return users[0]

    async def get_user_by_username(self, username: str, viewer_id: Optional[str], db: AsyncSession) -> Optional[UserWithCounts]:
        """Get user by username (exact match)"""
        result = await db.execute(select(User).where(User.username == username))
        user = result.scalar_one_or_none()
        if user is None:
            return None
        users = await self._with_counts([user], viewer_id, db)
        return users[0]

    async def search_users(self, query: str, viewer_id: Optional[str], db: AsyncSession) -> List[UserWithCounts]:
        """Case-insensitive substring match on username, first name or last name"""
        # % and _ in the query match literally
        escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        result = await db.execute(
            select(User).where(
                or_(
                    User.username.ilike(pattern, escape="\\"),
                    User.first_name.ilike(pattern, escape="\\"),
                    User.last_name.ilike(pattern, escape="\\"),
                )
            ).limit(settings.SEARCH_RESULT_LIMIT)
        )
        return await self._with_counts(result.scalars().all(), viewer_id, db)

    async def get_all_users(
        self,
        db: AsyncSession,
        limit: int = settings.ADMIN_PAGE_SIZE,
        offset: int = 0,
    ) -> List[UserWithCounts]:
        """All users, newest first"""
        result = await db.execute(
            select(User).order_by(desc(User.created_at), User.id).offset(offset).limit(limit)
        )
        return await self._with_counts(result.scalars().all(), None, db)

    async def get_followers(self, user_id: str, viewer_id: Optional[str], db: AsyncSession) -> List[UserWithCounts]:
        """Users following user_id"""
        result = await db.execute(
            select(User)
            .join(Follow, Follow.follower_id == User.id)
            .where(Follow.following_id == user_id)
            .order_by(desc(Follow.created_at), desc(Follow.id))
        )
        return await self._with_counts(result.scalars().all(), viewer_id, db)

    async def get_following(self, user_id: str, viewer_id: Optional[str], db: AsyncSession) -> List[UserWithCounts]:
        """Users that user_id follows"""
        result = await db.execute(
            select(User)
            .join(Follow, Follow.following_id == User.id)
            .where(Follow.follower_id == user_id)
            .order_by(desc(Follow.created_at), desc(Follow.id))
        )
        return await self._with_counts(result.scalars().all(), viewer_id, db)

    async def upsert_user(self, user_data: UserUpsert, db: AsyncSession) -> User:
        """Create the user or refresh the profile fields owned by the identity provider"""
        user = await self.get_user(user_data.id, db)
        if user is None:
            user = User(**user_data.model_dump())
            db.add(user)
            try:
                await db.commit()
            except IntegrityError:
                await db.rollback()
                # A concurrent first request may have inserted the same subject
                user = await self.get_user(user_data.id, db)
                if user is None:
                    raise UserAlreadyExistsException("Email is already used by another user")
                return await self._refresh_profile(user, user_data, db)
            logger.info("Created user %s from identity provider", user_data.id)
            await db.refresh(user)
            return user
        return await self._refresh_profile(user, user_data, db)

    async def _refresh_profile(self, user: User, user_data: UserUpsert, db: AsyncSession) -> User:
        for field, value in user_data.model_dump(exclude={"id"}, exclude_unset=True).items():
            setattr(user, field, value)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise UserAlreadyExistsException("Email is already used by another user")
        await db.refresh(user)
        return user

    async def update_user(self, user_id: str, user_data: UserProfileUpdate, db: AsyncSession) -> Optional[User]:
        """Merge the provided profile fields into the user; None when the user is missing"""
        user = await self.get_user(user_id, db)
        if user is None:
            return None

        updates = user_data.model_dump(exclude_unset=True)
        if "username" in updates and updates["username"] is not None:
            result = await db.execute(
                select(User.id).where(User.username == updates["username"], User.id != user_id)
            )
            if result.first() is not None:
                raise UserAlreadyExistsException()

        for field, value in updates.items():
            setattr(user, field, value)

        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise UserAlreadyExistsException()
        await db.refresh(user)
        return user

    async def _set_banned(self, user_id: str, banned: bool, db: AsyncSession) -> bool:
        result = await db.execute(
            update(User).where(User.id == user_id).values(is_banned=banned, updated_at=func.now())
        )
        await db.commit()
        return (result.rowcount or 0) > 0

    async def ban_user(self, user_id: str, db: AsyncSession) -> bool:
        """Flag the user as banned; banned users can no longer authenticate"""
        banned = await self._set_banned(user_id, True, db)
        if banned:
            logger.info("User %s banned", user_id)
        return banned

    async def unban_user(self, user_id: str, db: AsyncSession) -> bool:
        unbanned = await self._set_banned(user_id, False, db)
        if unbanned:
            logger.info("User %s unbanned", user_id)
        return unbanned
