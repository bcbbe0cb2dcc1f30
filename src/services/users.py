"""User operations: identity hand-off and administration."""
from __future__ import annotations

import logging
from typing import Any, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import NotFoundError, ValidationError
from src.db.models.enums import UserRole
from src.db.models.user import User
from src.repositories.subscription_repo import SubscriptionRepo
from src.repositories.user_repo import UserRepo
from src.services.validation import parse_enum


logger = logging.getLogger(__name__)


class UserService:
    """Data-access orchestration for :class:`User` records."""

    def __init__(self, session: AsyncSession) -> None:
        self.repo = UserRepo(session)
        self.subscriptions = SubscriptionRepo(session)

    async def get_or_create_user(
        self,
        email: Optional[str],
        name: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> User:
        """Return the user owning a verified email, creating a USER on first sight."""

        email = (email or "").strip().lower()
        if not email:
            raise ValidationError("Email is required")

        user = await self.repo.get_by_email(email)
        if user is None:
            user = await self.repo.create(email=email, name=name, avatar=avatar)
            logger.info(f"Registered user {user.id}")
        return user

    async def _load(self, user_id: Any) -> User:
        if not user_id:
            raise ValidationError("User id is required")
        try:
            key = user_id if isinstance(user_id, UUID) else UUID(str(user_id))
        except ValueError:
            raise NotFoundError("User", user_id) from None
        user = await self.repo.get(key)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def list_users(self) -> List[User]:
        return await self.repo.list_all()

    async def get_user(self, user_id: Any) -> User:
        return await self._load(user_id)

    async def update_role(self, user_id: Any, role: Any) -> User:
        if not user_id:
            raise ValidationError("User id is required")
        new_role = parse_enum(UserRole, role, "Invalid role")
        user = await self._load(user_id)
        user = await self.repo.set_role(user, new_role)
        logger.info(f"User {user.id} role set to {new_role.value}")
        return user

    async def delete_user(self, user_id: Any) -> None:
        user = await self._load(user_id)
        removed = await self.subscriptions.delete_all_for_user(user.id)
        await self.repo.delete(user)
        logger.info(f"Deleted user {user.id} and {removed} subscriptions")
