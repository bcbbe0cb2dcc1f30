"""Shared FastAPI dependencies."""
from __future__ import annotations

from typing import Any, AsyncGenerator, Dict

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.jwt import require_auth
from src.core.exceptions import ForbiddenError, UnauthorizedError
from src.db.models.user import User
from src.db.session import get_db
from src.repositories.user_repo import UserRepo
from src.services.limits import RequestLimiter, get_limiter


async def get_db_session(
    session: AsyncSession = Depends(get_db),
) -> AsyncGenerator[AsyncSession, None]:
    yield session


async def get_current_user(
    auth: Dict[str, Any] = Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """Resolve the bearer token to a stored user."""

    user = await UserRepo(db).get(auth["user_id"])
    if user is None:
        raise UnauthorizedError("User not found")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise ForbiddenError()
    return user


async def get_rate_limited_user(
    user: User = Depends(get_current_user),
    limiter: RequestLimiter = Depends(get_limiter),
) -> User:
    """Current user, after counting the request against their rate limit."""

    await limiter.check_rate_limit(str(user.id))
    return user
