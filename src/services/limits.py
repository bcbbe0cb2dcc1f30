"""Per-user request throttling and idempotency keys backed by Redis."""
from __future__ import annotations

import logging
import time
from typing import Optional

import redis.asyncio as redis
from fastapi import HTTPException, Request, status

from src.core.config import LimitSettings


logger = logging.getLogger(__name__)

IDEMPOTENCY_TTL_SECONDS = 60 * 30


class RequestLimiter:
    """
    Holds the Redis handle used for rate limiting and idempotency.

    Built next to the ``Database`` in the application factory, closed in the
    lifespan, and reached by handlers through :func:`get_limiter`.
    """

    def __init__(self, client: redis.Redis, limits: LimitSettings) -> None:
        self.client = client
        self.limits = limits

    @classmethod
    def from_url(cls, url: str, limits: LimitSettings) -> "RequestLimiter":
        # from_url only builds the pool, connections open on first command.
        return cls(redis.from_url(url, decode_responses=True), limits)

    async def close(self) -> None:
        await self.client.aclose()

    async def check_rate_limit(self, user_id: str) -> None:
        """Fixed one-minute window per user."""

        if not self.limits.enabled:
            return
        window = int(time.time() // 60)
        key = f"rate:{user_id}:{window}"
        hits = await self.client.incr(key)
        if hits == 1:
            await self.client.expire(key, 60)
        if hits > self.limits.rate_limit_rpm:
            logger.warning(f"Rate limit exceeded for user {user_id}")
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Rate limit exceeded",
            )

    async def ensure_idempotent(self, user_id: str, key: Optional[str]) -> None:
        """Remember ``key`` for half an hour and reject a second use of it."""

        if not key or not self.limits.enabled:
            return
        first_use = await self.client.set(
            f"idempotency:{user_id}:{key}", "1", ex=IDEMPOTENCY_TTL_SECONDS, nx=True
        )
        if not first_use:
            logger.info(f"Duplicate idempotency key {key!r} from user {user_id}")
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Duplicate request (idempotency)",
            )


def get_limiter(request: Request) -> RequestLimiter:
    return request.app.state.limiter
