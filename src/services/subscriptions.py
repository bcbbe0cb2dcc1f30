"""
Subscription operations: listing, lookup, lifecycle, statistics and
upcoming billing. Every operation is scoped to the calling user.
"""
from __future__ import annotations

import datetime as dt
import logging
import math
from typing import Any, List, Mapping, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import NotFoundError, ValidationError
from src.db.models.subscription import Subscription
from src.repositories.subscription_repo import SubscriptionRepo
from src.schemas.common import Page, PaginationMeta
from src.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionRead,
    SubscriptionStats,
    SubscriptionUpdate,
)
from src.services import validation
from src.services.stats import build_stats


logger = logging.getLogger(__name__)


def _as_uuid(value: Any, message: str) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError as exc:
        raise ValidationError(message) from exc


class SubscriptionService:
    """Business operations over a user's subscriptions."""

    def __init__(self, session: AsyncSession, repo: Optional[SubscriptionRepo] = None) -> None:
        self.session = session
        self.repo = repo or SubscriptionRepo(session)

    async def list_subscriptions(
        self, user_id: Any, raw_query: Mapping[str, Any] | None = None
    ) -> Page[SubscriptionRead]:
        validation.require_user_id(user_id)
        query = validation.parse_list_query(raw_query or {})
        owner = _as_uuid(user_id, "Invalid user id")

        items, total = await self.repo.find_page(owner, query)
        return Page[SubscriptionRead](
            data=[SubscriptionRead.model_validate(item) for item in items],
            pagination=PaginationMeta(
                page=query.page,
                limit=query.limit,
                total=total,
                total_pages=math.ceil(total / query.limit),
            ),
        )

    async def _get_owned(self, user_id: Any, subscription_id: Any) -> Subscription:
        validation.require_user_id(user_id)
        validation.require_id(subscription_id)
        owner = _as_uuid(user_id, "Invalid user id")
        try:
            key = _as_uuid(subscription_id, "Subscription id is required")
        except ValidationError:
            # Malformed ids cannot exist, report them the same way as absent ones.
            raise NotFoundError("Subscription", subscription_id) from None

        subscription = await self.repo.get_for_user(owner, key)
        if subscription is None:
            raise NotFoundError("Subscription", subscription_id)
        return subscription

    async def get_subscription(self, user_id: Any, subscription_id: Any) -> SubscriptionRead:
        subscription = await self._get_owned(user_id, subscription_id)
        return SubscriptionRead.model_validate(subscription)

    async def create_subscription(
        self, user_id: Any, data: SubscriptionCreate
    ) -> SubscriptionRead:
        validation.require_user_id(user_id)
        values = validation.validate_create(data)
        owner = _as_uuid(user_id, "Invalid user id")

        subscription = await self.repo.create(owner, values)
        logger.info(f"Created subscription {subscription.id} for user {owner}")
        return SubscriptionRead.model_validate(subscription)

    async def update_subscription(
        self, user_id: Any, subscription_id: Any, data: SubscriptionUpdate
    ) -> SubscriptionRead:
        validation.require_user_id(user_id)
        validation.require_id(subscription_id)
        changes = validation.validate_update(data)

        subscription = await self._get_owned(user_id, subscription_id)
        if changes:
            subscription = await self.repo.update(subscription, changes)
            logger.info(
                f"Updated subscription {subscription.id} fields={sorted(changes)}"
            )
        return SubscriptionRead.model_validate(subscription)

    async def delete_subscription(self, user_id: Any, subscription_id: Any) -> None:
        subscription = await self._get_owned(user_id, subscription_id)
        await self.repo.delete(subscription)
        logger.info(f"Deleted subscription {subscription_id} for user {user_id}")

    async def get_stats(self, user_id: Any) -> SubscriptionStats:
        validation.require_user_id(user_id)
        owner = _as_uuid(user_id, "Invalid user id")
        return build_stats(await self.repo.list_active(owner))

    async def get_upcoming(
        self, user_id: Any, days: Any = None, *, today: Optional[dt.date] = None
    ) -> List[SubscriptionRead]:
        """Active subscriptions billed within ``days`` from today, overdue ones included."""

        validation.require_user_id(user_id)
        owner = _as_uuid(user_id, "Invalid user id")
        start = today or dt.date.today()
        # Horizons past the calendar end mean "everything due so far".
        window = min(validation.parse_days(days), (dt.date.max - start).days)
        horizon = start + dt.timedelta(days=window)

        items = await self.repo.list_due_by(owner, horizon)
        return [SubscriptionRead.model_validate(item) for item in items]
