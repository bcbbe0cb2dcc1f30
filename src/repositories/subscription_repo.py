"""Repository utilities for user subscriptions."""
from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import ColumnElement, and_, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models.enums import SubscriptionStatus
from src.db.models.subscription import Subscription
from src.schemas.subscription import SubscriptionListQuery


SORT_COLUMNS = {
    "name": Subscription.name,
    "amount": Subscription.amount,
    "nextBillingDate": Subscription.next_billing_date,
    "createdAt": Subscription.created_at,
    "category": Subscription.category,
}


def build_filter(user_id: UUID, query: SubscriptionListQuery) -> ColumnElement[bool]:
    """Combine ownership, search and equality filters into one predicate."""

    clauses: List[ColumnElement[bool]] = [Subscription.user_id == user_id]

    if query.search:
        clauses.append(
            or_(
                Subscription.name.icontains(query.search, autoescape=True),
                Subscription.description.icontains(query.search, autoescape=True),
                Subscription.category.icontains(query.search, autoescape=True),
            )
        )
    if query.status is not None:
        clauses.append(Subscription.status == query.status)
    if query.category:
        clauses.append(Subscription.category == query.category)
    if query.billing_cycle is not None:
        clauses.append(Subscription.billing_cycle == query.billing_cycle)

    return and_(*clauses)


class SubscriptionRepo:
    """Data-access helpers for :class:`Subscription`."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_page(
        self, user_id: UUID, query: SubscriptionListQuery
    ) -> Tuple[List[Subscription], int]:
        """Return one page of matching subscriptions and the unpaged total."""

        where = build_filter(user_id, query)
        column = SORT_COLUMNS[query.sort_by]
        order = column.desc() if query.sort_order == "desc" else column.asc()

        # AsyncSession does not allow concurrent statements, so the page and
        # the count run back to back on the same connection.
        result = await self.session.execute(
            select(Subscription)
            .where(where)
            .order_by(order)
            .offset(query.offset)
            .limit(query.limit)
        )
        items = list(result.scalars().all())

        total = await self.session.execute(
            select(func.count()).select_from(Subscription).where(where)
        )
        return items, int(total.scalar_one() or 0)

    async def get_for_user(self, user_id: UUID, subscription_id: UUID) -> Optional[Subscription]:
        result = await self.session.execute(
            select(Subscription).where(
                Subscription.id == subscription_id,
                Subscription.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_active(self, user_id: UUID) -> List[Subscription]:
        result = await self.session.execute(
            select(Subscription).where(
                Subscription.user_id == user_id,
                Subscription.status == SubscriptionStatus.ACTIVE,
            )
        )
        return list(result.scalars().all())

    async def list_due_by(self, user_id: UUID, horizon: dt.date) -> List[Subscription]:
        """Active subscriptions billed on or before ``horizon``, soonest first."""

        result = await self.session.execute(
            select(Subscription)
            .where(
                Subscription.user_id == user_id,
                Subscription.status == SubscriptionStatus.ACTIVE,
                Subscription.next_billing_date <= horizon,
            )
            .order_by(Subscription.next_billing_date.asc())
        )
        return list(result.scalars().all())

    async def create(self, user_id: UUID, values: Dict[str, Any]) -> Subscription:
        subscription = Subscription(user_id=user_id, **values)
        self.session.add(subscription)
        await self.session.flush()
        await self.session.refresh(subscription)
        return subscription

    async def update(self, subscription: Subscription, changes: Dict[str, Any]) -> Subscription:
        for field, value in changes.items():
            setattr(subscription, field, value)
        self.session.add(subscription)
        await self.session.flush()
        await self.session.refresh(subscription)
        return subscription

    async def delete(self, subscription: Subscription) -> None:
        await self.session.delete(subscription)
        await self.session.flush()

    async def delete_all_for_user(self, user_id: UUID) -> int:
        result = await self.session.execute(
            delete(Subscription).where(Subscription.user_id == user_id)
        )
        await self.session.flush()
        return int(result.rowcount or 0)
