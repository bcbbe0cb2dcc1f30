"""Endpoints for a user's subscriptions."""
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_db_session, get_rate_limited_user
from src.db.models.user import User
from src.schemas.common import Page
from src.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionRead,
    SubscriptionStats,
    SubscriptionUpdate,
)
from src.services.limits import RequestLimiter, get_limiter
from src.services.subscriptions import SubscriptionService


router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.get("", response_model=Page[SubscriptionRead])
async def list_subscriptions(
    page: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    status_filter: Optional[str] = Query(default=None, alias="status"),
    category: Optional[str] = Query(default=None),
    billing_cycle: Optional[str] = Query(default=None, alias="billingCycle"),
    sort_by: Optional[str] = Query(default=None, alias="sortBy"),
    sort_order: Optional[str] = Query(default=None, alias="sortOrder"),
    user: User = Depends(get_rate_limited_user),
    db: AsyncSession = Depends(get_db_session),
):
    raw = {
        "page": page,
        "limit": limit,
        "search": search,
        "status": status_filter,
        "category": category,
        "billingCycle": billing_cycle,
        "sortBy": sort_by,
        "sortOrder": sort_order,
    }
    return await SubscriptionService(db).list_subscriptions(user.id, raw)


@router.get("/stats", response_model=SubscriptionStats)
async def subscription_stats(
    user: User = Depends(get_rate_limited_user),
    db: AsyncSession = Depends(get_db_session),
):
    return await SubscriptionService(db).get_stats(user.id)


@router.get("/upcoming", response_model=List[SubscriptionRead])
async def upcoming_subscriptions(
    days: Optional[str] = Query(default=None),
    user: User = Depends(get_rate_limited_user),
    db: AsyncSession = Depends(get_db_session),
):
    return await SubscriptionService(db).get_upcoming(user.id, days)


@router.get("/{subscription_id}", response_model=SubscriptionRead)
async def get_subscription(
    subscription_id: str,
    user: User = Depends(get_rate_limited_user),
    db: AsyncSession = Depends(get_db_session),
):
    return await SubscriptionService(db).get_subscription(user.id, subscription_id)


@router.post("", response_model=SubscriptionRead, status_code=status.HTTP_201_CREATED)
async def create_subscription(
    body: SubscriptionCreate,
    idempotency_key: str | None = Header(default=None, alias="Idempotency-Key"),
    user: User = Depends(get_rate_limited_user),
    limiter: RequestLimiter = Depends(get_limiter),
    db: AsyncSession = Depends(get_db_session),
):
    await limiter.ensure_idempotent(str(user.id), idempotency_key)
    created = await SubscriptionService(db).create_subscription(user.id, body)
    await db.commit()
    return created


@router.put("/{subscription_id}", response_model=SubscriptionRead)
async def update_subscription(
    subscription_id: str,
    body: SubscriptionUpdate,
    user: User = Depends(get_rate_limited_user),
    db: AsyncSession = Depends(get_db_session),
):
    updated = await SubscriptionService(db).update_subscription(user.id, subscription_id, body)
    await db.commit()
    return updated


@router.delete("/{subscription_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subscription(
    subscription_id: str,
    user: User = Depends(get_rate_limited_user),
    db: AsyncSession = Depends(get_db_session),
):
    await SubscriptionService(db).delete_subscription(user.id, subscription_id)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
