"""Pydantic schemas for Subscription resources"""
from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import ConfigDict, Field

from src.db.models.enums import BillingCycle, SubscriptionStatus
from src.schemas.common import CamelModel


SortField = Literal["name", "amount", "nextBillingDate", "createdAt", "category"]
SortOrder = Literal["asc", "desc"]


class SubscriptionCreate(CamelModel):
    """
    Body for creating a subscription.

    Fields are deliberately loose so that the service layer reports
    missing or invalid values with its own messages.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    billing_cycle: Optional[str] = None
    is_trial: Optional[bool] = None
    trial_end_date: Optional[date] = None
    next_billing_date: Optional[date] = None
    last_billing_date: Optional[date] = None
    status: Optional[str] = None
    notes: Optional[str] = None


class SubscriptionUpdate(SubscriptionCreate):
    """
    Partial update body.

    Only keys present in the payload are applied (see ``model_fields_set``);
    an explicit ``null`` clears a nullable field.
    """


class SubscriptionRead(CamelModel):
    """Subscription as returned to clients."""

    id: UUID
    user_id: UUID
    name: str
    description: Optional[str] = None
    category: str
    amount: float
    currency: str
    billing_cycle: BillingCycle
    is_trial: bool
    trial_end_date: Optional[date] = None
    next_billing_date: date
    last_billing_date: Optional[date] = None
    status: SubscriptionStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SubscriptionListQuery(CamelModel):
    """Normalised, bounded listing request."""

    model_config = ConfigDict(frozen=True)

    page: int = 1
    limit: int = 10
    search: Optional[str] = None
    status: Optional[SubscriptionStatus] = None
    category: Optional[str] = None
    billing_cycle: Optional[BillingCycle] = None
    sort_by: SortField = "nextBillingDate"
    sort_order: SortOrder = "asc"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class CategoryTotal(CamelModel):
    category: str
    total: float
    count: int


class SubscriptionStats(CamelModel):
    """Spending totals over a user's active subscriptions."""

    total_monthly: float = Field(..., description="Sum of MONTHLY amounts")
    total_yearly: float = Field(..., description="Sum of YEARLY amounts")
    total_weekly: float = Field(..., description="Sum of WEEKLY amounts")
    monthly_equivalent: float = Field(
        ..., description="All active amounts normalised to one month"
    )
    by_category: List[CategoryTotal] = Field(default_factory=list)
    active_subscriptions: int = 0
    cancelled_subscriptions: int = 0
    paused_subscriptions: int = 0
