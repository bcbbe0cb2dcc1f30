"""Subscription model: a recurring payment tracked by one user."""
from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean, Date, DateTime, Enum, ForeignKey, Numeric, String, Text, Uuid, func
)
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import Base
from src.db.models.enums import BillingCycle, SubscriptionStatus


class Subscription(Base):
    """Represents one recurring charge owned by a user."""

    __tablename__ = "subscriptions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # Matches Category.name by convention only, no foreign key.
    category: Mapped[str] = mapped_column(String, index=True, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    billing_cycle: Mapped[BillingCycle] = mapped_column(
        Enum(BillingCycle, native_enum=False, length=16), nullable=False
    )
    is_trial: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    trial_end_date: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    next_billing_date: Mapped[dt.date] = mapped_column(Date, index=True, nullable=False)
    last_billing_date: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    status: Mapped[SubscriptionStatus] = mapped_column(
        Enum(SubscriptionStatus, native_enum=False, length=16),
        nullable=False,
        default=SubscriptionStatus.ACTIVE,
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Subscription {self.id} user={self.user_id} name={self.name!r}>"
