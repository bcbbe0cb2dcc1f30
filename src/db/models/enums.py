"""Enumerations stored on ORM models."""
from __future__ import annotations

import enum


class BillingCycle(str, enum.Enum):
    """Cadence at which a subscription charges."""

    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"
    WEEKLY = "WEEKLY"


class SubscriptionStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    CANCELLED = "CANCELLED"
    PAUSED = "PAUSED"
    TRIAL = "TRIAL"


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    USER = "USER"
