"""Database models package exports."""

from src.db.models.category import Category
from src.db.models.enums import BillingCycle, SubscriptionStatus, UserRole
from src.db.models.subscription import Subscription
from src.db.models.user import User

__all__ = [
    "BillingCycle",
    "Category",
    "Subscription",
    "SubscriptionStatus",
    "User",
    "UserRole",
]
