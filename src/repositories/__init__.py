"""Repository layer package."""

from src.repositories.category_repo import CategoryRepo
from src.repositories.subscription_repo import SubscriptionRepo
from src.repositories.user_repo import UserRepo

__all__ = [
    "CategoryRepo",
    "SubscriptionRepo",
    "UserRepo",
]
