"""
Parsing and validation of caller input before it reaches business logic
"""
from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional, Type, TypeVar
from enum import Enum

from src.core.config import settings
from src.core.exceptions import ValidationError
from src.db.models.enums import BillingCycle, SubscriptionStatus
from src.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionListQuery,
    SubscriptionUpdate,
)


E = TypeVar("E", bound=Enum)

SORT_FIELDS = ("name", "amount", "nextBillingDate", "createdAt", "category")
DEFAULT_SORT_FIELD = "nextBillingDate"

# Largest OFFSET the store drivers accept (signed 64-bit).
MAX_OFFSET = 2**63 - 1

# Columns that accept an explicit null on update.
NULLABLE_FIELDS = frozenset(
    {"description", "notes", "trial_end_date", "last_billing_date"}
)


def require_user_id(user_id: Any) -> None:
    if user_id is None or (isinstance(user_id, str) and not user_id.strip()):
        raise ValidationError("User id is required")


def require_id(subscription_id: Any) -> None:
    if subscription_id is None or (
        isinstance(subscription_id, str) and not subscription_id.strip()
    ):
        raise ValidationError("Subscription id is required")


def _positive_int(raw: Any, default: int) -> int:
    """Coerce ``raw`` to a positive int, falling back to ``default``."""

    if raw is None or isinstance(raw, bool):
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(value) or value <= 0:
        return default
    value = int(value)
    return value if value > 0 else default


def _optional_text(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def parse_enum(enum_cls: Type[E], raw: Any, message: str) -> E:
    if isinstance(raw, enum_cls):
        return raw
    try:
        return enum_cls(raw)
    except ValueError as exc:
        raise ValidationError(message) from exc


def _optional_enum(enum_cls: Type[E], raw: Any, message: str) -> Optional[E]:
    if raw is None or raw == "":
        return None
    return parse_enum(enum_cls, raw, message)


def parse_list_query(raw: Mapping[str, Any]) -> SubscriptionListQuery:
    """
    Turn raw query-string values into a bounded :class:`SubscriptionListQuery`.

    Unknown sort fields silently fall back to ``nextBillingDate`` and any
    sort order other than ``desc`` means ascending. Invalid status or billing
    cycle filters raise :class:`ValidationError`.
    """
    limits = settings.limits
    page = _positive_int(raw.get("page"), 1)
    limit = min(
        _positive_int(raw.get("limit"), limits.default_page_size),
        limits.max_page_size,
    )
    # Keeps (page - 1) * limit within MAX_OFFSET.
    page = min(page, MAX_OFFSET // limit + 1)

    sort_by = raw.get("sortBy", raw.get("sort_by"))
    if sort_by not in SORT_FIELDS:
        sort_by = DEFAULT_SORT_FIELD
    sort_order = "desc" if raw.get("sortOrder", raw.get("sort_order")) == "desc" else "asc"

    billing_cycle = _optional_enum(
        BillingCycle,
        raw.get("billingCycle", raw.get("billing_cycle")),
        "Invalid billing cycle",
    )
    status = _optional_enum(
        SubscriptionStatus, raw.get("status"), "Invalid subscription status"
    )

    return SubscriptionListQuery(
        page=page,
        limit=limit,
        search=_optional_text(raw.get("search")),
        status=status,
        category=_optional_text(raw.get("category")),
        billing_cycle=billing_cycle,
        sort_by=sort_by,
        sort_order=sort_order,
    )


def parse_days(raw: Any) -> int:
    """Upcoming-billing horizon in days, defaulting when not a positive number."""

    return _positive_int(raw, settings.limits.default_upcoming_days)


def _positive_amount(raw: Any) -> Decimal:
    if raw is None or isinstance(raw, bool):
        raise ValidationError("Amount must be a positive number")
    try:
        amount = raw if isinstance(raw, Decimal) else Decimal(str(raw))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError("Amount must be a positive number") from exc
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("Amount must be a positive number")
    return amount


def _currency(raw: Any) -> str:
    code = str(raw).strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise ValidationError("Currency must be a 3-letter code")
    return code


def _required_text(raw: Any, message: str) -> str:
    if raw is None or not str(raw).strip():
        raise ValidationError(message)
    return str(raw).strip()


def validate_create(data: SubscriptionCreate) -> Dict[str, Any]:
    """Validate a create payload and return column values with defaults applied."""

    name = _required_text(data.name, "Name is required")
    category = _required_text(data.category, "Category is required")
    amount = _positive_amount(data.amount)
    if not data.billing_cycle:
        raise ValidationError("Invalid billing cycle")
    billing_cycle = parse_enum(BillingCycle, data.billing_cycle, "Invalid billing cycle")
    if data.next_billing_date is None:
        raise ValidationError("Next billing date is required")
    status = _optional_enum(
        SubscriptionStatus, data.status, "Invalid subscription status"
    )

    return {
        "name": name,
        "category": category,
        "amount": amount,
        "currency": _currency(data.currency) if data.currency else "USD",
        "billing_cycle": billing_cycle,
        "is_trial": bool(data.is_trial) if data.is_trial is not None else False,
        "trial_end_date": data.trial_end_date,
        "next_billing_date": data.next_billing_date,
        "last_billing_date": data.last_billing_date,
        "status": status or SubscriptionStatus.ACTIVE,
        "description": data.description,
        "notes": data.notes,
    }


def validate_update(data: SubscriptionUpdate) -> Dict[str, Any]:
    """
    Validate a partial update and return only the fields the caller sent.

    Omitted keys are absent from the result, keys sent as null map to None
    and are only accepted for nullable columns.
    """
    changes: Dict[str, Any] = {}

    for field in data.model_fields_set:
        value = getattr(data, field)

        if field == "amount":
            changes[field] = _positive_amount(value)
            continue
        if value is None:
            if field not in NULLABLE_FIELDS:
                raise ValidationError(f"{field} cannot be null")
            changes[field] = None
            continue

        if field == "name":
            changes[field] = _required_text(value, "Name is required")
        elif field == "category":
            changes[field] = _required_text(value, "Category is required")
        elif field == "billing_cycle":
            changes[field] = parse_enum(BillingCycle, value, "Invalid billing cycle")
        elif field == "status":
            changes[field] = parse_enum(
                SubscriptionStatus, value, "Invalid subscription status"
            )
        elif field == "currency":
            changes[field] = _currency(value)
        else:
            changes[field] = value

    return changes
