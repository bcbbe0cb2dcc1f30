"""Spending statistics over a set of subscriptions."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable

from src.db.models.enums import BillingCycle, SubscriptionStatus
from src.schemas.subscription import CategoryTotal, SubscriptionStats


CENT = Decimal("0.01")

# Factors turning one charge of each cycle into a monthly figure.
MONTHLY_FACTORS = {
    BillingCycle.MONTHLY: Decimal("1"),
    BillingCycle.YEARLY: Decimal("1") / Decimal("12"),
    BillingCycle.WEEKLY: Decimal("4.33"),
}


def _as_decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _money(value: Decimal) -> float:
    return float(value.quantize(CENT, rounding=ROUND_HALF_UP))


def build_stats(subscriptions: Iterable) -> SubscriptionStats:
    """
    Reduce subscriptions to spending totals.

    Only ACTIVE subscriptions are counted. ``total_monthly``, ``total_yearly``
    and ``total_weekly`` are plain sums per billing cycle; the normalised
    figure is ``monthly_equivalent``. Categories keep first-seen order.
    Cancelled and paused counts are reported as zero.
    """
    totals: Dict[BillingCycle, Decimal] = {cycle: Decimal("0") for cycle in BillingCycle}
    monthly_equivalent = Decimal("0")
    by_category: Dict[str, Dict[str, object]] = {}
    active = 0

    for subscription in subscriptions:
        if subscription.status != SubscriptionStatus.ACTIVE:
            continue
        active += 1
        amount = _as_decimal(subscription.amount)
        cycle = BillingCycle(subscription.billing_cycle)

        totals[cycle] += amount
        monthly_equivalent += amount * MONTHLY_FACTORS[cycle]

        bucket = by_category.setdefault(
            subscription.category, {"total": Decimal("0"), "count": 0}
        )
        bucket["total"] += amount
        bucket["count"] += 1

    return SubscriptionStats(
        total_monthly=_money(totals[BillingCycle.MONTHLY]),
        total_yearly=_money(totals[BillingCycle.YEARLY]),
        total_weekly=_money(totals[BillingCycle.WEEKLY]),
        monthly_equivalent=_money(monthly_equivalent),
        by_category=[
            CategoryTotal(category=name, total=_money(data["total"]), count=data["count"])
            for name, data in by_category.items()
        ],
        active_subscriptions=active,
        cancelled_subscriptions=0,
        paused_subscriptions=0,
    )
