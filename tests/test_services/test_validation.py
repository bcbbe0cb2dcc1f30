import datetime as dt
from decimal import Decimal

import pytest

from src.core.config import settings
from src.core.exceptions import ValidationError
from src.db.models.enums import BillingCycle, SubscriptionStatus
from src.schemas.subscription import SubscriptionCreate, SubscriptionUpdate
from src.services import validation


def _create(**overrides) -> SubscriptionCreate:
    values = {
        "name": "Netflix",
        "category": "Streaming",
        "amount": "15.99",
        "billing_cycle": "MONTHLY",
        "next_billing_date": dt.date(2030, 1, 1),
    }
    values.update(overrides)
    return SubscriptionCreate(**values)


@pytest.mark.parametrize("user_id", [None, "", "   "])
def test_require_user_id_rejects_missing(user_id):
    with pytest.raises(ValidationError, match="User id is required"):
        validation.require_user_id(user_id)


def test_list_query_defaults():
    query = validation.parse_list_query({})

    assert query.page == 1
    assert query.limit == 10
    assert query.sort_by == "nextBillingDate"
    assert query.sort_order == "asc"
    assert query.search is None
    assert query.status is None
    assert query.billing_cycle is None


@pytest.mark.parametrize("raw", ["0", "-3", "abc", "nan", "inf", None, ""])
def test_bad_page_and_limit_fall_back(raw):
    query = validation.parse_list_query({"page": raw, "limit": raw})

    assert query.page == 1
    assert query.limit == 10


def test_page_and_limit_are_coerced_from_strings():
    query = validation.parse_list_query({"page": "3", "limit": "25"})

    assert (query.page, query.limit) == (3, 25)
    assert query.offset == 50


def test_limit_is_capped(monkeypatch):
    monkeypatch.setattr(settings.limits, "max_page_size", 50)

    query = validation.parse_list_query({"limit": "10000"})

    assert query.limit == 50


def test_unknown_sort_field_behaves_like_omitted():
    assert validation.parse_list_query({"sortBy": "bogus"}) == validation.parse_list_query({})


@pytest.mark.parametrize("order,expected", [("desc", "desc"), ("DESC", "asc"), ("up", "asc")])
def test_sort_order_only_desc_literal_is_descending(order, expected):
    assert validation.parse_list_query({"sortOrder": order}).sort_order == expected


def test_enum_filters_are_parsed():
    query = validation.parse_list_query({"status": "PAUSED", "billingCycle": "YEARLY"})

    assert query.status is SubscriptionStatus.PAUSED
    assert query.billing_cycle is BillingCycle.YEARLY


def test_invalid_status_filter_raises():
    with pytest.raises(ValidationError, match="Invalid subscription status"):
        validation.parse_list_query({"status": "EXPIRED"})


def test_invalid_billing_cycle_filter_raises():
    with pytest.raises(ValidationError, match="Invalid billing cycle"):
        validation.parse_list_query({"billingCycle": "DAILY"})


def test_blank_search_is_ignored():
    assert validation.parse_list_query({"search": "   "}).search is None
    assert validation.parse_list_query({"search": " flix "}).search == "flix"


@pytest.mark.parametrize("raw,expected", [(None, 30), ("0", 30), ("-1", 30), ("x", 30), ("7", 7)])
def test_parse_days(raw, expected):
    assert validation.parse_days(raw) == expected


def test_validate_create_applies_defaults():
    values = validation.validate_create(_create(name="  Netflix ", category=" Streaming"))

    assert values["name"] == "Netflix"
    assert values["category"] == "Streaming"
    assert values["amount"] == Decimal("15.99")
    assert values["currency"] == "USD"
    assert values["is_trial"] is False
    assert values["status"] is SubscriptionStatus.ACTIVE
    assert values["billing_cycle"] is BillingCycle.MONTHLY
    assert values["description"] is None
    assert values["trial_end_date"] is None


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"name": "   "}, "Name is required"),
        ({"category": None}, "Category is required"),
        ({"amount": 0}, "Amount must be a positive number"),
        ({"amount": "-5"}, "Amount must be a positive number"),
        ({"amount": None}, "Amount must be a positive number"),
        ({"billing_cycle": "monthly"}, "Invalid billing cycle"),
        ({"billing_cycle": None}, "Invalid billing cycle"),
        ({"next_billing_date": None}, "Next billing date is required"),
        ({"status": "GONE"}, "Invalid subscription status"),
        ({"currency": "EURO"}, "Currency must be a 3-letter code"),
    ],
)
def test_validate_create_rejects(overrides, message):
    with pytest.raises(ValidationError, match=message):
        validation.validate_create(_create(**overrides))


def test_smallest_positive_amount_is_accepted():
    assert validation.validate_create(_create(amount="0.01"))["amount"] == Decimal("0.01")


def test_validate_update_only_returns_supplied_fields():
    changes = validation.validate_update(SubscriptionUpdate(name=" Hulu ", amount=7))

    assert changes == {"name": "Hulu", "amount": Decimal("7")}


def test_validate_update_distinguishes_null_from_missing():
    changes = validation.validate_update(
        SubscriptionUpdate.model_validate({"trialEndDate": None, "notes": None})
    )

    assert changes == {"trial_end_date": None, "notes": None}


@pytest.mark.parametrize(
    "payload,message",
    [
        ({"amount": 0}, "Amount must be a positive number"),
        ({"amount": None}, "Amount must be a positive number"),
        ({"status": "DONE"}, "Invalid subscription status"),
        ({"billingCycle": "DAILY"}, "Invalid billing cycle"),
        ({"name": None}, "name cannot be null"),
        ({"category": "  "}, "Category is required"),
    ],
)
def test_validate_update_rejects(payload, message):
    with pytest.raises(ValidationError, match=message):
        validation.validate_update(SubscriptionUpdate.model_validate(payload))


def test_huge_page_keeps_offset_in_range():
    query = validation.parse_list_query({"page": "1e19", "limit": "10"})

    assert query.offset <= validation.MAX_OFFSET
    assert query.page == validation.MAX_OFFSET // 10 + 1
