from datetime import date

import pytest

from core.models import Booking, Expense, Property

EXCHANGE_RATE = 655.957


@pytest.fixture
def make_booking():
    counter = {"n": 0}

    def _make(check_in, check_out, major=100.0, minor=None, status="confirmed",
              property_id="p1", guest_name=None, created_at=None):
        counter["n"] += 1
        return Booking(
            id=f"b{counter['n']}",
            property_id=property_id,
            guest_name=guest_name or f"Ospite {counter['n']}",
            check_in=check_in,
            check_out=check_out,
            total_price_major=major,
            total_price_minor=major * EXCHANGE_RATE if minor is None else minor,
            status=status,
            created_at=created_at,
        )

    return _make


@pytest.fixture
def make_expense():
    counter = {"n": 0}

    def _make(day, major, minor=None, category="pulizie", property_id="p1"):
        counter["n"] += 1
        return Expense(
            id=f"e{counter['n']}",
            date=day,
            amount_major=major,
            amount_minor=major * EXCHANGE_RATE if minor is None else minor,
            category=category,
            property_id=property_id,
        )

    return _make


@pytest.fixture
def one_property():
    return [Property("p1", "active", "Caldiero 5")]


@pytest.fixture
def january():
    return date(2024, 1, 1), date(2024, 1, 31)


@pytest.fixture
def february():
    return date(2024, 2, 1), date(2024, 2, 29)
