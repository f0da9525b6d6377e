import logging
from datetime import date

import pytest

from core.log import configure_logging, get_logger
from core.models import Money, Property
from reports.dashboard import month_summary


@pytest.fixture
def data(make_booking, make_expense):
    bookings = [
        make_booking(date(2024, 1, 29), date(2024, 2, 4), major=600.0, minor=0, property_id="p1"),
        make_booking(date(2024, 2, 10), date(2024, 2, 15), major=500.0, minor=0, property_id="p2"),
        make_booking(date(2024, 2, 20), date(2024, 2, 22), major=999.0, minor=0, property_id="p2",
                     status="cancelled"),
    ]
    expenses = [
        make_expense(date(2024, 2, 3), 80.0, minor=0, property_id="p1"),
        make_expense(date(2024, 2, 28), 120.0, minor=0, property_id="p2"),
        make_expense(date(2024, 1, 15), 50.0, minor=0, property_id="p1"),
    ]
    properties = [Property("p1"), Property("p2"), Property("p3", "maintenance")]
    return bookings, expenses, properties


def test_month_summary(data):
    summary = month_summary(*data, month=date(2024, 2, 14))

    assert summary.month_start == date(2024, 2, 1)
    assert summary.month_end == date(2024, 2, 29)
    assert summary.revenue == Money(800.0, 0.0)
    assert summary.previous_revenue == Money(300.0, 0.0)
    assert summary.revenue_change == pytest.approx(500 / 3)
    assert summary.expenses == Money(200.0, 0.0)
    assert summary.net_profit == Money(600.0, 0.0)
    assert summary.expense_ratio == pytest.approx(25.0)
    assert summary.active_properties == 2
    assert summary.nights_booked == 8
    assert summary.occupancy_rate == pytest.approx(100 * 8 / 58)
    assert summary.average_nightly_rate.major == pytest.approx(100.0)


def test_month_summary_property_filter(data):
    summary = month_summary(*data, month=date(2024, 2, 1), property_id="p1")

    assert summary.revenue.major == pytest.approx(300.0)
    assert summary.expenses.major == pytest.approx(80.0)
    assert summary.active_properties == 1
    assert summary.nights_booked == 3
    assert summary.occupancy_rate == pytest.approx(100 * 3 / 29)
    assert summary.revenue_change == pytest.approx(0.0)


def test_month_summary_empty_month(data):
    summary = month_summary(*data, month=date(2024, 6, 1))

    assert summary.revenue == Money.zero()
    assert summary.revenue_change == 0.0
    assert summary.expense_ratio == 0.0
    assert summary.occupancy_rate == 0.0
    assert summary.average_nightly_rate == Money.zero()


def test_month_summary_logs_at_debug(data, caplog):
    with caplog.at_level(logging.DEBUG, logger="affitti.dashboard"):
        month_summary(*data, month=date(2024, 2, 1))
    assert "Riepilogo 2024-02" in caplog.text


def test_configure_logging_is_idempotent():
    root = configure_logging("debug")
    handlers = len(root.handlers)
    configure_logging("info")

    assert len(root.handlers) == handlers
    assert [h.get_name() for h in root.handlers].count("affitti") == 1
    assert root.level == logging.INFO
    assert get_logger("dashboard").name == "affitti.dashboard"
