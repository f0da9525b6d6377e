"""
Riepilogo del cruscotto per il mese selezionato.

Mette insieme i KPI di `reports.accounting` come fa la pagina principale:
ricavi del mese e del mese precedente, variazione %, spese, utile,
occupazione, notti e prezzo medio per notte. Filtro opzionale su una
singola proprietà.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from core.dates import month_period, previous_month_period, to_day
from core.log import get_logger
from core.models import Booking, Expense, Money, Property
from reports.accounting import (
    average_nightly_rate,
    expense_ratio,
    net_profit,
    nights_booked,
    occupancy_rate,
    percentage_change,
    total_expenses,
    total_revenue,
)

log = get_logger("dashboard")


@dataclass
class MonthSummary:
    """KPI di un mese, importi come coppia major/minor non formattata."""
    month_start: date
    month_end: date
    revenue: Money
    previous_revenue: Money
    revenue_change: float       # % sul mese precedente (valuta principale)
    expenses: Money
    net_profit: Money
    expense_ratio: float
    occupancy_rate: float
    active_properties: int
    nights_booked: int
    average_nightly_rate: Money


def month_summary(
    bookings: Iterable[Booking],
    expenses: Iterable[Expense],
    properties: Iterable[Property],
    month: date,
    property_id: Optional[str] = None,
) -> MonthSummary:
    bookings = list(bookings)
    expenses = list(expenses)
    properties = list(properties)

    if property_id is not None:
        bookings = [b for b in bookings if b.property_id == property_id]
        expenses = [e for e in expenses if e.property_id == property_id]
        properties = [p for p in properties if p.id == property_id]
    active = [p for p in properties if p.is_active]

    current = month_period(to_day(month))
    previous = previous_month_period(current.start)

    revenue = total_revenue(bookings, current.start, current.end, logger=log)
    previous_revenue = total_revenue(bookings, previous.start, previous.end)
    month_expenses = total_expenses(expenses, current.start, current.end)

    summary = MonthSummary(
        month_start=current.start,
        month_end=current.end,
        revenue=revenue,
        previous_revenue=previous_revenue,
        revenue_change=percentage_change(revenue.major, previous_revenue.major),
        expenses=month_expenses,
        net_profit=net_profit(revenue, month_expenses),
        expense_ratio=expense_ratio(month_expenses.major, revenue.major),
        occupancy_rate=occupancy_rate(bookings, active, current.start, current.end, logger=log),
        active_properties=len(active),
        nights_booked=nights_booked(bookings, current.start, current.end),
        average_nightly_rate=average_nightly_rate(bookings, current.start, current.end),
    )
    log.debug("Riepilogo %s (proprietà: %s): ricavi %.2f, occupazione %.1f%%, %d notti",
              current.start.strftime("%Y-%m"), property_id or "tutte",
              revenue.major, summary.occupancy_rate, summary.nights_booked)
    return summary
