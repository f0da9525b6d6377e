"""
Calcolo KPI di periodo: ricavi, notti, prezzo medio, occupazione, spese.

Le prenotazioni a cavallo di due periodi (es. 29 gen → 4 feb) vengono
ripartite per notti: ogni periodo riceve solo la sua quota del totale.

  notti_nel_periodo = giorni(min(check_out, fine+1), max(check_in, inizio))
  ricavo            = totale × notti_nel_periodo / notti_totali

Funzioni pure: nessun I/O, gli input non vengono mai modificati.
Record malformati (date mancanti, soggiorni di 0 o meno notti) vengono
scartati in silenzio; chi vuole vederli passa un logger (`logger=`).
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from core.dates import calendar_days, month_period, to_day
from core.models import Booking, Expense, InvalidPeriodError, Money, Period, Property


# ── Helpers ──────────────────────────────────────────────────────────────────
def _period(start, end) -> Period:
    """Normalizza gli estremi al giorno e valida il periodo."""
    start_day, end_day = to_day(start), to_day(end)
    if start_day is None or end_day is None:
        raise InvalidPeriodError(f"Periodo non valido: {start!r} → {end!r}")
    return Period(start_day, end_day)


def _skip(logger: Optional[logging.Logger], booking: Booking, reason: str):
    if logger is not None:
        logger.debug("Prenotazione %s (%s) scartata: %s",
                     booking.id, booking.guest_name, reason)


def _valid(bookings: Iterable[Booking]) -> List[Booking]:
    return [b for b in bookings if not b.is_cancelled]


def _stay(booking: Booking, logger=None) -> Optional[Tuple[date, date]]:
    """(check_in, check_out) normalizzati, oppure None se il soggiorno non è valido."""
    check_in, check_out = to_day(booking.check_in), to_day(booking.check_out)
    if check_in is None or check_out is None:
        _skip(logger, booking, "date mancanti")
        return None
    if calendar_days(check_out, check_in) <= 0:
        _skip(logger, booking, f"soggiorno di {calendar_days(check_out, check_in)} notti")
        return None
    return check_in, check_out


def _nights_in_period(booking: Booking, period: Period, logger=None) -> Tuple[int, int]:
    """
    Restituisce (notti_nel_periodo, notti_totali) per una prenotazione.
    (0, 0) se la prenotazione non è valida o non tocca il periodo.
    """
    stay = _stay(booking, logger)
    if stay is None:
        return 0, 0
    check_in, check_out = stay

    # Nessuna sovrapposizione: partenza entro l'inizio o arrivo dopo la fine
    if check_out <= period.start or check_in > period.end:
        return 0, 0

    overlap_start = max(check_in, period.start)
    overlap_end = min(check_out, period.end_exclusive)
    in_period = calendar_days(overlap_end, overlap_start)
    if in_period <= 0:
        return 0, 0
    return in_period, calendar_days(check_out, check_in)


def _revenue_raw(bookings: Iterable[Booking], period: Optional[Period], logger=None) -> Money:
    """Somma non arrotondata; senza periodo = totali pieni di tutto lo storico."""
    total = Money.zero()
    for b in _valid(bookings):
        if period is None:
            total = total + b.total
            continue
        in_period, stay_nights = _nights_in_period(b, period, logger)
        if in_period <= 0:
            continue
        total = total + b.total.scale(in_period / stay_nights)
    return total


def _stay_nights(bookings: Iterable[Booking]) -> List[int]:
    """Notti per prenotazione (minimo 1), solo prenotazioni non cancellate con date."""
    result = []
    for b in _valid(bookings):
        check_in, check_out = to_day(b.check_in), to_day(b.check_out)
        if check_in is None or check_out is None:
            continue
        result.append(max(1, calendar_days(check_out, check_in)))
    return result


# ── Ricavi e notti ───────────────────────────────────────────────────────────
def total_revenue(
    bookings: Iterable[Booking],
    start: Optional[date] = None,
    end: Optional[date] = None,
    *,
    logger: Optional[logging.Logger] = None,
) -> Money:
    """
    Ricavo del periodo [start, end] (estremi inclusi), ripartito per notti.
    Senza periodo: somma piena di tutte le prenotazioni non cancellate.

    L'arrotondamento a 2 decimali avviene una sola volta, sul totale.
    """
    period = _period(start, end) if start is not None and end is not None else None
    return _revenue_raw(bookings, period, logger).rounded()


def nights_booked(
    bookings: Iterable[Booking],
    start: date,
    end: date,
    *,
    logger: Optional[logging.Logger] = None,
) -> int:
    """Notti prenotate che cadono dentro il periodo (cancellate escluse)."""
    period = _period(start, end)
    return sum(_nights_in_period(b, period, logger)[0] for b in _valid(bookings))


def average_nightly_rate(bookings: Iterable[Booking], start: date, end: date) -> Money:
    """Ricavo del periodo / notti del periodo; {0, 0} se non ci sono notti."""
    bookings = list(bookings)
    booked = nights_booked(bookings, start, end)
    if booked == 0:
        return Money.zero()
    revenue = total_revenue(bookings, start, end)
    return Money(revenue.major / booked, revenue.minor / booked).rounded()


def occupancy_rate(
    bookings: Iterable[Booking],
    properties: Iterable[Property],
    start: date,
    end: date,
    *,
    logger: Optional[logging.Logger] = None,
) -> float:
    """
    Occupazione % = notti prenotate / (giorni del periodo × proprietà attive).

    Il numero di proprietà vale almeno 1 e il risultato non supera mai 100,
    anche con prenotazioni sovrapposte sullo stesso alloggio.
    """
    period = _period(start, end)
    active = sum(1 for p in properties if p.is_active)
    available = period.days * max(1, active)

    booked = nights_booked(bookings, period.start, period.end, logger=logger)
    if logger is not None:
        logger.debug("Occupazione %s → %s: %d notti su %d disponibili (%d giorni × %d proprietà)",
                     period.start, period.end, booked, available, period.days, active)
    return min(100.0, booked / available * 100)


# ── Spese ────────────────────────────────────────────────────────────────────
def _filter_expenses(expenses: Iterable[Expense], start=None, end=None) -> List[Expense]:
    start_day = to_day(start) if start is not None else None
    end_day = to_day(end) if end is not None else None
    if start_day is not None and end_day is not None:
        _period(start_day, end_day)

    selected = []
    for e in expenses:
        if start_day is None and end_day is None:
            selected.append(e)
            continue
        day = to_day(e.date)
        if day is None:
            continue
        if start_day is not None and day < start_day:
            continue
        if end_day is not None and day > end_day:
            continue
        selected.append(e)
    return selected


def total_expenses(
    expenses: Iterable[Expense],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> Money:
    """Somma delle spese con data in [start, end]; le spese non si ripartiscono."""
    total = Money.zero()
    for e in _filter_expenses(expenses, start, end):
        total = total + e.amount
    return total.rounded()


def expenses_by_category(
    expenses: Iterable[Expense],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> Dict[str, Money]:
    by_category = defaultdict(Money.zero)
    for e in _filter_expenses(expenses, start, end):
        by_category[e.category] = by_category[e.category] + e.amount
    return {cat: m.rounded() for cat, m in by_category.items()}


# ── Indicatori derivati ──────────────────────────────────────────────────────
def percentage_change(current: float, previous: float) -> float:
    """Variazione % rispetto al periodo precedente (negativa = calo)."""
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / previous * 100


def net_profit(revenue, expenses):
    return revenue - expenses


def expense_ratio(expenses: float, revenue: float) -> float:
    """Spese / ricavi × 100; 0 se non ci sono ricavi."""
    if revenue == 0:
        return 0.0
    return expenses / revenue * 100


def adr(bookings: Iterable[Booking]) -> Money:
    """Average Daily Rate su tutto lo storico: ricavi / notti."""
    valid = [b for b in _valid(bookings)
             if to_day(b.check_in) is not None and to_day(b.check_out) is not None]
    nights = sum(_stay_nights(valid))
    if nights == 0:
        return Money.zero()
    return _revenue_raw(valid, None).scale(1 / nights)


def revpar(
    bookings: Iterable[Booking],
    properties: Iterable[Property],
    start: date,
    end: date,
) -> Money:
    """Revenue per available night: ricavi / (giorni del periodo × proprietà attive)."""
    period = _period(start, end)
    active = sum(1 for p in properties if p.is_active)
    if active == 0:
        return Money.zero()
    return _revenue_raw(bookings, None).scale(1 / (period.days * active))


def avg_stay_length(bookings: Iterable[Booking]) -> float:
    stays = _stay_nights(bookings)
    if not stays:
        return 0.0
    return sum(stays) / len(stays)


def cancellation_rate(bookings: Iterable[Booking]) -> float:
    bookings = list(bookings)
    if not bookings:
        return 0.0
    cancelled = sum(1 for b in bookings if b.is_cancelled)
    return cancelled / len(bookings) * 100


def booking_lead_time(bookings: Iterable[Booking]) -> float:
    """Anticipo medio di prenotazione (giorni tra creazione e arrivo)."""
    leads = []
    for b in _valid(bookings):
        created, check_in = to_day(b.created_at), to_day(b.check_in)
        if created is None or check_in is None:
            continue
        leads.append(max(0, calendar_days(check_in, created)))
    if not leads:
        return 0.0
    return sum(leads) / len(leads)


# ── Ripartizioni ─────────────────────────────────────────────────────────────
def revenue_by_property(
    bookings: Iterable[Booking],
    properties: Iterable[Property],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> Dict[str, Money]:
    """Ricavo per proprietà; tutte le proprietà partono da zero."""
    period = _period(start, end) if start is not None and end is not None else None

    grouped = defaultdict(list)
    for b in bookings:
        grouped[b.property_id].append(b)

    result = {p.id: Money.zero() for p in properties}
    for property_id, group in grouped.items():
        result[property_id] = _revenue_raw(group, period).rounded()
    return result


def monthly_revenue(bookings: Iterable[Booking], year: int) -> List[Money]:
    """Ricavo ripartito per ciascun mese dell'anno (12 valori)."""
    bookings = list(bookings)
    months = [month_period(date(year, m, 1)) for m in range(1, 13)]
    return [total_revenue(bookings, p.start, p.end) for p in months]


def monthly_expenses(expenses: Iterable[Expense], year: int) -> List[Money]:
    expenses = list(expenses)
    months = [month_period(date(year, m, 1)) for m in range(1, 13)]
    return [total_expenses(expenses, p.start, p.end) for p in months]


@dataclass
class DayOccupancy:
    """Alloggi occupati in un giorno preciso."""
    occupied: int
    total: int
    rate: float
    occupied_properties: List[str] = field(default_factory=list)


def occupancy_on(
    bookings: Iterable[Booking],
    properties: Iterable[Property],
    day: Optional[date] = None,
) -> DayOccupancy:
    """Occupazione di un giorno (default: oggi): check_in <= giorno < check_out."""
    day = to_day(day) if day is not None else date.today()
    active = [p for p in properties if p.is_active]

    occupied = []
    for b in _valid(bookings):
        check_in, check_out = to_day(b.check_in), to_day(b.check_out)
        if check_in is None or check_out is None:
            continue
        if check_in <= day < check_out and b.property_id not in occupied:
            occupied.append(b.property_id)

    rate = min(100.0, len(occupied) / len(active) * 100) if active else 0.0
    return DayOccupancy(
        occupied=len(occupied),
        total=len(active),
        rate=rate,
        occupied_properties=occupied,
    )
