"""
Layout del calendario prenotazioni: barre orizzontali per settimana.

Per ogni settimana visibile:
  1. prende le prenotazioni che la toccano
  2. calcola posizione e larghezza della barra (7 colonne uguali)
  3. impila le prenotazioni sovrapposte su righe diverse (greedy:
     prima riga libera, in ordine di check-in)

Le date di partenza sono escluse: A(lun→mer) e D(mer→ven) stanno sulla
stessa riga.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, List, Optional

from config import DAYS_PER_WEEK
from core.dates import calendar_days, month_weeks, to_day
from core.models import BarGeometry, Booking, InvalidPeriodError, WeekWindow


def _check_week(week_start: date, week_end: date):
    if calendar_days(week_end, week_start) != DAYS_PER_WEEK - 1:
        raise InvalidPeriodError(
            f"Settimana non valida: {week_start} → {week_end} "
            f"(attesi {DAYS_PER_WEEK} giorni consecutivi)"
        )


def _stay(booking: Booking):
    """(check_in, check_out) normalizzati, None se mancano o il soggiorno non ha notti."""
    check_in, check_out = to_day(booking.check_in), to_day(booking.check_out)
    if check_in is None or check_out is None:
        return None
    if calendar_days(check_out, check_in) <= 0:
        return None
    return check_in, check_out


def bookings_overlapping_week(
    bookings: Iterable[Booking],
    week_start: date,
    week_end: date,
) -> List[Booking]:
    """
    Prenotazioni che toccano la settimana: check_in <= fine AND check_out > inizio.
    Chi parte proprio il primo giorno della settimana non c'è; chi arriva
    l'ultimo giorno sì.
    """
    week_start, week_end = to_day(week_start), to_day(week_end)
    _check_week(week_start, week_end)

    result = []
    for b in bookings:
        stay = _stay(b)
        if stay is None:
            continue
        check_in, check_out = stay
        if check_in <= week_end and check_out > week_start:
            result.append(b)
    return result


def bar_geometry(booking: Booking, week_start: date, week_end: date) -> BarGeometry:
    """
    Posizione (left/width in %) e bordi arrotondati della barra nella settimana.
    Prenotazione senza date o senza notti: barra vuota (larghezza 0).
    """
    week_start, week_end = to_day(week_start), to_day(week_end)
    stay = _stay(booking)
    if stay is None:
        return BarGeometry(0.0, 0.0, False, False)
    check_in, check_out = stay

    bar_start = max(check_in, week_start)
    bar_end = min(check_out, week_end + timedelta(days=1))

    start_col = calendar_days(bar_start, week_start)
    duration = calendar_days(bar_end, bar_start)

    return BarGeometry(
        left_percent=start_col / DAYS_PER_WEEK * 100,
        width_percent=duration / DAYS_PER_WEEK * 100,
        is_start=bar_start == check_in,
        is_end=bar_end == check_out or calendar_days(check_out, bar_end) <= 0,
    )


def pack_into_rows(week_bookings: Iterable[Booking]) -> List[List[Booking]]:
    """
    Assegna ogni prenotazione alla prima riga il cui ultimo occupante è
    già partito (check_out <= check_in); altrimenti apre una riga nuova.
    """
    dated = [b for b in week_bookings if _stay(b) is not None]
    ordered = sorted(dated, key=lambda b: to_day(b.check_in))  # sort stabile

    rows: List[List[Booking]] = []
    for booking in ordered:
        check_in = to_day(booking.check_in)
        for row in rows:
            if to_day(row[-1].check_out) <= check_in:
                row.append(booking)
                break
        else:
            rows.append([booking])
    return rows


# ── Composizione per la vista mese ───────────────────────────────────────────
@dataclass
class PlacedBar:
    booking: Booking
    geometry: BarGeometry


@dataclass
class WeekLayout:
    week: WeekWindow
    rows: List[List[PlacedBar]] = field(default_factory=list)


def layout_week(bookings: Iterable[Booking], week: WeekWindow) -> List[List[PlacedBar]]:
    """Righe della settimana con la geometria di ogni barra già calcolata."""
    overlapping = bookings_overlapping_week(bookings, week.start, week.end)
    return [
        [PlacedBar(b, bar_geometry(b, week.start, week.end)) for b in row]
        for row in pack_into_rows(overlapping)
    ]


def layout_month(
    bookings: Iterable[Booking],
    day: date,
    property_id: Optional[str] = None,
    include_cancelled: bool = True,
) -> List[WeekLayout]:
    """
    Layout di tutte le settimane visibili del mese che contiene `day`,
    opzionalmente filtrato su una proprietà.
    """
    selected = [
        b for b in bookings
        if (property_id is None or b.property_id == property_id)
        and (include_cancelled or not b.is_cancelled)
    ]
    return [WeekLayout(week, layout_week(selected, week)) for week in month_weeks(to_day(day))]
