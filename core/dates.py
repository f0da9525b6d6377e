"""
Utility date: normalizzazione al giorno, differenza in giorni di calendario,
limiti del mese, preset del cruscotto e griglia settimanale del calendario.

Tutta l'aritmetica lavora su `date` (niente orari, niente fusi orari):
la differenza tra due giorni è la differenza dei numeri ordinali, quindi
non risente del cambio ora legale.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import List, Optional

import numpy as np
import pandas as pd

from config import DAYS_PER_WEEK, WEEK_START
from core.models import Period, WeekWindow


def to_day(val) -> Optional[date]:
    """
    Converte datetime / Timestamp pandas / numpy.datetime64 / date in `date`.
    None, NaT e stringhe vuote → None.
    """
    if val is None or val is pd.NaT:
        return None
    if isinstance(val, pd.Timestamp):
        return None if pd.isna(val) else val.date()
    if isinstance(val, np.datetime64):
        return None if np.isnat(val) else pd.Timestamp(val).date()
    if isinstance(val, datetime):
        return val.date()
    if isinstance(val, date):
        return val
    if isinstance(val, str):
        if val.strip() in ("", "None", "nan", "NaT"):
            return None
        try:
            return pd.to_datetime(val).date()
        except (ValueError, TypeError):
            return None
    try:
        if pd.isna(val):
            return None
    except (TypeError, ValueError):
        pass
    return None


def calendar_days(later: date, earlier: date) -> int:
    """Giorni di calendario tra due date: `later - earlier` (può essere negativo)."""
    return later.toordinal() - earlier.toordinal()


def nights(check_in: date, check_out: date) -> int:
    """Notti di un soggiorno, minimo 1 (come nel modulo prenotazioni)."""
    return max(1, calendar_days(check_out, check_in))


def month_period(day: date) -> Period:
    """Primo e ultimo giorno del mese che contiene `day`."""
    last = calendar.monthrange(day.year, day.month)[1]
    return Period(date(day.year, day.month, 1), date(day.year, day.month, last))


def shift_months(day: date, months: int) -> date:
    """Sposta di `months` mesi mantenendo il giorno (troncato a fine mese)."""
    idx = day.year * 12 + (day.month - 1) + months
    year, month = divmod(idx, 12)
    month += 1
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last))


def previous_month_period(day: date) -> Period:
    return month_period(shift_months(day, -1))


def year_period(year: int) -> Period:
    return Period(date(year, 1, 1), date(year, 12, 31))


def date_range_preset(preset: str, today: Optional[date] = None) -> Period:
    """
    Intervalli predefiniti del cruscotto (oggi, ultimi 7/30 giorni, mese, anno...).
    Preset sconosciuto → dall'inizio del mese a oggi.
    """
    if today is None:
        today = date.today()

    if preset == "today":
        return Period(today, today)
    if preset == "last7days":
        return Period(today - timedelta(days=6), today)
    if preset == "last30days":
        return Period(today - timedelta(days=29), today)
    if preset == "thisMonth":
        return month_period(today)
    if preset == "lastMonth":
        return previous_month_period(today)
    if preset == "thisYear":
        return year_period(today.year)
    if preset == "lastYear":
        return year_period(today.year - 1)

    # preset sconosciuto
    return Period(month_period(today).start, today)


def start_of_week(day: date) -> date:
    offset = (day.weekday() - WEEK_START) % DAYS_PER_WEEK
    return day - timedelta(days=offset)


def month_weeks(day: date) -> List[WeekWindow]:
    """
    Settimane (da lunedì) che coprono tutto il mese visibile:
    dalla settimana del primo giorno a quella dell'ultimo.
    """
    period = month_period(day)
    current = start_of_week(period.start)
    last = start_of_week(period.end)

    weeks = []
    while current <= last:
        weeks.append(WeekWindow(current))
        current += timedelta(days=DAYS_PER_WEEK)
    return weeks
