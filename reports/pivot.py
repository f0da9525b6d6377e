"""
Tabelle pandas per il cruscotto.

Due direzioni:
  - DataFrame già caricati dal gestionale → record (Booking, Expense, Property)
  - record → tabelle riepilogative (KPI per mese, pivot mese × proprietà,
    riepilogo spese per categoria)

Gli importi nelle tabelle sono nella valuta principale (major); la
formattazione resta a chi visualizza.
"""

import pandas as pd
from datetime import date
from typing import List

from core.dates import month_period, to_day
from core.models import Booking, Expense, Property
from reports.accounting import (
    average_nightly_rate,
    nights_booked,
    occupancy_rate,
    revenue_by_property,
    total_expenses,
    total_revenue,
)


def _require(df: pd.DataFrame, columns: List[str], what: str):
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"Colonne mancanti per {what}: {', '.join(missing)}")


def _text(val, default: str = "") -> str:
    if val is None or (not isinstance(val, str) and pd.isna(val)):
        return default
    s = str(val).strip()
    return default if s in ("", "None", "nan") else s


def _amounts(df: pd.DataFrame, col: str) -> pd.Series:
    if col not in df.columns:
        return pd.Series(0.0, index=df.index)
    return pd.to_numeric(df[col], errors="coerce").fillna(0)


# ── DataFrame → record ───────────────────────────────────────────────────────
def bookings_from_frame(df: pd.DataFrame) -> List[Booking]:
    """
    Converte le righe prenotazione in Booking.
    Date non leggibili diventano None (poi il motore scarta la riga).
    """
    if df.empty:
        return []
    _require(df, ["id", "property_id", "check_in", "check_out"], "prenotazioni")

    major = _amounts(df, "total_price_major")
    minor = _amounts(df, "total_price_minor")

    bookings = []
    for idx, row in df.iterrows():
        bookings.append(Booking(
            id=_text(row["id"]),
            property_id=_text(row["property_id"]),
            guest_name=_text(row.get("guest_name")),
            check_in=to_day(row["check_in"]),
            check_out=to_day(row["check_out"]),
            total_price_major=float(major[idx]),
            total_price_minor=float(minor[idx]),
            status=_text(row.get("status"), "confirmed").lower(),
            created_at=to_day(row.get("created_at")),
        ))
    return bookings


def expenses_from_frame(df: pd.DataFrame) -> List[Expense]:
    if df.empty:
        return []
    _require(df, ["id", "date"], "spese")

    major = _amounts(df, "amount_major")
    minor = _amounts(df, "amount_minor")

    expenses = []
    for idx, row in df.iterrows():
        property_id = _text(row.get("property_id"))
        expenses.append(Expense(
            id=_text(row["id"]),
            date=to_day(row["date"]),
            amount_major=float(major[idx]),
            amount_minor=float(minor[idx]),
            category=_text(row.get("category")),
            property_id=property_id or None,
        ))
    return expenses


def properties_from_frame(df: pd.DataFrame) -> List[Property]:
    if df.empty:
        return []
    _require(df, ["id"], "proprietà")
    return [
        Property(
            id=_text(row["id"]),
            status=_text(row.get("status"), "active").lower(),
            name=_text(row.get("name")),
        )
        for _, row in df.iterrows()
    ]


# ── Record → tabelle ─────────────────────────────────────────────────────────
def monthly_kpi_table(
    bookings: List[Booking],
    expenses: List[Expense],
    properties: List[Property],
    year: int,
) -> pd.DataFrame:
    """Una riga per mese: ricavi ripartiti, spese, utile, notti, occupazione, prezzo medio."""
    rows = []
    for m in range(1, 13):
        p = month_period(date(year, m, 1))
        revenue = total_revenue(bookings, p.start, p.end)
        spent = total_expenses(expenses, p.start, p.end)
        rows.append({
            "anno_mese": p.start.strftime("%Y-%m"),
            "ricavi": revenue.major,
            "spese": spent.major,
            "utile": round(revenue.major - spent.major, 2),
            "notti": nights_booked(bookings, p.start, p.end),
            "occupazione": round(occupancy_rate(bookings, properties, p.start, p.end), 2),
            "prezzo_medio": average_nightly_rate(bookings, p.start, p.end).major,
        })
    return pd.DataFrame(rows).set_index("anno_mese")


def pivot_revenue_by_month_property(
    bookings: List[Booking],
    properties: List[Property],
    year: int,
) -> pd.DataFrame:
    """Pivot: mese × proprietà, ricavi ripartiti per notti, con totali."""
    if not properties:
        return pd.DataFrame()

    labels = {p.id: p.name or p.id for p in properties}
    records = []
    for m in range(1, 13):
        p = month_period(date(year, m, 1))
        for property_id, money in revenue_by_property(bookings, properties, p.start, p.end).items():
            records.append({
                "anno_mese": p.start.strftime("%Y-%m"),
                "proprieta": labels.get(property_id, property_id or "N/D"),
                "ricavi": money.major,
            })

    df = pd.DataFrame(records)
    pivot = df.pivot_table(
        values="ricavi",
        index="anno_mese",
        columns="proprieta",
        aggfunc="sum",
        fill_value=0,
        margins=True,
        margins_name="TOTALE",
    )
    return pivot.round(2)


def expenses_summary(expenses: List[Expense]) -> pd.DataFrame:
    """Riepilogo spese per categoria."""
    if not expenses:
        return pd.DataFrame()

    df = pd.DataFrame([
        {"categoria": e.category or "altro", "importo": e.amount_major}
        for e in expenses
    ])
    summary = df.groupby("categoria").agg(
        totale=("importo", "sum"),
        occorrenze=("importo", "count"),
    ).reset_index()
    summary["totale"] = summary["totale"].round(2)
    return summary


def bookings_list(bookings: List[Booking]) -> pd.DataFrame:
    """Lista prenotazioni per visualizzazione tabellare, più recenti prima."""
    if not bookings:
        return pd.DataFrame()

    df = pd.DataFrame([
        {
            "proprieta": b.property_id,
            "ospite": b.guest_name,
            "check_in": b.check_in,
            "check_out": b.check_out,
            "notti": (b.check_out - b.check_in).days if b.check_in and b.check_out else 0,
            "totale": b.total_price_major,
            "stato": b.status,
        }
        for b in bookings
    ])
    return df.sort_values("check_in", ascending=False, na_position="last")
