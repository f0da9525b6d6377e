"""
Modelli dati: Booking (prenotazione), Property (alloggio), Expense (spesa)
e i tipi di supporto del motore KPI (Money, Period, WeekWindow).

Sono tutti snapshot in sola lettura: il motore non li modifica mai.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from config import ACTIVE_STATUS, CANCELLED_STATUS, DAYS_PER_WEEK, MONEY_DECIMALS


class InvalidPeriodError(ValueError):
    """Periodo o settimana strutturalmente non validi (fine prima dell'inizio, ecc.)."""


@dataclass(frozen=True)
class Money:
    """Coppia di importi: valuta principale (major) e secondaria (minor)."""
    major: float = 0.0
    minor: float = 0.0

    @classmethod
    def zero(cls) -> "Money":
        return cls(0.0, 0.0)

    def __add__(self, other: "Money") -> "Money":
        return Money(self.major + other.major, self.minor + other.minor)

    def __sub__(self, other: "Money") -> "Money":
        return Money(self.major - other.major, self.minor - other.minor)

    def scale(self, factor: float) -> "Money":
        return Money(self.major * factor, self.minor * factor)

    def rounded(self, decimals: int = MONEY_DECIMALS) -> "Money":
        return Money(_round_half_up(self.major, decimals), _round_half_up(self.minor, decimals))


def _round_half_up(value: float, decimals: int) -> float:
    # arrotondamento commerciale sul valore decimale mostrato (2.675 -> 2.68)
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


@dataclass
class Booking:
    """Una prenotazione, già caricata e con date già convertite."""
    id: str
    property_id: str
    guest_name: str
    check_in: Optional[date]
    check_out: Optional[date]        # giorno di partenza (notte esclusa)
    total_price_major: float
    total_price_minor: float
    status: str = "confirmed"         # inquiry | confirmed | checked_in | checked_out | cancelled
    created_at: Optional[date] = None    # data creazione (anche datetime)

    @property
    def total(self) -> Money:
        return Money(self.total_price_major or 0.0, self.total_price_minor or 0.0)

    @property
    def is_cancelled(self) -> bool:
        return self.status == CANCELLED_STATUS


@dataclass
class Property:
    """Un alloggio. Conta nelle notti disponibili solo se attivo."""
    id: str
    status: str = ACTIVE_STATUS       # active | inactive | maintenance
    name: str = ""

    @property
    def is_active(self) -> bool:
        return self.status == ACTIVE_STATUS


@dataclass
class Expense:
    """Una spesa puntuale (bolletta, pulizie, manutenzione, ...)."""
    id: str
    date: Optional[date]
    amount_major: float
    amount_minor: float
    category: str = ""
    property_id: Optional[str] = None

    @property
    def amount(self) -> Money:
        return Money(self.amount_major or 0.0, self.amount_minor or 0.0)


@dataclass(frozen=True)
class Period:
    """Periodo di report, estremi inclusi (es. primo e ultimo giorno del mese)."""
    start: date
    end: date

    def __post_init__(self):
        if self.end < self.start:
            raise InvalidPeriodError(
                f"Periodo non valido: fine {self.end} precedente all'inizio {self.start}"
            )

    @property
    def end_exclusive(self) -> date:
        return self.end + timedelta(days=1)

    @property
    def days(self) -> int:
        return max(1, (self.end_exclusive - self.start).days)


@dataclass(frozen=True)
class WeekWindow:
    """Sette giorni consecutivi del calendario, dal primo giorno della settimana."""
    start: date

    @property
    def end(self) -> date:
        return self.start + timedelta(days=DAYS_PER_WEEK - 1)

    @property
    def end_exclusive(self) -> date:
        return self.start + timedelta(days=DAYS_PER_WEEK)

    def days(self) -> list:
        return [self.start + timedelta(days=i) for i in range(DAYS_PER_WEEK)]


@dataclass(frozen=True)
class BarGeometry:
    """Posizione della barra prenotazione dentro una settimana (percentuali)."""
    left_percent: float
    width_percent: float
    is_start: bool      # l'arrivo cade in questa settimana
    is_end: bool        # la partenza cade entro la fine di questa settimana
