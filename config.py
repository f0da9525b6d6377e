"""
Configurazione centralizzata - modifica qui stati, arrotondamenti e logging.
"""

import os

# Stati prenotazione (come arrivano dal gestionale)
BOOKING_STATUSES = ("inquiry", "confirmed", "checked_in", "checked_out", "cancelled")
CANCELLED_STATUS = "cancelled"

# Stati proprietà: solo "active" conta nelle notti disponibili
PROPERTY_STATUSES = ("active", "inactive", "maintenance")
ACTIVE_STATUS = "active"

# Arrotondamento importi (una sola volta, sul totale del periodo)
MONEY_DECIMALS = 2

# Calendario: settimana che parte dal lunedì (0 = lunedì, come date.weekday())
WEEK_START = 0
DAYS_PER_WEEK = 7

# Preset intervalli date per il cruscotto
DATE_RANGE_PRESETS = (
    "today",
    "last7days",
    "last30days",
    "thisMonth",
    "lastMonth",
    "thisYear",
    "lastYear",
)
DEFAULT_DATE_RANGE = "thisMonth"

# Logging
LOGGER_NAME = "affitti"
LOG_LEVEL = os.environ.get("AFFITTI_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
