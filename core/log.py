"""
Logging: logger con nome `affitti.<area>` e configurazione unica del handler.

Le funzioni di calcolo non scrivono log da sole: chi le chiama può passare
un logger (parametro `logger=`) per vedere i record scartati a livello DEBUG.
"""

import logging
from typing import Optional

from config import LOG_FORMAT, LOG_LEVEL, LOGGER_NAME


def get_logger(area: str) -> logging.Logger:
    return logging.getLogger(f"{LOGGER_NAME}.{area}")


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Installa un solo StreamHandler sul logger radice `affitti`.
    Chiamabile più volte: il handler non viene duplicato.
    """
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel((level or LOG_LEVEL).upper())

    if not any(h.get_name() == LOGGER_NAME for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.set_name(LOGGER_NAME)
        root.addHandler(handler)
    return root
