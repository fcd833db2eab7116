"""
Logging setup for the Resuelve API.

Every module does:
    from resuelve.logging import get_logger
    logger = get_logger(__name__)

Buyer-entered values (names, phones, e-mails) and ids go through the
sanitize helpers before they reach a log line.
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
# Vercel prefixes its own timestamp
LOG_FORMAT_HOSTED = "%(levelname)s [%(name)s] %(message)s"

# Client libraries that log every request at INFO
NOISY_LOGGERS = (
    "httpx",  # supabase, postgrest, exchange rate fetch
    "httpcore",
    "hpack",
    "urllib3",  # pywebpush goes through requests
)

ID_LOG_LENGTH = 8
TEXT_LOG_LENGTH = 50


def _level_from_env() -> int:
    name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def configure_logging() -> None:
    """Attach one stdout handler to the root logger. Idempotent."""
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root = logging.getLogger()
    if root.handlers:
        return

    hosted = os.environ.get("VERCEL") == "1"
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT_HOSTED if hosted else LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(_level_from_env())


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _single_line(value: str) -> str:
    # A raw newline in user input would forge a second log record
    return value.replace("\r", "\\r").replace("\n", "\\n").replace("\t", "\\t").replace("\x00", "")


def sanitize_id_for_logging(id_value: str | None) -> str:
    """Short prefix of an id (order, store, cart owner); "N/A" when empty."""
    if not id_value:
        return "N/A"
    return _single_line(str(id_value))[:ID_LOG_LENGTH]


def sanitize_string_for_logging(value: str | None, max_length: int = TEXT_LOG_LENGTH) -> str:
    """Single-line, truncated copy of free text such as an e-mail or address."""
    if not value:
        return "N/A"
    clean = _single_line(str(value))
    return clean if len(clean) <= max_length else clean[:max_length] + "..."


__all__ = [
    "configure_logging",
    "get_logger",
    "sanitize_id_for_logging",
    "sanitize_string_for_logging",
]
