from __future__ import annotations

import calendar
import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import Any, Optional

logger = logging.getLogger(__name__)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_month(value: str) -> tuple[int, int]:
    """Parse YYYY-MM string into (year, month)."""
    parsed = datetime.strptime(value, "%Y-%m")
    return parsed.year, parsed.month


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_dates(year: int, month: int) -> list[str]:
    """All dates of the month in YYYY-MM-DD form."""
    first = date(year, month, 1)
    return [(first + timedelta(days=i)).isoformat() for i in range(days_in_month(year, month))]


def parse_timestamp(value: Any, *, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Best-effort parse of a check-in/check-out value.

    Accepts datetime objects and ISO-8601 strings (a trailing ``Z`` is allowed).
    Aware values are converted to ``tz`` (the server's local zone when None), so
    timing tiers are judged on that zone's wall clock, not on the
    offset the value was written with: ``10:45+05:30`` read on a UTC host is
    05:15. Returns None for missing or unparsable input instead of raising.
    """

    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            logger.debug("Unparsable timestamp %r ignored", value)
            return None
    else:
        logger.debug("Unsupported timestamp type %r ignored", type(value))
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(tz)
    return parsed


def minute_of_day(value: datetime) -> int:
    return value.hour * 60 + value.minute


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_naive_local(value: datetime) -> datetime:
    """Drop tzinfo after converting to local time, so naive and aware values compare."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
