# SPDX-License-Identifier: MIT

import datetime
from typing import Any, Optional

import pendulum


def today() -> pendulum.Date:
    return pendulum.today("local").date()


def date_from_value(value: Any) -> Optional[pendulum.Date]:
    """
    Normalise a schedule date to a day-granular pendulum.Date.

    Accepts None, python/pendulum dates and datetimes (YAML produces these for
    unquoted ISO dates) and ISO 8601 strings. Raises ValueError for anything
    that cannot be read as a calendar date.
    """
    if value is None:
        return None
    if isinstance(value, datetime.date):
        return pendulum.date(value.year, value.month, value.day)
    if isinstance(value, str):
        if value.strip() == "":
            return None
        parsed = pendulum.parse(value.strip(), exact=True)
        if isinstance(parsed, datetime.date):
            return pendulum.date(parsed.year, parsed.month, parsed.day)
    raise ValueError(f"not a calendar date: {value!r}")


def date_from_value_lenient(value: Any) -> tuple[Optional[pendulum.Date], bool]:
    """
    Like date_from_value, but never raises.

    Returns:
        (date, ok) where ok is False when a value was present but malformed.
    """
    try:
        return date_from_value(value), True
    except (ValueError, TypeError):
        return None, False


def days_between(start: datetime.date, end: datetime.date) -> int:
    """Whole calendar days from start to end (negative when end precedes start)."""
    return end.toordinal() - start.toordinal()


def add_days(date: pendulum.Date, days: int) -> pendulum.Date:
    return date.add(days=days)


def date_to_display_str(date: pendulum.Date) -> str:
    return date.format("YYYY-MM-DD ddd")
