# SPDX-License-Identifier: MIT

import re
from typing import Optional

import pendulum
import typer

from fourd.time import add_days, date_from_value, today


def parse_date(date_param: Optional[str]) -> Optional[pendulum.Date]:
    """
    Read a date given on the command line.

    Accepts YYYY-MM-DD, "today"/"t", or a signed day offset from today.
    """
    if date_param is None:
        return None

    value = date_param.strip()

    if re.match(r"^\d{4}-\d{2}-\d{2}$", value):
        try:
            return date_from_value(value)
        except ValueError as e:
            raise typer.BadParameter(f"Invalid date {value}: {e}")

    if re.match(r"^[+-]?\d+$", value):
        return add_days(today(), int(value))

    if value in ("today", "t"):
        return today()

    raise typer.BadParameter(
        f"Unable to parse date: {value}. Use YYYY-MM-DD, today, or a day offset"
    )
