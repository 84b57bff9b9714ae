"""Parsing of user-supplied cutoff dates and season keys."""
from __future__ import annotations

import datetime as dt
import re

import pandas as pd

from epl_standings.errors import InvalidCutoffError, InvalidSeasonError

DATE_FORMAT = "%m/%d/%Y"

_SEASON_LONG = re.compile(r"^(\d{4})/(\d{2})$")
_SEASON_CODE = re.compile(r"^(\d{2})(\d{2})$")


def parse_cutoff_date(value) -> dt.date:
    """Return the cutoff as a calendar date.

    Accepts a ``mm/dd/yyyy`` string, a ``datetime.date``/``datetime.datetime``
    or a pandas Timestamp. Anything else raises InvalidCutoffError.
    """
    if value is pd.NaT:
        raise InvalidCutoffError("Cutoff date is missing (NaT).")
    if isinstance(value, dt.datetime):  # pandas Timestamps included
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str):
        raise InvalidCutoffError(f"Invalid date {value!r}. Please provide a date in 'mm/dd/yyyy' format.")
    try:
        return dt.datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError as e:
        raise InvalidCutoffError(
            f"Invalid date {value!r}. Please provide a valid date in 'mm/dd/yyyy' format."
        ) from e


def _check_consecutive(first: int, second: int, value: str) -> None:
    if (first + 1) % 100 != second:
        raise InvalidSeasonError(f"Invalid season {value!r}: the second year must follow the first.")


def parse_season(value) -> str:
    """Convert a season key into a Football-Data season code.

    ``"2021/22"`` becomes ``"2122"``; an already-coded ``"2122"`` is returned as is.
    """
    if not isinstance(value, str):
        raise InvalidSeasonError(f"Invalid season {value!r}. Please provide a season in 'yyyy/yy' format.")
    value = value.strip()

    m = _SEASON_LONG.match(value)
    if m:
        start, end = m.group(1), m.group(2)
        _check_consecutive(int(start) % 100, int(end), value)
        return start[2:] + end

    m = _SEASON_CODE.match(value)
    if m:
        _check_consecutive(int(m.group(1)), int(m.group(2)), value)
        return value

    raise InvalidSeasonError(f"Invalid season {value!r}. Please provide a valid season in 'yyyy/yy' format.")


def format_season(code: str) -> str:
    """Inverse of parse_season for display: "2122" -> "2021/22", "9900" -> "1999/00"."""
    century = "19" if int(code[:2]) >= 90 else "20"
    return f"{century}{code[:2]}/{code[2:]}"
