from __future__ import annotations

import datetime as _dt
import re
from typing import Dict, NamedTuple, Tuple, Union

from .types import DateLayout


class Outcome(NamedTuple):
    ok: bool
    message: str = ""


PASS = Outcome(True)

# layout -> (shape, format message, field order as (year, month, day) slots)
_LAYOUTS: Dict[DateLayout, Tuple[re.Pattern, str, Tuple[int, int, int]]] = {
    DateLayout.ISO: (
        re.compile(r"^([0-9]{4})-([0-9]{2})-([0-9]{2})$"),
        "Expected YYYY-MM-DD.",
        (0, 1, 2),
    ),
    DateLayout.MDY: (
        re.compile(r"^([0-9]{2})/([0-9]{2})/([0-9]{4})$"),
        "Expected MM/DD/YYYY.",
        (2, 0, 1),
    ),
    DateLayout.DMY: (
        re.compile(r"^([0-9]{2})/([0-9]{2})/([0-9]{4})$"),
        "Expected DD/MM/YYYY.",
        (2, 1, 0),
    ),
}


def is_real_date(year: int, month: int, day: int) -> bool:
    """True when (year, month, day) names an existing proleptic Gregorian day."""
    if not 1 <= month <= 12:
        return False
    if not 1 <= day <= 31:
        return False
    try:
        d = _dt.date(year, month, day)
    except ValueError:
        return False
    return (d.year, d.month, d.day) == (year, month, day)


def validate_date(value: str, layout: Union[str, DateLayout] = DateLayout.ISO) -> Outcome:
    try:
        layout = DateLayout(layout)
    except ValueError:
        return Outcome(False, "Unknown date format.")

    shape, format_msg, (y_at, m_at, d_at) = _LAYOUTS[layout]
    m = shape.fullmatch(value)
    if m is None:
        return Outcome(False, format_msg)

    parts = [int(g) for g in m.groups()]
    if not is_real_date(parts[y_at], parts[m_at], parts[d_at]):
        return Outcome(False, "Invalid date.")
    return PASS
