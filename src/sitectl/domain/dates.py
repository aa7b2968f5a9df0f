"""Moment-style date formatting for the ``{{date}}`` placeholder.

Supported tokens::

    YYYY YY            year
    MMMM MMM MM M      month name, abbreviation, padded, bare
    DD D               day of month
    dddd ddd           weekday name, abbreviation
    HH H hh h          24h / 12h hour
    mm m ss s          minute, second
    A a                AM/PM, am/pm

Text inside ``[...]`` is copied literally. Any other character passes
through unchanged.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import datetime

_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def _hour12(moment: datetime) -> int:
    return moment.hour % 12 or 12


_TOKENS: dict[str, Callable[[datetime], str]] = {
    "YYYY": lambda d: f"{d.year:04d}",
    "YY": lambda d: f"{d.year % 100:02d}",
    "MMMM": lambda d: _MONTHS[d.month - 1],
    "MMM": lambda d: _MONTHS[d.month - 1][:3],
    "MM": lambda d: f"{d.month:02d}",
    "M": lambda d: str(d.month),
    "DD": lambda d: f"{d.day:02d}",
    "D": lambda d: str(d.day),
    "dddd": lambda d: _WEEKDAYS[d.weekday()],
    "ddd": lambda d: _WEEKDAYS[d.weekday()][:3],
    "HH": lambda d: f"{d.hour:02d}",
    "H": lambda d: str(d.hour),
    "hh": lambda d: f"{_hour12(d):02d}",
    "h": lambda d: str(_hour12(d)),
    "mm": lambda d: f"{d.minute:02d}",
    "m": lambda d: str(d.minute),
    "ss": lambda d: f"{d.second:02d}",
    "s": lambda d: str(d.second),
    "A": lambda d: "AM" if d.hour < 12 else "PM",
    "a": lambda d: "am" if d.hour < 12 else "pm",
}

# Longest alternatives first so "YYYY" never tokenizes as "YY" + "YY".
_TOKEN_RE = re.compile(
    r"\[([^\]]*)\]|" + "|".join(sorted(_TOKENS, key=len, reverse=True))
)


def format_date(moment: datetime, fmt: str) -> str:
    """Render *moment* using a moment-style format string.

    Examples:
        >>> format_date(datetime(2024, 3, 5, 14, 7), "YYYY-MM-DD")
        '2024-03-05'
        >>> format_date(datetime(2024, 3, 5, 14, 7), "[on] ddd, MMM D h:mm A")
        'on Tue, Mar 5 2:07 PM'
    """

    def _replace(match: re.Match[str]) -> str:
        literal = match.group(1)
        if literal is not None:
            return literal
        return _TOKENS[match.group(0)](moment)

    return _TOKEN_RE.sub(_replace, fmt)
