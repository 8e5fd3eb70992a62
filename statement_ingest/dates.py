"""Date normalization to ISO ``YYYY-MM-DD``.

Accepted inputs (day before month in every numeric form):

- ``DD/MM/YY``, ``DD-MM-YY`` (two-digit years are read as ``20YY``)
- ``DD/MM/YYYY``, ``DD-MM-YYYY``
- ``DD Mon, YYYY`` and ``DD Mon YYYY`` (``Mon`` may be spelled out)
- ``Mon DD, YYYY`` (wallet statements)
- ``YYYY-MM-DD`` (already normalized; returned unchanged)

Values that do not parse, or that name an impossible calendar day, are
returned unchanged so the caller can surface a visibly invalid date instead of
losing the row.
"""

from __future__ import annotations

import re
from datetime import date

_MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

_ISO_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})")
_NUMERIC_RE = re.compile(r"(\d{1,2})[/-](\d{1,2})[/-](\d{4}|\d{2})")
_DAY_FIRST_RE = re.compile(r"(\d{1,2})\s+([A-Za-z]{3,9})\.?,?\s+(\d{4})")
_MONTH_FIRST_RE = re.compile(r"([A-Za-z]{3,9})\.?\s+(\d{1,2}),?\s+(\d{4})")


def _month_number(name: str) -> int | None:
    return _MONTHS.get(name[:3].lower())


def _expand_year(year: str) -> int:
    # Only a two-digit year gets the century prefix; four digits pass through.
    return int("20" + year) if len(year) == 2 else int(year)


def _iso(year: int, month: int | None, day: int) -> str | None:
    if month is None:
        return None
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def normalize_date(raw: str) -> str:
    """Normalize ``raw`` to ``YYYY-MM-DD``; return it unchanged when unparseable.

    Idempotent: ``normalize_date(normalize_date(x)) == normalize_date(x)``.
    """

    s = " ".join(raw.split())
    if not s:
        return raw

    if _ISO_RE.fullmatch(s):
        return s

    m = _NUMERIC_RE.fullmatch(s)
    if m:
        day, month, year = m.groups()
        return _iso(_expand_year(year), int(month), int(day)) or raw

    m = _DAY_FIRST_RE.fullmatch(s)
    if m:
        day, month_name, year = m.groups()
        return _iso(int(year), _month_number(month_name), int(day)) or raw

    m = _MONTH_FIRST_RE.fullmatch(s)
    if m:
        month_name, day, year = m.groups()
        return _iso(int(year), _month_number(month_name), int(day)) or raw

    return raw


__all__ = ["normalize_date"]
