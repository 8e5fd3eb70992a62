"""Amount parsing shared by every extractor.

Statement amounts arrive as text tokens: ``"299.00"``, ``"1,37,586.21"``
(lakh grouping), ``"₹ 1,400"``, ``"INR 20.00"``, or a lone ``"-"`` when a
column is empty. Parsing never raises; tokens that are not numbers yield
``None`` so callers can drop the row.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_CENT = Decimal("0.01")
_ZERO = Decimal("0.00")

# Currency markers that may prefix (or, rarely, suffix) an amount token.
_CURRENCY_RE = re.compile(r"(?:₹|INR|Rs\.?|\$)", re.IGNORECASE)

# A single monetary token with exactly two decimals, as printed in tabular
# statement columns. Grouping may be western (1,234.56) or lakh (1,23,456.78).
DECIMAL_TOKEN = r"\d{1,3}(?:,\d{2,3})*\.\d{2}|\d+\.\d{2}"
DECIMAL_TOKEN_RE = re.compile(rf"(?<![\d,.])(?:{DECIMAL_TOKEN})(?![\d.])")


def quantize_amount(value: Decimal | int | float | str) -> Decimal:
    """Quantize to exactly two decimals using half-up rounding."""

    d = value if isinstance(value, Decimal) else Decimal(str(value))
    return d.quantize(_CENT, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal) -> str:
    # Exactly two decimals; ASCII dot; no thousands separators.
    return f"{quantize_amount(value):.2f}"


def parse_amount(raw: str | None) -> Decimal | None:
    """Parse a statement amount token into a non-negative ``Decimal``.

    - ``None``, empty strings and dash placeholders (``-``, ``--``) are zero.
    - Currency markers and thousands separators are stripped.
    - A leading minus or surrounding parentheses are ignored: direction is
      never carried by the sign in this package.
    - Anything else that is not a number returns ``None``.
    """

    if raw is None:
        return _ZERO
    s = _CURRENCY_RE.sub("", raw).strip()
    if not s or set(s) <= {"-"}:
        return _ZERO
    if s.startswith("(") and s.endswith(")"):
        s = s[1:-1].strip()
    s = s.lstrip("+-").strip()
    s = s.replace(",", "")
    if not re.fullmatch(r"\d+(?:\.\d+)?|\.\d+", s):
        return None
    try:
        return quantize_amount(Decimal(s))
    except InvalidOperation:
        return None


def find_decimal_tokens(text: str) -> list[re.Match[str]]:
    """Return all two-decimal monetary tokens in ``text``, left to right."""

    return list(DECIMAL_TOKEN_RE.finditer(text))


__all__ = [
    "DECIMAL_TOKEN",
    "DECIMAL_TOKEN_RE",
    "find_decimal_tokens",
    "format_amount",
    "parse_amount",
    "quantize_amount",
]
