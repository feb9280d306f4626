"""Exact minor-unit money handling.

Amounts never pass through float or Decimal: the decimal string is rewritten
into a digit string scaled to two fractional digits and parsed as an int.
"""
from __future__ import annotations

import re

from .errors import InvalidAmountFormat, UnknownTransactionType
from .models import Direction

MINOR_DIGITS = 2
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_DIGITS = re.compile(r"[0-9]*")


def _disambiguate_separators(text: str) -> str:
    has_dot = "." in text
    has_comma = "," in text
    if has_dot and has_comma:
        # whichever separator comes last is the decimal point
        if text.rfind(",") > text.rfind("."):
            return text.replace(".", "").replace(",", ".")
        return text.replace(",", "")
    if has_comma:
        return text.replace(",", ".")
    return text


def normalize_amount(raw: str | None) -> int:
    """Convert a free-form decimal string into signed minor units.

    ``"1,234.56"``, ``"1.234,56"`` and ``"1234.56"`` all give ``123456``.
    Fractions beyond two digits are truncated, never rounded. Empty input is
    zero.
    """
    if raw is None:
        return 0
    text = str(raw).strip().strip("\"'").strip()
    if not text:
        return 0

    negative = False
    if text[0] in "+-":
        negative = text[0] == "-"
        text = text[1:]

    text = text.replace(" ", "")
    text = _disambiguate_separators(text)

    int_part, _, frac_part = text.partition(".")
    if not _DIGITS.fullmatch(int_part) or not _DIGITS.fullmatch(frac_part):
        raise InvalidAmountFormat(f"invalid amount format: {raw!r}")
    if not int_part and not frac_part:
        raise InvalidAmountFormat(f"invalid amount format: {raw!r}")

    frac_part = frac_part[:MINOR_DIGITS].ljust(MINOR_DIGITS, "0")
    value = int((int_part or "0") + frac_part)
    if negative:
        value = -value
    if not INT64_MIN <= value <= INT64_MAX:
        raise InvalidAmountFormat(f"amount out of range: {raw!r}")
    return value


def signed_amount(direction: object, magnitude_minor: int) -> int:
    if not isinstance(direction, Direction):
        raise UnknownTransactionType(f"unknown transaction type: {direction!r}")
    return direction.signed_amount(magnitude_minor)


def format_minor(value: int) -> str:
    sign = "-" if value < 0 else ""
    major, minor = divmod(abs(value), 10**MINOR_DIGITS)
    return f"{sign}{major}.{minor:0{MINOR_DIGITS}d}"
