from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation
from numbers import Real

from expense_importer.logging_setup import get_logger

logger = get_logger(__name__)

# Numeric cells below this bound lost their trailing zeros on export (2.5 -> 2500).
TRUNCATION_THRESHOLD = 100
TRUNCATION_FACTOR = 1000

_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _strip_currency_and_spaces(s: str) -> str:
    return re.sub(r"\s+", "", s.replace("R$", ""))


def _is_number(value: object) -> bool:
    return isinstance(value, (Real, Decimal)) and not isinstance(value, bool)


def _from_number(value) -> Decimal:
    amt = value if isinstance(value, Decimal) else Decimal(str(value))
    if 0 < amt < TRUNCATION_THRESHOLD:
        logger.warning("Suspicious amount %s: multiplying by %d", value, TRUNCATION_FACTOR)
        return amt * TRUNCATION_FACTOR
    return amt


def _resolve_separators(v: str) -> str:
    has_comma = "," in v
    has_dot = "." in v

    if has_comma and has_dot:
        # Brazilian: 1.234,56
        return v.replace(".", "").replace(",", ".", 1)
    if has_comma:
        # 1000,00
        return v.replace(",", ".", 1)
    if has_dot:
        # 200.00 is decimal, 1.000 is a thousands group
        parts = v.split(".")
        if len(parts) == 2 and len(parts[1]) == 2:
            return v
        return v.replace(".", "")
    return v


def parse_amount(value) -> Decimal:
    """Best-effort amount parser for user spreadsheets.

    Never raises: anything that cannot be read as a number becomes ``0``,
    which row validation then rejects.
    """
    if value is None or value == "":
        return Decimal(0)

    if _is_number(value):
        if isinstance(value, float) and math.isnan(value):
            return Decimal(0)
        if not value:
            return Decimal(0)
        try:
            return _from_number(value)
        except InvalidOperation:
            return Decimal(0)

    v = _resolve_separators(_strip_currency_and_spaces(str(value)))

    # Only the leading numeric part counts, trailing junk is ignored.
    m = _LEADING_NUMBER.match(v)
    if not m:
        return Decimal(0)
    try:
        return Decimal(m.group(0))
    except (InvalidOperation, ValueError):
        return Decimal(0)
