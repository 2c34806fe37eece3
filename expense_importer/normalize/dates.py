from __future__ import annotations

import re
import warnings
from datetime import date, datetime, timedelta
from numbers import Real
from typing import Optional

import pandas as pd

from expense_importer.logging_setup import get_logger

logger = get_logger(__name__)

# Spreadsheet serial dates: day 25569 is 1970-01-01.
SERIAL_EPOCH_OFFSET = 25569
SERIAL_MIN = 40000

_UNIX_EPOCH = datetime(1970, 1, 1)

_DMY = re.compile(r"(\d{1,2})[/-](\d{1,2})[/-](\d{4})")
_YMD = re.compile(r"(\d{4})-(\d{1,2})-(\d{1,2})")
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)")


def _today(today: Optional[date]) -> str:
    return (today or date.today()).isoformat()


def _ymd(year: str, month: str, day: str) -> Optional[str]:
    try:
        return date(int(year), int(month), int(day)).isoformat()
    except ValueError:
        return None


def _from_serial(num: float) -> Optional[str]:
    try:
        return (_UNIX_EPOCH + timedelta(days=num - SERIAL_EPOCH_OFFSET)).date().isoformat()
    except OverflowError:
        return None


def _generic(v: str) -> Optional[str]:
    with warnings.catch_warnings():
        # pandas warns when it has to guess a format per element
        warnings.simplefilter("ignore", UserWarning)
        try:
            ts = pd.to_datetime(v, errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return None
    if ts is None or pd.isna(ts):
        return None
    return ts.date().isoformat()


def parse_date_to_iso(value, today: Optional[date] = None) -> str:
    """Return ``value`` as ``YYYY-MM-DD``, falling back to today's date.

    Tried in order: day/month/year text, year-month-day text, spreadsheet
    serial numbers above 40000, then generic parsing.
    """
    if value is None or value == "":
        return _today(today)
    if not isinstance(value, str) and pd.isna(value):
        return _today(today)

    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Real) and not isinstance(value, bool):
        if value > SERIAL_MIN:
            iso = _from_serial(float(value))
            if iso:
                return iso
        logger.debug("Numeric date %r not understood, using today", value)
        return _today(today)

    v = str(value).strip()
    if not v:
        return _today(today)

    m = _DMY.search(v)
    if m:
        day, month, year = m.groups()
        iso = _ymd(year, month, day)
        if iso:
            return iso

    m = _YMD.search(v)
    if m:
        iso = _ymd(*m.groups())
        if iso:
            return iso

    m = _LEADING_NUMBER.match(v)
    if m and float(m.group(0)) > SERIAL_MIN:
        iso = _from_serial(float(m.group(0)))
        if iso:
            return iso

    iso = _generic(v)
    if iso:
        return iso

    logger.debug("Date %r not understood, using today", v)
    return _today(today)
