"""
Date keys are the canonical "YYYY-MM-DD" strings habits are tracked under.

All conversions use the local calendar fields of the value given; nothing is
shifted to UTC.
"""
import re
from datetime import date, datetime
from typing import Optional, Union

from errors import InvalidDate

DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DateLike = Union[date, datetime]


def _as_date(value: DateLike) -> date:
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return value.date()
    return value


def encode(value: DateLike) -> str:
    d = _as_date(value)
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def decode(key: str) -> date:
    if not isinstance(key, str) or not DATE_KEY_RE.match(key):
        raise InvalidDate()
    try:
        return datetime.strptime(key, "%Y-%m-%d").date()
    except ValueError:
        raise InvalidDate(f"Invalid date: {key}")


def is_valid(key: str) -> bool:
    try:
        decode(key)
    except InvalidDate:
        return False
    return True


def today(now: Optional[DateLike] = None) -> date:
    if now is None:
        now = datetime.now()
    return _as_date(now)


def is_future(value: DateLike, now: Optional[DateLike] = None) -> bool:
    """True when `value` falls on a later calendar day than `now`."""
    return _as_date(value) > today(now)
