"""
Tracked-date sets: the per-habit collection of date keys.
"""
from datetime import date, datetime
from typing import FrozenSet, Iterable, List, Tuple, Union

import datekeys
from errors import FutureDate

TrackedDates = FrozenSet[str]


def normalize(keys: Iterable[str]) -> TrackedDates:
    return frozenset(keys or ())


def toggle(dates: Iterable[str], key: str) -> Tuple[TrackedDates, bool]:
    """Remove `key` if present, add it otherwise.

    Returns the new set and whether the key was added. The input is left
    untouched.
    """
    current = normalize(dates)
    if key in current:
        return current - {key}, False
    return current | {key}, True


def toggle_checked(
    dates: Iterable[str], key: str, now: Union[date, datetime, None] = None
) -> Tuple[TrackedDates, bool]:
    """Toggle `key` after checking it is a real, non-future day."""
    day = datekeys.decode(key)
    if datekeys.is_future(day, now):
        raise FutureDate()
    return toggle(dates, key)


def ordered(dates: Iterable[str], reverse: bool = False) -> List[str]:
    return sorted(normalize(dates), reverse=reverse)
