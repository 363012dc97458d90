"""
Streak calculation over a habit's tracked date keys.

Both functions are pure: they depend only on the keys and the reference day
passed in. Keys that are malformed or fall after the reference day are
ignored.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Set, Union

import datekeys

ONE_DAY = timedelta(days=1)


def _past_days(keys: Iterable[str], today: date) -> Set[date]:
    days = set()
    for key in keys or ():
        if not datekeys.is_valid(key):
            continue
        day = datekeys.decode(key)
        if day <= today:
            days.add(day)
    return days


def current_streak(keys: Iterable[str], now: Union[date, datetime, None] = None) -> int:
    """Consecutive tracked days ending today, or yesterday if today is open."""
    today = datekeys.today(now)
    days = _past_days(keys, today)
    if not days:
        return 0

    check = today if today in days else today - ONE_DAY
    streak = 0
    while check in days:
        streak += 1
        check -= ONE_DAY
    return streak


def longest_streak(keys: Iterable[str]) -> int:
    days: List[date] = sorted({datekeys.decode(k) for k in keys or () if datekeys.is_valid(k)})
    if not days:
        return 0

    longest = run = 1
    for prev, cur in zip(days, days[1:]):
        if cur - prev == ONE_DAY:
            run += 1
            longest = max(longest, run)
        else:
            run = 1
    return longest


@dataclass(frozen=True)
class StreakSummary:
    current: int
    longest: int


def summarize(keys: Iterable[str], now: Optional[Union[date, datetime]] = None) -> StreakSummary:
    keys = list(keys or ())
    return StreakSummary(current=current_streak(keys, now), longest=longest_streak(keys))
