"""
Dashboard statistics across all of a user's habits.
"""
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Sequence, Union

import datekeys
import streaks
from schemas import Habit

Now = Union[date, datetime, None]


def completed_today(habits: Sequence[Habit], now: Now = None) -> int:
    key = datekeys.encode(datekeys.today(now))
    return sum(1 for h in habits if key in h.tracked_dates)


def today_completion_rate(habits: Sequence[Habit], now: Now = None) -> int:
    """Percentage of habits tracked today, rounded half up."""
    if not habits:
        return 0
    return math.floor(completed_today(habits, now) * 100 / len(habits) + 0.5)


def total_tracked_days(habits: Sequence[Habit]) -> int:
    return sum(len(h.tracked_dates) for h in habits)


def max_current_streak(habits: Sequence[Habit], now: Now = None) -> int:
    return max((streaks.current_streak(h.tracked_dates, now) for h in habits), default=0)


def max_longest_streak(habits: Sequence[Habit]) -> int:
    return max((streaks.longest_streak(h.tracked_dates) for h in habits), default=0)


@dataclass(frozen=True)
class DashboardStats:
    total_habits: int
    total_tracked_days: int
    completed_today: int
    completion_rate: int
    current_streak: int
    longest_streak: int


def dashboard(habits: Sequence[Habit], now: Now = None) -> DashboardStats:
    habits = list(habits)
    return DashboardStats(
        total_habits=len(habits),
        total_tracked_days=total_tracked_days(habits),
        completed_today=completed_today(habits, now),
        completion_rate=today_completion_rate(habits, now),
        current_streak=max_current_streak(habits, now),
        longest_streak=max_longest_streak(habits),
    )
