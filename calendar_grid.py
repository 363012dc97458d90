"""
Month grid for the calendar page: six Sunday-first weeks around a month.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import List, Sequence, Union

import datekeys
from errors import ValidationError
from schemas import Habit

GRID_DAYS = 42


@dataclass
class DayCell:
    key: str
    day: int
    in_current_month: bool
    is_today: bool
    is_future: bool
    habit_ids: List[str] = field(default_factory=list)


def grid_start(year: int, month: int) -> date:
    first = date(year, month, 1)
    # date.weekday() is Monday=0; the grid starts on Sunday
    lead = (first.weekday() + 1) % 7
    return first - timedelta(days=lead)


def month_grid(
    year: int,
    month: int,
    habits: Sequence[Habit] = (),
    now: Union[date, datetime, None] = None,
) -> List[DayCell]:
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12")
    if not date.min.year <= year <= date.max.year:
        raise ValidationError("Year out of range")
    # only January of year 1 and December of year 9999 spill past the date range
    try:
        start = grid_start(year, month)
    except OverflowError:
        raise ValidationError("Month out of range")
    if start > date.max - timedelta(days=GRID_DAYS - 1):
        raise ValidationError("Month out of range")

    today = datekeys.today(now)
    cells = []
    for offset in range(GRID_DAYS):
        day = start + timedelta(days=offset)
        key = datekeys.encode(day)
        cells.append(
            DayCell(
                key=key,
                day=day.day,
                in_current_month=day.month == month,
                is_today=day == today,
                is_future=datekeys.is_future(day, today),
                habit_ids=[h.id for h in habits if key in h.tracked_dates],
            )
        )
    return cells
