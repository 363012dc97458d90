import random
from datetime import date, timedelta

import pytest

import streaks


def _days(start: date, count: int):
    return [(start + timedelta(days=i)).isoformat() for i in range(count)]


def test_empty_set():
    assert streaks.current_streak(set(), date(2024, 1, 3)) == 0
    assert streaks.longest_streak(set()) == 0


def test_today_only():
    assert streaks.current_streak({"2024-01-03"}, date(2024, 1, 3)) >= 1


def test_three_consecutive_days_ending_today():
    keys = {"2024-01-01", "2024-01-02", "2024-01-03"}
    summary = streaks.summarize(keys, date(2024, 1, 3))
    assert summary.current == 3
    assert summary.longest == 3


def test_gap_before_today():
    keys = {"2024-01-01", "2024-01-02", "2024-01-05"}
    assert streaks.current_streak(keys, date(2024, 1, 5)) == 1
    assert streaks.longest_streak(keys) == 2


def test_yesterday_only_keeps_streak_alive():
    assert streaks.current_streak({"2024-03-09"}, date(2024, 3, 10)) == 1


def test_today_and_yesterday_untracked():
    assert streaks.current_streak({"2024-03-07", "2024-03-08"}, date(2024, 3, 10)) == 0


def test_future_dates_are_ignored():
    keys = {"2024-03-09", "2024-03-10", "2024-03-11", "2024-03-12"}
    assert streaks.current_streak(keys, date(2024, 3, 10)) == 2


def test_future_only():
    assert streaks.current_streak({"2024-03-11"}, date(2024, 3, 10)) == 0


def test_malformed_keys_are_ignored():
    keys = {"2024-03-09", "garbage", "2024-02-30"}
    assert streaks.current_streak(keys, date(2024, 3, 10)) == 1
    assert streaks.longest_streak(keys) == 1


def test_streak_across_month_and_year_boundaries():
    keys = _days(date(2023, 12, 28), 7)
    assert streaks.current_streak(keys, date(2024, 1, 3)) == 7
    assert streaks.longest_streak(keys) == 7


def test_leap_day():
    keys = {"2024-02-28", "2024-02-29", "2024-03-01"}
    assert streaks.longest_streak(keys) == 3


def test_longest_picks_best_run():
    keys = _days(date(2024, 1, 1), 3) + _days(date(2024, 2, 1), 5) + ["2024-03-01"]
    assert streaks.longest_streak(keys) == 5


@pytest.mark.parametrize("seed", range(5))
def test_longest_is_order_independent(seed):
    keys = _days(date(2024, 1, 1), 4) + _days(date(2024, 1, 10), 6)
    shuffled = list(keys)
    random.Random(seed).shuffle(shuffled)
    assert streaks.longest_streak(shuffled) == streaks.longest_streak(keys) == 6


def test_duplicate_keys_do_not_extend_runs():
    assert streaks.longest_streak(["2024-01-01", "2024-01-01", "2024-01-02"]) == 2
