"""
Tests for StreakService.

Tests cover:
1. First ever completion
2. Consecutive days
3. Gaps and clock skew
4. The daily completion guard
"""
from datetime import date, timedelta

from family_tasks.services.streak_service import StreakService


class TestCalculateStreak:
    """Tests for calculate_streak"""

    def test_first_completion_starts_streak(self, today):
        """No previous streak day should start at 1"""
        update = StreakService.calculate_streak(0, None, today, completed_today=False)

        assert update.streak == 1
        assert update.last_streak == today
        assert update.changed

    def test_completion_day_after_increments(self):
        """streak=5 on 2024-01-10, completing on 2024-01-11 -> 6"""
        update = StreakService.calculate_streak(5, date(2024, 1, 10), date(2024, 1, 11), False)

        assert update.streak == 6
        assert update.last_streak == date(2024, 1, 11)

    def test_two_day_gap_resets(self):
        """streak=6 on 2024-01-11, completing on 2024-01-13 -> 1"""
        update = StreakService.calculate_streak(6, date(2024, 1, 11), date(2024, 1, 13), False)

        assert update.streak == 1
        assert update.last_streak == date(2024, 1, 13)

    def test_clock_skew_resets(self, today):
        """A last streak day in the future counts as a gap"""
        update = StreakService.calculate_streak(4, today + timedelta(days=2), today, False)

        assert update.streak == 1
        assert update.last_streak == today

    def test_already_completed_today_is_noop(self, today, yesterday):
        """The guard wins: later completions on the same day change nothing"""
        update = StreakService.calculate_streak(3, yesterday, today, completed_today=True)

        assert update.streak == 3
        assert update.last_streak == yesterday
        assert not update.changed

    def test_same_day_without_marker_keeps_streak(self, today):
        """If the guard was bypassed, a same-day completion must not reset the streak"""
        update = StreakService.calculate_streak(7, today, today, completed_today=False)

        assert update.streak == 7
        assert update.last_streak == today
        assert not update.changed

    def test_consecutive_days_build_streak_of_n(self):
        """N completions on N consecutive days give streak N"""
        start = date(2024, 2, 27)  # crosses the leap day
        streak, last_streak = 0, None

        for offset in range(10):
            update = StreakService.calculate_streak(streak, last_streak, start + timedelta(days=offset), False)
            streak, last_streak = update.streak, update.last_streak

        assert streak == 10
        assert last_streak == date(2024, 3, 7)


class TestDaysBetween:

    def test_month_boundary(self):
        assert StreakService.days_between(date(2024, 1, 31), date(2024, 2, 1)) == 1

    def test_negative(self):
        assert StreakService.days_between(date(2024, 1, 2), date(2024, 1, 1)) == -1
