"""
Streak calculation service.
Decides whether a completion continues, resets or leaves a user's daily streak.
"""
from datetime import date
from typing import NamedTuple, Optional


class StreakUpdate(NamedTuple):
    """New streak values, plus whether anything changed"""
    streak: int
    last_streak: Optional[date]
    changed: bool


class StreakService:
    """Service for daily streak calculation"""

    @staticmethod
    def days_between(last_streak: date, today: date) -> int:
        """Whole calendar days from last_streak to today (negative on clock skew)"""
        return (today - last_streak).days

    @staticmethod
    def calculate_streak(
        streak: int,
        last_streak: Optional[date],
        today: date,
        completed_today: bool
    ) -> StreakUpdate:
        """
        Calculate a user's streak after a correct submission.

        The caller asks the daily completion tracker first and passes the
        answer in as completed_today. Only the first completion of a day
        moves the streak; later ones leave it untouched.

        Rules:
        - no previous streak day: streak becomes 1
        - previous streak day was yesterday: streak + 1
        - previous streak day is today: unchanged
        - any other gap (including negative ones): reset to 1

        Args:
            streak: Current streak
            last_streak: Date of the last streak-qualifying completion
            today: Date of the completion
            completed_today: Whether a completion marker already exists for today

        Returns:
            StreakUpdate with the new streak and last_streak
        """
        if completed_today:
            return StreakUpdate(streak, last_streak, False)

        if last_streak is None:
            return StreakUpdate(1, today, True)

        gap = StreakService.days_between(last_streak, today)

        if gap == 1:
            return StreakUpdate(streak + 1, today, True)

        if gap == 0:
            # Marker missing but the streak already counts today
            return StreakUpdate(streak, today, False)

        return StreakUpdate(1, today, True)
