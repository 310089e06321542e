"""Family task tracker: assignments, AI-graded submissions, points and streaks."""

__version__ = "1.0.0"
