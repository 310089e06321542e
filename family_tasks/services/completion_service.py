"""
Daily completion tracker.
Records, per user and calendar day, that at least one task was completed.
"""
import logging
from datetime import date
from sqlalchemy.orm import Session

from family_tasks.repositories.completion_repository import DailyCompletionRepository

logger = logging.getLogger("family_tasks.completions")


class DailyCompletionService:
    """Service for daily completion markers"""

    def __init__(self, db: Session):
        self.db = db
        self.completion_repo = DailyCompletionRepository()

    def has_completed_today(self, user_id: int, day: date) -> bool:
        """Check whether the user already completed a task on `day`"""
        return self.completion_repo.exists(self.db, user_id, day)

    def record_completion(self, user_id: int, day: date) -> bool:
        """
        Record that the user completed a task on `day`.

        Returns True only for the call that created the marker; repeated
        calls for the same (user, day) are no-ops returning False.
        """
        created = self.completion_repo.insert(self.db, user_id, day)
        if created:
            logger.info(f"Recorded daily completion for user {user_id} on {day}")
        return created
