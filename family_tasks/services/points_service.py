"""
Points ledger.
All point changes go through add_points as an atomic increment.
"""
import logging
from sqlalchemy.orm import Session

from family_tasks.repositories.user_repository import UserRepository
from family_tasks.exceptions import UserNotFoundException
from family_tasks.constants import INTERACTION_POINTS, PENALTY_DIVISOR

logger = logging.getLogger("family_tasks.points")


class PointsService:
    """Service for point accrual and deduction"""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository()

    @staticmethod
    def calculate_penalty(task_points: int) -> int:
        """
        Points lost for a missed task: floor(task_points / 2).

        Zero or negative task points are accepted; the result is then
        zero or negative as well (a negative penalty adds points).
        """
        return task_points // PENALTY_DIVISOR

    @staticmethod
    def interaction_delta(interaction_type: str) -> int:
        """Point change for the receiver of a like or dislike"""
        return INTERACTION_POINTS[interaction_type]

    def add_points(self, user_id: int, delta: int) -> None:
        """
        Shift a user's points by delta. No lower bound is enforced.

        Does not commit; the caller's transaction groups this with the
        rest of the accounting event.

        Raises:
            UserNotFoundException: If no user matched
        """
        matched = self.user_repo.add_points(self.db, user_id, delta)
        if matched == 0:
            raise UserNotFoundException(user_id)
        logger.info(f"Points for user {user_id} changed by {delta:+d}")
