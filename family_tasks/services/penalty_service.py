"""
Overdue penalty sweep.
Turns a user's overdue pending tasks into missed ones and deducts points once per task.
"""
import logging
from datetime import date
from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from family_tasks.repositories.task_repository import TaskRepository
from family_tasks.repositories.user_repository import UserRepository
from family_tasks.services.points_service import PointsService
from family_tasks.exceptions import UserNotFoundException, DatabaseException
from family_tasks.constants import TASK_STATUS_MISSED

logger = logging.getLogger("family_tasks.penalties")


class PenaltyService:
    """Service for the overdue task sweep"""

    def __init__(self, db: Session):
        self.db = db
        self.task_repo = TaskRepository()
        self.user_repo = UserRepository()
        self.points_service = PointsService(db)

    def check_overdue_tasks(self, user_id: int, today: date) -> dict:
        """
        Penalize a user's overdue tasks.

        Selects the user's tasks that are pending, not completed, not yet
        penalized and due before `today`. Each one loses
        floor(task_points / 2) points, becomes `missed` and gets
        penalty_applied set. The whole batch commits in a single
        transaction; any failure rolls every task and the point total back.

        Re-running the sweep is a no-op because penalized tasks no longer
        match the selection.

        Args:
            user_id: Owner of the tasks to sweep
            today: Reference date; tasks due strictly before it are overdue

        Returns:
            Dictionary with the sweep result
        """
        try:
            user = self.user_repo.get_by_id_for_update(self.db, user_id)
            if not user:
                raise UserNotFoundException(user_id)

            overdue_tasks = self.task_repo.get_overdue_for_update(self.db, user_id, today)

            points_deducted = 0
            missed_task_ids = []
            for task in overdue_tasks:
                penalty = PointsService.calculate_penalty(task.task_points)
                self.task_repo.update(self.db, task, {
                    "status": TASK_STATUS_MISSED,
                    "penalty_applied": True,
                })
                points_deducted += penalty
                missed_task_ids.append(task.id)

            if points_deducted:
                self.points_service.add_points(user_id, -points_deducted)

            self.db.commit()
        except UserNotFoundException:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Overdue sweep for user {user_id} failed: {e}")
            raise DatabaseException("overdue sweep", str(e))

        self.db.refresh(user)

        if missed_task_ids:
            logger.info(
                f"Overdue sweep for user {user_id}: {len(missed_task_ids)} task(s) missed, "
                f"{points_deducted} point(s) deducted"
            )

        return {
            "message": "Overdue tasks checked",
            "user_id": user_id,
            "tasks_penalized": len(missed_task_ids),
            "points_deducted": points_deducted,
            "missed_task_ids": missed_task_ids,
            "points": user.points,
        }

    def check_all_users(self, today: date) -> List[dict]:
        """
        Run the overdue sweep for every user holding overdue tasks.

        Each user is swept in their own transaction, so one failing user
        does not block the others.
        """
        results = []
        for user_id in self.task_repo.get_user_ids_with_overdue(self.db, today):
            try:
                results.append(self.check_overdue_tasks(user_id, today))
            except DatabaseException as e:
                logger.error(f"Skipping user {user_id} in nightly sweep: {e}")
        return results
