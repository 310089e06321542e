"""
Submission service.
Grades an answer through the AI collaborator and applies the accounting
that follows: task completion, points, daily completion marker and streak.
"""
import logging
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from family_tasks.models import Submission, Task, User
from family_tasks.repositories.task_repository import TaskRepository
from family_tasks.repositories.user_repository import UserRepository
from family_tasks.repositories.submission_repository import SubmissionRepository
from family_tasks.services.ai_service import AIService
from family_tasks.services.completion_service import DailyCompletionService
from family_tasks.services.points_service import PointsService
from family_tasks.services.streak_service import StreakService
from family_tasks.exceptions import (
    TaskNotFoundException, TaskNotOpenException, UserNotFoundException, DatabaseException
)
from family_tasks.constants import TASK_STATUS_PENDING, TASK_STATUS_COMPLETED

logger = logging.getLogger("family_tasks.submissions")


class SubmissionService:
    """Service for answer submissions"""

    def __init__(self, db: Session, ai_service: Optional[AIService] = None):
        self.db = db
        self.ai_service = ai_service
        self.task_repo = TaskRepository()
        self.user_repo = UserRepository()
        self.submission_repo = SubmissionRepository()
        self.completion_service = DailyCompletionService(db)
        self.points_service = PointsService(db)
        self.streak_service = StreakService()

    def submit(self, task_id: int, user_id: int, answer: str, today: date) -> dict:
        """
        Submit an answer for a task.

        The answer is graded before any write. The submission record and
        every accounting change it causes commit in one transaction.

        Raises:
            TaskNotFoundException: Unknown task
            TaskNotOpenException: Task is already completed or missed
            UserNotFoundException: Unknown submitter
            AIServiceException: Grading failed
            DatabaseException: The transaction failed and was rolled back
        """
        task = self.task_repo.get_by_id(self.db, task_id)
        if not task:
            raise TaskNotFoundException(task_id)
        if task.status != TASK_STATUS_PENDING:
            raise TaskNotOpenException(task_id, task.status)

        verification = self.ai_service.verify_answer(task.description, task.goal, answer)

        try:
            # Lock order user -> task matches the overdue sweep
            user = self.user_repo.get_by_id_for_update(self.db, user_id)
            if not user:
                raise UserNotFoundException(user_id)
            task = self.task_repo.get_by_id_for_update(self.db, task_id)
            if not task:
                raise TaskNotFoundException(task_id)
            if task.status != TASK_STATUS_PENDING:
                # Swept or completed while the answer was being graded
                raise TaskNotOpenException(task_id, task.status)

            submission = self.submission_repo.create(self.db, Submission(
                task_id=task_id,
                user_id=user_id,
                answer=answer,
                correct=verification.correct,
                ai_feedback=verification.hint or verification.explanation,
            ))

            if verification.correct:
                self._apply_correct_submission(task, user, today)
            else:
                self.task_repo.update(self.db, task, {"attempts": task.attempts + 1})

            self.db.commit()
        except (TaskNotFoundException, TaskNotOpenException, UserNotFoundException):
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Submission for task {task_id} by user {user_id} failed: {e}")
            raise DatabaseException("submission", str(e))

        self.db.refresh(user)
        self.db.refresh(task)
        self.db.refresh(submission)

        return {
            "submission": submission,
            "verification": verification,
            "task": task,
            "user": user,
        }

    def _apply_correct_submission(self, task: Task, user: User, today: date) -> None:
        """Complete the task, grant its points and move the streak on the first completion of the day"""
        self.task_repo.update(self.db, task, {
            "completed": True,
            "completed_by": user.id,
            "completed_by_name": user.username,
            "attempts": task.attempts + 1,
            "status": TASK_STATUS_COMPLETED,
        })

        # Points accrue on every correct submission, independent of the streak
        self.points_service.add_points(user.id, task.task_points)

        completed_today = self.completion_service.has_completed_today(user.id, today)
        if not completed_today:
            # Lost the insert to a concurrent request: that one owns the streak update
            completed_today = not self.completion_service.record_completion(user.id, today)

        update = self.streak_service.calculate_streak(
            user.streak, user.last_streak, today, completed_today
        )
        if update.changed:
            logger.info(f"Streak for user {user.id}: {user.streak} -> {update.streak}")
            self.user_repo.update(self.db, user, {
                "streak": update.streak,
                "last_streak": update.last_streak,
            })

        logger.info(f"Task {task.id} completed by user {user.id} (+{task.task_points} points)")

    def get_task_submissions(self, task_id: int, current_user: User) -> List[dict]:
        """Get a task's submissions, newest first, with submitter name and edit permission"""
        if not self.task_repo.get_by_id(self.db, task_id):
            raise TaskNotFoundException(task_id)

        results = []
        for submission, submitter_name in self.submission_repo.get_for_task(self.db, task_id):
            results.append({
                "id": submission.id,
                "task_id": submission.task_id,
                "user_id": submission.user_id,
                "answer": submission.answer,
                "correct": submission.correct,
                "ai_feedback": submission.ai_feedback,
                "submitted_at": submission.submitted_at,
                "submitter_name": submitter_name,
                "can_edit": submission.user_id == current_user.id or current_user.is_admin,
            })
        return results

