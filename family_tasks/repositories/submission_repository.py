"""
Submission repository - append-only storage of answer attempts.
"""
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from family_tasks.models import Submission, User


class SubmissionRepository:
    """Repository for Submission data access"""

    @staticmethod
    def create(db: Session, submission: Submission) -> Submission:
        """Add a new submission to the session"""
        db.add(submission)
        db.flush()
        return submission

    @staticmethod
    def get_for_task(db: Session, task_id: int) -> List[Tuple[Submission, Optional[str]]]:
        """Get a task's submissions with the submitter's username, newest first"""
        return db.query(Submission, User.username).outerjoin(
            User, Submission.user_id == User.id
        ).filter(
            Submission.task_id == task_id
        ).order_by(Submission.submitted_at.desc(), Submission.id.desc()).all()
