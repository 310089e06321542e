"""
Task repository - Data access layer for Task model.
Handles all database queries related to tasks.
"""
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import and_

from family_tasks.models import Task
from family_tasks.constants import TASK_STATUS_PENDING


class TaskRepository:
    """Repository for Task data access"""

    @staticmethod
    def get_by_id(db: Session, task_id: int) -> Optional[Task]:
        """Get task by ID"""
        return db.query(Task).filter(Task.id == task_id).first()

    @staticmethod
    def get_by_id_for_update(db: Session, task_id: int) -> Optional[Task]:
        """Get task by ID holding a row lock until the transaction ends"""
        return db.query(Task).filter(Task.id == task_id).populate_existing().with_for_update().first()

    @staticmethod
    def get_all(db: Session) -> List[Task]:
        """Get all tasks"""
        return db.query(Task).order_by(Task.due_date, Task.id).all()

    @staticmethod
    def get_by_user(db: Session, user_id: int) -> List[Task]:
        """Get all tasks assigned to a user"""
        return db.query(Task).filter(Task.user_id == user_id).order_by(Task.due_date).all()

    @staticmethod
    def get_due_on(db: Session, user_id: int, day: date) -> List[Task]:
        """Get a user's tasks due on a specific day"""
        return db.query(Task).filter(
            and_(
                Task.user_id == user_id,
                Task.due_date == day
            )
        ).order_by(Task.id).all()

    @staticmethod
    def get_due_after(db: Session, user_id: int, day: date) -> List[Task]:
        """Get a user's tasks due after a day"""
        return db.query(Task).filter(
            and_(
                Task.user_id == user_id,
                Task.due_date > day
            )
        ).order_by(Task.due_date, Task.id).all()

    @staticmethod
    def get_due_before(db: Session, user_id: int, day: date) -> List[Task]:
        """Get a user's tasks due before a day"""
        return db.query(Task).filter(
            and_(
                Task.user_id == user_id,
                Task.due_date < day
            )
        ).order_by(Task.due_date.desc(), Task.id).all()

    @staticmethod
    def get_overdue_for_update(db: Session, user_id: int, today: date) -> List[Task]:
        """
        Get a user's overdue tasks that have not been penalized yet.

        Rows stay locked until the sweep's transaction ends, so two concurrent
        sweeps cannot penalize the same task twice.
        """
        return db.query(Task).filter(
            and_(
                Task.user_id == user_id,
                Task.completed == False,
                Task.penalty_applied == False,
                Task.status == TASK_STATUS_PENDING,
                Task.due_date < today
            )
        ).order_by(Task.id).populate_existing().with_for_update().all()

    @staticmethod
    def get_user_ids_with_overdue(db: Session, today: date) -> List[int]:
        """Get IDs of users holding at least one unpenalized overdue task"""
        rows = db.query(Task.user_id).filter(
            and_(
                Task.completed == False,
                Task.penalty_applied == False,
                Task.status == TASK_STATUS_PENDING,
                Task.due_date < today
            )
        ).distinct().all()
        return sorted(row[0] for row in rows)

    @staticmethod
    def create(db: Session, task: Task) -> Task:
        """Add a new task to the session"""
        db.add(task)
        db.flush()
        return task

    @staticmethod
    def update(db: Session, task: Task, data: dict) -> Task:
        """Apply a partial update to a task"""
        for field, value in data.items():
            setattr(task, field, value)
        db.flush()
        return task

    @staticmethod
    def delete(db: Session, task: Task) -> None:
        """Delete a task"""
        db.delete(task)
        db.flush()
