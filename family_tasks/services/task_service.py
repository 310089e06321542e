"""
Task service.
Task assignment, due-date views and AI-drafted learning plans.
"""
import logging
from datetime import date, timedelta
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from family_tasks.models import Task, TaskGeneration
from family_tasks.repositories.task_repository import TaskRepository
from family_tasks.repositories.user_repository import UserRepository
from family_tasks.repositories.generation_repository import TaskGenerationRepository
from family_tasks.services.ai_service import AIService
from family_tasks.schemas import TaskCreate, TaskGenerationCreate, GeneratedTask
from family_tasks.exceptions import (
    FamilyTasksException, TaskNotFoundException, UserNotFoundException,
    GenerationNotFoundException, ValidationException, DatabaseException
)
from family_tasks.constants import DEFAULT_TASK_GOAL, DEFAULT_TASK_POINTS

logger = logging.getLogger("family_tasks.tasks")


class TaskService:
    """Service for task management"""

    def __init__(self, db: Session, ai_service: Optional[AIService] = None):
        self.db = db
        self.ai_service = ai_service
        self.task_repo = TaskRepository()
        self.user_repo = UserRepository()
        self.generation_repo = TaskGenerationRepository()

    def _commit(self, operation: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Task {operation} failed: {e}")
            raise DatabaseException(operation, str(e))

    def create_task(self, task_data: TaskCreate) -> Task:
        """Assign a new task to a user"""
        if not self.user_repo.get_by_id(self.db, task_data.user_id):
            raise UserNotFoundException(task_data.user_id)

        description = task_data.description.strip()
        task = self.task_repo.create(self.db, Task(
            user_id=task_data.user_id,
            title=(task_data.title or description[:100]).strip(),
            description=description,
            category=task_data.category or "General",
            goal=task_data.goal or DEFAULT_TASK_GOAL,
            due_date=task_data.due_date,
            task_points=task_data.task_points,
        ))
        self._commit("create")
        self.db.refresh(task)
        logger.info(f"Task {task.id} assigned to user {task.user_id}, due {task.due_date}")
        return task

    def get_task(self, task_id: int) -> Task:
        task = self.task_repo.get_by_id(self.db, task_id)
        if not task:
            raise TaskNotFoundException(task_id)
        return task

    def get_all_tasks(self) -> List[Task]:
        return self.task_repo.get_all(self.db)

    def delete_task(self, task_id: int) -> None:
        task = self.get_task(task_id)
        self.task_repo.delete(self.db, task)
        self._commit("delete")
        logger.info(f"Task {task_id} deleted")

    def get_today_tasks(self, user_id: int, today: date) -> List[Task]:
        return self.task_repo.get_due_on(self.db, user_id, today)

    def get_future_tasks(self, user_id: int, today: date) -> List[Task]:
        return self.task_repo.get_due_after(self.db, user_id, today)

    def get_past_tasks(self, user_id: int, today: date) -> List[Task]:
        return self.task_repo.get_due_before(self.db, user_id, today)

    def generate_tasks(self, params: TaskGenerationCreate) -> dict:
        """
        Draft a learning plan with the AI collaborator and store it for review.

        Nothing is assigned until the plan is approved.
        """
        if not self.user_repo.get_by_id(self.db, params.user_id):
            raise UserNotFoundException(params.user_id)

        tasks = self.ai_service.generate_tasks(
            params.goal, params.number_of_sessions, params.problems_per_session
        )
        generation = self.generation_repo.create(self.db, TaskGeneration(
            user_id=params.user_id,
            days=params.days,
            number_of_sessions=params.number_of_sessions,
            problems_per_session=params.problems_per_session,
            goal=params.goal,
            generated_tasks=[task.model_dump() for task in tasks],
        ))
        self._commit("generation")
        return {"tasks": tasks, "generation_id": generation.id}

    def approve_generation(
        self,
        generation_id: int,
        today: date,
        user_id: Optional[int] = None,
        tasks: Optional[List[GeneratedTask]] = None
    ) -> List[int]:
        """
        Turn a stored plan into tasks due `today + day_number` and mark it approved.

        `tasks` replaces the stored plan when the admin edited it before
        approving. All tasks are created in one transaction.
        """
        try:
            generation = self.generation_repo.get_by_id(self.db, generation_id)
            if not generation:
                raise GenerationNotFoundException(generation_id)
            if generation.approved:
                raise ValidationException("generation_id", f"generation {generation_id} is already approved")

            assignee_id = user_id or generation.user_id
            if not self.user_repo.get_by_id(self.db, assignee_id):
                raise UserNotFoundException(assignee_id)

            plan = tasks if tasks is not None else [
                GeneratedTask(**raw) for raw in generation.generated_tasks
            ]

            created = []
            for item in plan:
                created.append(self.task_repo.create(self.db, Task(
                    user_id=assignee_id,
                    title=item.title,
                    description=item.description,
                    category=item.category,
                    goal=item.goal or DEFAULT_TASK_GOAL,
                    due_date=today + timedelta(days=item.day_number),
                    task_points=DEFAULT_TASK_POINTS,
                )))

            generation.approved = True
            self.db.commit()
        except FamilyTasksException:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Approving generation {generation_id} failed: {e}")
            raise DatabaseException("generation approval", str(e))

        logger.info(f"Generation {generation_id} approved: {len(created)} task(s) for user {assignee_id}")
        return [task.id for task in created]

    def enhance_task(self, description: str):
        """Ask the AI collaborator for a title, refined description and category"""
        return self.ai_service.enhance_task(description)
