"""
Task generation repository - stored AI learning plans.
"""
from typing import Optional
from sqlalchemy.orm import Session

from family_tasks.models import TaskGeneration


class TaskGenerationRepository:
    """Repository for TaskGeneration data access"""

    @staticmethod
    def get_by_id(db: Session, generation_id: int) -> Optional[TaskGeneration]:
        """Get task generation by ID"""
        return db.query(TaskGeneration).filter(TaskGeneration.id == generation_id).first()

    @staticmethod
    def create(db: Session, generation: TaskGeneration) -> TaskGeneration:
        """Add a new task generation to the session"""
        db.add(generation)
        db.flush()
        return generation
