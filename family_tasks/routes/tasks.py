"""
Task HTTP routes.
Fixed paths are declared before /{task_id} so they are not captured by it.
"""
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from family_tasks.auth import get_current_user, get_admin
from family_tasks.database import get_db
from family_tasks.dependencies import get_ai_service, get_today
from family_tasks.models import User
from family_tasks.services.ai_service import AIService
from family_tasks.services.task_service import TaskService
from family_tasks.services.submission_service import SubmissionService
from family_tasks.services.penalty_service import PenaltyService
from family_tasks.schemas import (
    TaskCreate, TaskResponse, TaskEnhanceRequest, EnhancedTask,
    SubmissionCreate, SubmitResponse, SubmissionWithSubmitter,
    OverdueSweepResponse, TaskGenerationCreate, TaskGenerationResponse,
    TaskApproveRequest, TaskApproveResponse
)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(task: TaskCreate, db: Session = Depends(get_db), _: User = Depends(get_admin)):
    """Assign a task to a family member"""
    return TaskService(db).create_task(task)


@router.get("", response_model=List[TaskResponse])
def get_tasks(db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return TaskService(db).get_all_tasks()


@router.post("/enhance", response_model=EnhancedTask)
def enhance_task(
    body: TaskEnhanceRequest,
    db: Session = Depends(get_db),
    ai_service: AIService = Depends(get_ai_service),
    _: User = Depends(get_admin)
):
    return TaskService(db, ai_service).enhance_task(body.description)


@router.post("/generate", response_model=TaskGenerationResponse)
def generate_tasks(
    params: TaskGenerationCreate,
    db: Session = Depends(get_db),
    ai_service: AIService = Depends(get_ai_service),
    _: User = Depends(get_admin)
):
    """Draft a learning plan for review"""
    return TaskService(db, ai_service).generate_tasks(params)


@router.post("/approve", response_model=TaskApproveResponse)
def approve_tasks(
    body: TaskApproveRequest,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
    _: User = Depends(get_admin)
):
    """Create the tasks of a drafted learning plan"""
    created_ids = TaskService(db).approve_generation(
        body.generation_id, today, body.user_id, body.tasks
    )
    return {"message": "Tasks approved and created successfully", "created_task_ids": created_ids}


@router.post("/check-overdue", response_model=OverdueSweepResponse)
def check_overdue_tasks(
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
    current_user: User = Depends(get_current_user)
):
    """Run the overdue penalty sweep for the current user"""
    return PenaltyService(db).check_overdue_tasks(current_user.id, today)


@router.get("/today", response_model=List[TaskResponse])
def get_today_tasks(
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
    current_user: User = Depends(get_current_user)
):
    return TaskService(db).get_today_tasks(current_user.id, today)


@router.get("/future", response_model=List[TaskResponse])
def get_future_tasks(
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
    current_user: User = Depends(get_current_user)
):
    return TaskService(db).get_future_tasks(current_user.id, today)


@router.get("/past", response_model=List[TaskResponse])
def get_past_tasks(
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
    current_user: User = Depends(get_current_user)
):
    return TaskService(db).get_past_tasks(current_user.id, today)


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(task_id: int, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return TaskService(db).get_task(task_id)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: int, db: Session = Depends(get_db), _: User = Depends(get_admin)):
    TaskService(db).delete_task(task_id)


@router.post("/{task_id}/submit", response_model=SubmitResponse)
def submit_answer(
    task_id: int,
    body: SubmissionCreate,
    db: Session = Depends(get_db),
    ai_service: AIService = Depends(get_ai_service),
    today: date = Depends(get_today),
    current_user: User = Depends(get_current_user)
):
    """Submit an answer; a correct one completes the task and updates points and streak"""
    return SubmissionService(db, ai_service).submit(task_id, current_user.id, body.answer, today)


@router.get("/{task_id}/submissions", response_model=List[SubmissionWithSubmitter])
def get_task_submissions(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return SubmissionService(db).get_task_submissions(task_id, current_user)
