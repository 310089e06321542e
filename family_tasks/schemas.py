from pydantic import BaseModel, Field
from datetime import datetime, date
from typing import List, Literal, Optional

from family_tasks.constants import (
    DEFAULT_TASK_POINTS, DEFAULT_GENERATION_DAYS,
    DEFAULT_NUMBER_OF_SESSIONS, DEFAULT_PROBLEMS_PER_SESSION
)

InteractionType = Literal["like", "dislike"]


# User schemas
class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)
    email: Optional[str] = None
    bio: Optional[str] = None
    profile_picture: Optional[str] = None
    is_admin: bool = False

class LoginRequest(BaseModel):
    username: str
    password: str

class UserUpdate(BaseModel):
    email: Optional[str] = None
    bio: Optional[str] = None
    profile_picture: Optional[str] = None
    is_admin: Optional[bool] = None  # Only honoured for admins

class PasswordReset(BaseModel):
    new_password: str = Field(..., min_length=1)

class UserResponse(BaseModel):
    id: int
    username: str
    email: Optional[str] = None
    bio: Optional[str] = None
    profile_picture: Optional[str] = None
    is_admin: bool
    points: int
    streak: int
    last_streak: Optional[date] = None
    created_at: datetime

    class Config:
        from_attributes = True

class UserSummary(BaseModel):
    id: int
    username: str
    is_admin: bool
    points: int
    streak: int

    class Config:
        from_attributes = True

class LeaderboardEntry(BaseModel):
    id: int
    username: str
    points: int
    streak: int

    class Config:
        from_attributes = True

class AccountingState(BaseModel):
    """Points and streak of a user after an accounting event"""
    points: int
    streak: int
    last_streak: Optional[date] = None

    class Config:
        from_attributes = True


# Task schemas
class TaskCreate(BaseModel):
    user_id: int
    title: Optional[str] = Field(None, max_length=100)
    description: str = Field(..., min_length=1)
    category: Optional[str] = None
    goal: Optional[str] = None
    due_date: date
    # Zero and negative values are accepted as-is
    task_points: int = DEFAULT_TASK_POINTS

class TaskResponse(BaseModel):
    id: int
    user_id: int
    title: str
    description: str
    category: str
    goal: Optional[str] = None
    due_date: date
    completed: bool
    attempts: int
    completed_by: Optional[int] = None
    completed_by_name: Optional[str] = None
    task_points: int
    status: str
    penalty_applied: bool
    created_at: datetime

    class Config:
        from_attributes = True

class TaskEnhanceRequest(BaseModel):
    description: str = Field(..., min_length=1)

class EnhancedTask(BaseModel):
    title: str
    description: str
    category: str


# Submission schemas
class SubmissionCreate(BaseModel):
    answer: str = Field(..., min_length=1)

class SubmissionResponse(BaseModel):
    id: int
    task_id: int
    user_id: int
    answer: str
    correct: bool
    ai_feedback: Optional[str] = None
    submitted_at: datetime

    class Config:
        from_attributes = True

class SubmissionWithSubmitter(SubmissionResponse):
    submitter_name: Optional[str] = None
    can_edit: bool = False

class VerificationResult(BaseModel):
    correct: bool
    explanation: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    hint: Optional[str] = None

class SubmitResponse(BaseModel):
    submission: SubmissionResponse
    verification: VerificationResult
    task: TaskResponse
    user: AccountingState


# Overdue sweep
class OverdueSweepResponse(BaseModel):
    message: str
    user_id: int
    tasks_penalized: int
    points_deducted: int
    missed_task_ids: List[int]
    points: int


# Interaction schemas
class InteractionCreate(BaseModel):
    receiver_id: int
    type: InteractionType
    reason: Optional[str] = None

class InteractionResponse(BaseModel):
    id: int
    giver_id: int
    receiver_id: int
    type: str
    reason: Optional[str] = None
    approved: bool
    created_at: datetime

    class Config:
        from_attributes = True

class InteractionCreatedResponse(BaseModel):
    interaction: InteractionResponse
    message: str

class InteractionCounts(BaseModel):
    likes: int
    dislikes: int

class InteractionApproval(BaseModel):
    approved: bool
    message: str


# Task generation schemas
class TaskGenerationCreate(BaseModel):
    user_id: int
    days: int = Field(default=DEFAULT_GENERATION_DAYS, ge=1, le=365)
    number_of_sessions: int = Field(default=DEFAULT_NUMBER_OF_SESSIONS, ge=1, le=10)
    problems_per_session: int = Field(default=DEFAULT_PROBLEMS_PER_SESSION, ge=1, le=10)
    goal: str = Field(..., min_length=1)

class GeneratedTask(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    goal: str = Field(..., min_length=1)
    day_number: int = Field(..., ge=0)

class TaskGenerationResponse(BaseModel):
    tasks: List[GeneratedTask]
    generation_id: int

class TaskApproveRequest(BaseModel):
    generation_id: int
    user_id: Optional[int] = None  # Defaults to the generation's user
    tasks: Optional[List[GeneratedTask]] = None  # Edited tasks; defaults to the stored plan

class TaskApproveResponse(BaseModel):
    message: str
    created_task_ids: List[int]
