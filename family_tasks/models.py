from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Date, Text, JSON,
    ForeignKey, UniqueConstraint
)
from datetime import datetime

from family_tasks.database import Base
from family_tasks.constants import (
    TASK_STATUS_PENDING, DEFAULT_TASK_POINTS, DEFAULT_TASK_GOAL,
    DEFAULT_GENERATION_DAYS, DEFAULT_NUMBER_OF_SESSIONS, DEFAULT_PROBLEMS_PER_SESSION
)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, nullable=False, unique=True, index=True)
    password = Column(String, nullable=False)  # pbkdf2_sha256 hash, never plain text
    email = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    profile_picture = Column(String, nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False)

    # Accounting
    points = Column(Integer, nullable=False, default=0)  # Signed, may go negative
    streak = Column(Integer, nullable=False, default=0)
    last_streak = Column(Date, nullable=True)  # Day of the last streak-qualifying completion

    created_at = Column(DateTime, nullable=False, default=datetime.now)


class DailyCompletion(Base):
    __tablename__ = "user_daily_completions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    completion_date = Column(Date, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    __table_args__ = (
        UniqueConstraint("user_id", "completion_date", name="uq_user_daily_completion"),
    )


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String, nullable=False, default="General")
    goal = Column(Text, nullable=True, default=DEFAULT_TASK_GOAL)
    due_date = Column(Date, nullable=False, index=True)

    completed = Column(Boolean, nullable=False, default=False)
    attempts = Column(Integer, nullable=False, default=0)
    completed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    completed_by_name = Column(String, nullable=True)

    task_points = Column(Integer, nullable=False, default=DEFAULT_TASK_POINTS)
    status = Column(String, nullable=False, default=TASK_STATUS_PENDING)  # pending, completed, missed
    penalty_applied = Column(Boolean, nullable=False, default=False)  # One-shot guard for the overdue sweep

    created_at = Column(DateTime, nullable=False, default=datetime.now)


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    answer = Column(Text, nullable=False)
    correct = Column(Boolean, nullable=False)
    ai_feedback = Column(Text, nullable=True)
    submitted_at = Column(DateTime, nullable=False, default=datetime.now)


class UserInteraction(Base):
    __tablename__ = "user_interactions"

    id = Column(Integer, primary_key=True, index=True)
    giver_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    receiver_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String, nullable=False)  # like, dislike
    reason = Column(Text, nullable=True)
    approved = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now, index=True)


class TaskGeneration(Base):
    __tablename__ = "task_generations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    days = Column(Integer, nullable=False, default=DEFAULT_GENERATION_DAYS)
    number_of_sessions = Column(Integer, nullable=False, default=DEFAULT_NUMBER_OF_SESSIONS)
    problems_per_session = Column(Integer, nullable=False, default=DEFAULT_PROBLEMS_PER_SESSION)
    goal = Column(Text, nullable=False)
    generated_tasks = Column(JSON, nullable=False)
    approved = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
