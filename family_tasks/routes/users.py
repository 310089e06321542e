"""
User HTTP routes.
"""
from datetime import date
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from family_tasks.auth import get_current_user, get_admin
from family_tasks.database import get_db
from family_tasks.dependencies import get_today
from family_tasks.models import User
from family_tasks.services.user_service import UserService
from family_tasks.services.penalty_service import PenaltyService
from family_tasks.services.interaction_service import InteractionService
from family_tasks.schemas import (
    UserResponse, UserSummary, LeaderboardEntry, UserUpdate, PasswordReset,
    OverdueSweepResponse, InteractionResponse, InteractionCounts
)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=List[UserSummary])
def get_users(db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return UserService(db).get_users()


@router.get("/stats", response_model=List[LeaderboardEntry])
def get_leaderboard(db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    """Users ranked by points, then streak"""
    return UserService(db).get_leaderboard()


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return UserService(db).get_user(user_id)


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    update: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return UserService(db).update_user(user_id, update, current_user)


@router.post("/{user_id}/reset-password")
def reset_password(
    user_id: int,
    body: PasswordReset,
    db: Session = Depends(get_db),
    _: User = Depends(get_admin)
):
    UserService(db).reset_password(user_id, body.new_password)
    return {"message": "Password reset successfully"}


@router.post("/{user_id}/check-overdue", response_model=OverdueSweepResponse)
def check_user_overdue_tasks(
    user_id: int,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
    _: User = Depends(get_admin)
):
    """Run the overdue penalty sweep for any user"""
    return PenaltyService(db).check_overdue_tasks(user_id, today)


@router.get("/{user_id}/interactions", response_model=List[InteractionResponse])
def get_user_interactions(user_id: int, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return InteractionService(db).get_user_interactions(user_id)


@router.get("/{user_id}/interaction-counts", response_model=InteractionCounts)
def get_interaction_counts(user_id: int, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return InteractionService(db).get_interaction_counts(user_id)
