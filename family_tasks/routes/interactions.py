"""
Interaction HTTP routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from family_tasks.auth import get_current_user, get_admin
from family_tasks.database import get_db
from family_tasks.dependencies import get_ai_service
from family_tasks.models import User
from family_tasks.services.ai_service import AIService
from family_tasks.services.interaction_service import InteractionService
from family_tasks.schemas import InteractionCreate, InteractionCreatedResponse, InteractionApproval

router = APIRouter(prefix="/api/interactions", tags=["interactions"])


@router.post("", response_model=InteractionCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_interaction(
    body: InteractionCreate,
    db: Session = Depends(get_db),
    ai_service: AIService = Depends(get_ai_service),
    current_user: User = Depends(get_current_user)
):
    """Like or dislike another member; the giver is always the current user"""
    return InteractionService(db, ai_service).create_interaction(
        current_user.id, body.receiver_id, body.type, body.reason
    )


@router.post("/{interaction_id}/approve", response_model=InteractionApproval)
def approve_interaction(
    interaction_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_admin)
):
    return InteractionService(db).approve_interaction(interaction_id)
