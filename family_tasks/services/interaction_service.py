"""
Interaction service.
Likes and dislikes between family members; each approved one moves the
receiver's points by two, exactly once.
"""
import logging
from datetime import datetime, timedelta
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from family_tasks.models import UserInteraction
from family_tasks.repositories.interaction_repository import InteractionRepository
from family_tasks.repositories.user_repository import UserRepository
from family_tasks.services.ai_service import AIService
from family_tasks.services.points_service import PointsService
from family_tasks.exceptions import (
    FamilyTasksException, UserNotFoundException, InteractionNotFoundException,
    SelfInteractionException, InteractionRateLimitException, DatabaseException
)
from family_tasks.constants import (
    INTERACTION_LIKE, INTERACTION_DISLIKE, INTERACTION_COOLDOWN_HOURS, MODERATE_INTERACTIONS
)

logger = logging.getLogger("family_tasks.interactions")


class InteractionService:
    """Service for likes and dislikes"""

    def __init__(self, db: Session, ai_service: Optional[AIService] = None,
                 moderate: bool = MODERATE_INTERACTIONS):
        self.db = db
        self.ai_service = ai_service
        self.moderate = moderate
        self.interaction_repo = InteractionRepository()
        self.user_repo = UserRepository()
        self.points_service = PointsService(db)

    def create_interaction(
        self,
        giver_id: int,
        receiver_id: int,
        interaction_type: str,
        reason: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> dict:
        """
        Create a like or dislike from giver to receiver.

        A giver may interact with the same receiver once per rolling
        24 hours. With moderation enabled, an interaction carrying a
        reason is checked by the AI collaborator first; rejected ones are
        stored unapproved and move no points.

        Raises:
            SelfInteractionException: giver and receiver are the same user
            UserNotFoundException: Unknown receiver
            InteractionRateLimitException: Already interacted in the last 24 hours
        """
        if giver_id == receiver_id:
            raise SelfInteractionException()

        now = now or datetime.now()

        if not self.user_repo.get_by_id(self.db, receiver_id):
            raise UserNotFoundException(receiver_id)

        approved = True
        message = f"Successfully {interaction_type}d the user."
        if self.moderate and reason and self.ai_service is not None:
            verdict = self.ai_service.verify_interaction(interaction_type, reason)
            approved = verdict["approved"]
            message = verdict["message"]

        try:
            # Giver row lock serializes the rate-limit check
            if not self.user_repo.get_by_id_for_update(self.db, giver_id):
                raise UserNotFoundException(giver_id)

            since = now - timedelta(hours=INTERACTION_COOLDOWN_HOURS)
            if self.interaction_repo.get_recent(self.db, giver_id, receiver_id, since):
                raise InteractionRateLimitException(giver_id, receiver_id)

            interaction = self.interaction_repo.create(self.db, UserInteraction(
                giver_id=giver_id,
                receiver_id=receiver_id,
                type=interaction_type,
                reason=reason,
                approved=approved,
                created_at=now,
            ))
            if approved:
                self.points_service.add_points(
                    receiver_id, PointsService.interaction_delta(interaction_type)
                )

            self.db.commit()
        except FamilyTasksException:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Interaction {giver_id} -> {receiver_id} failed: {e}")
            raise DatabaseException("interaction", str(e))

        self.db.refresh(interaction)
        logger.info(
            f"User {giver_id} gave a {interaction_type} to user {receiver_id} "
            f"({'approved' if approved else 'rejected'})"
        )
        return {"interaction": interaction, "message": message}

    def approve_interaction(self, interaction_id: int) -> dict:
        """
        Approve a pending interaction, applying its point change.

        Approving an already approved interaction changes nothing.
        """
        try:
            interaction = self.interaction_repo.get_by_id_for_update(self.db, interaction_id)
            if not interaction:
                raise InteractionNotFoundException(interaction_id)

            if interaction.approved:
                self.db.rollback()
                return {"approved": True, "message": "Interaction was already approved"}

            interaction.approved = True
            self.db.flush()
            self.points_service.add_points(
                interaction.receiver_id, PointsService.interaction_delta(interaction.type)
            )
            self.db.commit()
        except FamilyTasksException:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Approving interaction {interaction_id} failed: {e}")
            raise DatabaseException("interaction approval", str(e))

        logger.info(f"Interaction {interaction_id} approved")
        return {"approved": True, "message": "Interaction approved"}

    def get_user_interactions(self, user_id: int) -> List[UserInteraction]:
        """Interactions received by a user, newest first"""
        if not self.user_repo.get_by_id(self.db, user_id):
            raise UserNotFoundException(user_id)
        return self.interaction_repo.get_for_receiver(self.db, user_id)

    def get_interaction_counts(self, user_id: int) -> dict:
        """Approved likes and dislikes received by a user"""
        counts = self.interaction_repo.count_approved_by_type(self.db, user_id)
        return {
            "likes": counts.get(INTERACTION_LIKE, 0),
            "dislikes": counts.get(INTERACTION_DISLIKE, 0),
        }
