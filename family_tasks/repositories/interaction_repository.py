"""
Interaction repository - Data access layer for like/dislike edges.
"""
from datetime import datetime
from typing import Dict, List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import and_, func

from family_tasks.models import UserInteraction


class InteractionRepository:
    """Repository for UserInteraction data access"""

    @staticmethod
    def get_by_id_for_update(db: Session, interaction_id: int) -> Optional[UserInteraction]:
        """Get interaction by ID holding a row lock"""
        return db.query(UserInteraction).filter(
            UserInteraction.id == interaction_id
        ).populate_existing().with_for_update().first()

    @staticmethod
    def get_recent(
        db: Session,
        giver_id: int,
        receiver_id: int,
        since: datetime
    ) -> Optional[UserInteraction]:
        """Get the newest interaction of giver→receiver created after `since`"""
        return db.query(UserInteraction).filter(
            and_(
                UserInteraction.giver_id == giver_id,
                UserInteraction.receiver_id == receiver_id,
                UserInteraction.created_at > since
            )
        ).order_by(UserInteraction.created_at.desc()).first()

    @staticmethod
    def get_for_receiver(db: Session, receiver_id: int) -> List[UserInteraction]:
        """Get all interactions received by a user, newest first"""
        return db.query(UserInteraction).filter(
            UserInteraction.receiver_id == receiver_id
        ).order_by(UserInteraction.created_at.desc()).all()

    @staticmethod
    def count_approved_by_type(db: Session, receiver_id: int) -> Dict[str, int]:
        """Count approved interactions received by a user, keyed by type"""
        rows = db.query(UserInteraction.type, func.count(UserInteraction.id)).filter(
            and_(
                UserInteraction.receiver_id == receiver_id,
                UserInteraction.approved == True
            )
        ).group_by(UserInteraction.type).all()
        return {interaction_type: count for interaction_type, count in rows}

    @staticmethod
    def create(db: Session, interaction: UserInteraction) -> UserInteraction:
        """Add a new interaction to the session"""
        db.add(interaction)
        db.flush()
        return interaction
