"""
Daily completion repository - Data access layer for DailyCompletion markers.
"""
from datetime import date, datetime
from sqlalchemy.orm import Session
from sqlalchemy import and_
from sqlalchemy.dialects import postgresql, sqlite

from family_tasks.models import DailyCompletion

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class DailyCompletionRepository:
    """Repository for DailyCompletion data access"""

    @staticmethod
    def exists(db: Session, user_id: int, day: date) -> bool:
        """Check whether a marker exists for (user_id, day)"""
        return db.query(DailyCompletion.id).filter(
            and_(
                DailyCompletion.user_id == user_id,
                DailyCompletion.completion_date == day
            )
        ).first() is not None

    @staticmethod
    def insert(db: Session, user_id: int, day: date) -> bool:
        """
        Insert a marker for (user_id, day).

        Returns True if this call created the marker, False if one already
        existed. Uses INSERT ... ON CONFLICT DO NOTHING where available so a
        concurrent insert for the same pair never raises.
        """
        insert = _UPSERT_DIALECTS.get(db.get_bind().dialect.name)
        if insert is None:
            if DailyCompletionRepository.exists(db, user_id, day):
                return False
            db.add(DailyCompletion(user_id=user_id, completion_date=day))
            db.flush()
            return True

        stmt = insert(DailyCompletion).values(
            user_id=user_id,
            completion_date=day,
            created_at=datetime.now()
        ).on_conflict_do_nothing(index_elements=["user_id", "completion_date"])
        result = db.execute(stmt)
        return result.rowcount == 1
