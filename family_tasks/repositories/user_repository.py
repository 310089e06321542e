"""
User repository - Data access layer for User model.

Write methods only flush; the calling service owns the transaction so that
several writes belonging to one accounting event commit together.
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from family_tasks.models import User


class UserRepository:
    """Repository for User data access"""

    @staticmethod
    def get_by_id(db: Session, user_id: int) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_by_id_for_update(db: Session, user_id: int) -> Optional[User]:
        """
        Get user by ID holding a row lock until the transaction ends.

        Serializes concurrent accounting events for the same user on backends
        that support SELECT ... FOR UPDATE (no-op on SQLite).
        """
        return db.query(User).filter(User.id == user_id).populate_existing().with_for_update().first()

    @staticmethod
    def get_by_username(db: Session, username: str) -> Optional[User]:
        """Get user by username"""
        return db.query(User).filter(User.username == username).first()

    @staticmethod
    def get_all(db: Session) -> List[User]:
        """Get all users"""
        return db.query(User).order_by(User.id).all()

    @staticmethod
    def get_leaderboard(db: Session) -> List[User]:
        """Get all users ordered by points, then streak"""
        return db.query(User).order_by(User.points.desc(), User.streak.desc(), User.id).all()

    @staticmethod
    def count(db: Session) -> int:
        """Count registered users"""
        return db.query(User).count()

    @staticmethod
    def create(db: Session, user: User) -> User:
        """Add a new user to the session"""
        db.add(user)
        db.flush()
        return user

    @staticmethod
    def update(db: Session, user: User, data: dict) -> User:
        """Apply a partial update to a user"""
        for field, value in data.items():
            setattr(user, field, value)
        db.flush()
        return user

    @staticmethod
    def add_points(db: Session, user_id: int, delta: int) -> int:
        """
        Atomically shift a user's points by delta.

        Issues UPDATE users SET points = points + :delta so concurrent
        requests never lose an update. Returns the number of rows matched.
        """
        return db.query(User).filter(User.id == user_id).update(
            {User.points: User.points + delta},
            synchronize_session=False
        )
