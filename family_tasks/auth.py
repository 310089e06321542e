from datetime import datetime, timedelta
from typing import Optional

from fastapi import Cookie, Depends, HTTPException, Request, Response, status
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from family_tasks.database import get_db
from family_tasks.models import User
from family_tasks.repositories.user_repository import UserRepository
from family_tasks.constants import (
    SECRET_KEY, SESSION_ALGORITHM, SESSION_COOKIE_NAME,
    SESSION_MAX_AGE_SECONDS, SECURE_COOKIES
)

# Salted PBKDF2-SHA256 hashes
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_session_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a session token for a user"""
    expire = datetime.utcnow() + (expires_delta or timedelta(seconds=SESSION_MAX_AGE_SECONDS))
    return jwt.encode({"sub": str(user_id), "exp": expire}, SECRET_KEY, algorithm=SESSION_ALGORITHM)


def decode_session_token(token: str) -> Optional[int]:
    """Return the user ID of a valid token, None otherwise"""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[SESSION_ALGORITHM])
        return int(payload["sub"])
    except (JWTError, KeyError, ValueError):
        return None


def set_session_cookie(response: Response, user: User) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=create_session_token(user.id),
        max_age=SESSION_MAX_AGE_SECONDS,
        httponly=True,
        secure=SECURE_COOKIES,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=SESSION_COOKIE_NAME)


def get_optional_user(
    request: Request,
    db: Session = Depends(get_db),
    session_token: Optional[str] = Cookie(None, alias=SESSION_COOKIE_NAME)
) -> Optional[User]:
    """Resolve the user of this request from the session cookie or a Bearer token, if any"""
    user_id = decode_session_token(session_token) if session_token else None
    if user_id is None:
        # A stale cookie must not shadow a valid Bearer token
        authorization = request.headers.get("Authorization", "")
        if authorization.startswith("Bearer "):
            user_id = decode_session_token(authorization[len("Bearer "):])

    return UserRepository.get_by_id(db, user_id) if user_id is not None else None


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """Require an authenticated user"""
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )
    return user


def get_admin(current_user: User = Depends(get_current_user)) -> User:
    """Require an authenticated admin"""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return current_user
