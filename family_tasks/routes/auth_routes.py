"""
Session HTTP routes: register, login, logout and the current user.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from family_tasks.auth import (
    get_current_user, get_optional_user, set_session_cookie, clear_session_cookie
)
from family_tasks.database import get_db
from family_tasks.models import User
from family_tasks.services.user_service import UserService
from family_tasks.schemas import UserCreate, LoginRequest, UserResponse

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserCreate,
    response: Response,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    """Create an account. The first account is an admin and gets logged in."""
    user = UserService(db).register(user_data, current_user)
    if current_user is None:
        set_session_cookie(response, user)
    return user


@router.post("/login", response_model=UserResponse)
def login(credentials: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = UserService(db).authenticate(credentials.username, credentials.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password"
        )
    set_session_cookie(response, user)
    return user


@router.post("/logout")
def logout(response: Response):
    clear_session_cookie(response)
    return {"message": "Logged out"}


@router.get("/user", response_model=UserResponse)
def get_session_user(current_user: User = Depends(get_current_user)):
    return current_user
