"""Auth: login, logout, current user.

- Passwords checked with bcrypt
- Token returned in the body for the SPA and set as httpOnly cookie
- Generic error for wrong email or password (no user enumeration)
"""
import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from pharmacy.api.deps import get_current_user, get_db
from pharmacy.core.config import settings
from pharmacy.core.exceptions import BusinessError
from pharmacy.core.security import create_access_token, verify_password
from pharmacy.models.user import User
from pharmacy.schemas.user import LoginResponse, UserLogin, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(data: UserLogin, response: Response, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == data.email).first()
    if not user or not verify_password(data.password, user.hashed_password):
        raise BusinessError.unauthorized(f"bad credentials for {data.email}", detail="Invalid credentials")
    if not user.is_active:
        raise BusinessError.unauthorized(
            f"disabled user {user.email} tried to log in",
            detail="User is disabled. Contact admin.",
        )

    token = create_access_token(subject=user.email, role=user.role)
    response.set_cookie(
        key=settings.TOKEN_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        secure=settings.SECURE_COOKIES,
        httponly=True,
        samesite="strict",
    )
    logger.info(f"User {user.email} logged in as {user.role}")
    return LoginResponse(token=token, role=user.role, email=user.email)


@router.post("/logout")
def logout(response: Response, current_user: User = Depends(get_current_user)):
    response.delete_cookie(
        key=settings.TOKEN_COOKIE_NAME,
        secure=settings.SECURE_COOKIES,
        httponly=True,
        samesite="strict",
    )
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user."""
    return current_user
