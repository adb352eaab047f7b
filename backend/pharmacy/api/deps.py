"""FastAPI dependencies: DB session and current user from JWT.

The token is read from:
1. Authorization header (SPA and API clients)
2. httpOnly cookie set at login
"""
from typing import Generator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from pharmacy.core.config import settings
from pharmacy.core.exceptions import BusinessError
from pharmacy.core.security import decode_access_token
from pharmacy.db.session import SessionLocal
from pharmacy.models.user import User

security = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_token_claims(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """Header takes precedence over cookie."""
    token = None
    if credentials:
        token = credentials.credentials
    elif settings.TOKEN_COOKIE_NAME in request.cookies:
        token = request.cookies[settings.TOKEN_COOKIE_NAME]

    if not token:
        raise BusinessError.unauthorized("no token", detail="Not authenticated")

    claims = decode_access_token(token)
    if not claims:
        raise BusinessError.unauthorized("bad token", detail="Invalid or expired token")
    return claims


def get_current_user(
    db: Session = Depends(get_db),
    claims: dict = Depends(get_token_claims),
) -> User:
    """Load the user named by the token; disabled accounts are rejected."""
    user = db.query(User).filter(User.email == claims["sub"]).first()
    if not user:
        raise BusinessError.unauthorized(f"token for unknown user {claims['sub']}")
    if not user.is_active:
        raise BusinessError.unauthorized(f"disabled user {user.email}", detail="User is disabled")
    return user
