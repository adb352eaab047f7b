"""Create all tables. Run on app startup.

Seeds one Admin account when the user table is empty. Without ADMIN_PASSWORD
a random password is generated and printed once; change it after first login.
"""
import secrets

from sqlalchemy.orm import Session

from pharmacy.core.config import settings
from pharmacy.core.security import get_password_hash
from pharmacy.db.base import Base
from pharmacy.db.session import SessionLocal, engine
from pharmacy.models import medicine, purchase, sale, user  # noqa: F401 - register models
from pharmacy.models.user import Role, User


def seed_admin(db: Session) -> str | None:
    """Create the default admin if no users exist. Returns the generated password, if any."""
    if db.query(User).count() > 0:
        return None

    password = settings.ADMIN_PASSWORD or secrets.token_urlsafe(16)
    db.add(User(
        name="System Admin",
        email=settings.ADMIN_EMAIL,
        hashed_password=get_password_hash(password),
        role=Role.ADMIN.value,
        is_active=True,
    ))
    db.commit()
    return None if settings.ADMIN_PASSWORD else password


def init_db():
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        generated = seed_admin(db)
        if generated:
            print("\n" + "=" * 70)
            print("DEFAULT ADMIN USER CREATED")
            print("=" * 70)
            print(f"Email:    {settings.ADMIN_EMAIL}")
            print(f"Password: {generated}")
            print("\nChange this password immediately after first login!")
            print("=" * 70 + "\n")
    finally:
        db.close()
