"""User administration (Admin only)."""
import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pharmacy.api.deps import get_db
from pharmacy.core.exceptions import ConflictError, InvalidRequestError, NotFoundError
from pharmacy.core.permissions import admin_only
from pharmacy.core.security import get_password_hash
from pharmacy.models.user import User
from pharmacy.schemas.user import UserCreate, UserResponse, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError(f"User {user_id} not found")
    return user


@router.get("", response_model=List[UserResponse])
def list_users(db: Session = Depends(get_db), current_user: User = Depends(admin_only)):
    return db.query(User).order_by(User.id).all()


@router.post("", response_model=UserResponse, status_code=201)
def create_user(data: UserCreate, db: Session = Depends(get_db), current_user: User = Depends(admin_only)):
    if db.query(User).filter(User.email == data.email).first():
        raise ConflictError("User already exists")

    user = User(
        name=data.name.strip(),
        email=data.email,
        role=data.role.value,
        hashed_password=get_password_hash(data.password),
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.email} ({user.role}) created by {current_user.email}")
    return user


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    user = _get_user(db, user_id)

    if data.email is not None and data.email != user.email:
        if db.query(User).filter(User.email == data.email).first():
            raise ConflictError("User already exists")
        user.email = data.email
    if data.name is not None:
        user.name = data.name.strip()
    if data.role is not None:
        if user.id == current_user.id and data.role.value != user.role:
            raise InvalidRequestError("You cannot change your own role")
        user.role = data.role.value
    if data.password is not None:
        user.hashed_password = get_password_hash(data.password)

    db.commit()
    db.refresh(user)
    logger.info(f"User {user.id} updated by {current_user.email}")
    return user


@router.put("/{user_id}/status", response_model=UserResponse)
def toggle_user_status(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(admin_only)):
    """Flip active/disabled. Disabled users cannot log in or use existing tokens."""
    user = _get_user(db, user_id)
    if user.id == current_user.id:
        raise InvalidRequestError("You cannot disable your own account")
    user.is_active = not user.is_active
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.email} {'enabled' if user.is_active else 'disabled'} by {current_user.email}")
    return user


@router.delete("/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(admin_only)):
    user = _get_user(db, user_id)
    if user.id == current_user.id:
        raise InvalidRequestError("You cannot delete your own account")
    email = user.email
    db.delete(user)
    db.commit()
    logger.info(f"User {email} deleted by {current_user.email}")
    return {"message": f"Deleted {email}", "id": user_id}
