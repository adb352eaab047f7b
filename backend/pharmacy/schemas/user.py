from typing import Optional

from pydantic import EmailStr, field_validator

from pharmacy.core.config import settings
from pharmacy.models.user import Role
from pharmacy.schemas.base import CamelModel


def _check_password(v: str) -> str:
    if len(v) < settings.MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters")
    return v


class UserLogin(CamelModel):
    email: EmailStr
    password: str


class LoginResponse(CamelModel):
    token: str
    role: str
    email: str


class UserCreate(CamelModel):
    name: str
    email: EmailStr
    password: str
    role: Role = Role.PHARMACIST

    @field_validator("password")
    @classmethod
    def password_min_length(cls, v: str) -> str:
        return _check_password(v)


class UserUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    role: Optional[Role] = None
    password: Optional[str] = None

    @field_validator("password")
    @classmethod
    def password_min_length(cls, v: Optional[str]) -> Optional[str]:
        return _check_password(v) if v is not None else v


class UserResponse(CamelModel):
    id: int
    name: str
    email: str
    role: str
    is_active: bool
