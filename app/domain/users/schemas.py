"""User domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from ...models import User
from ...services.presence_service import format_last_seen
from ...shared.validators import validate_email, validate_phone

MIN_PASSWORD_LENGTH = 6


def _check_password(v: Optional[str]) -> Optional[str]:
    if v is not None and len(v) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return v


def _check_gender(v: Optional[str]) -> Optional[str]:
    if v is not None and v not in User.GENDERS:
        raise ValueError(f"Gender must be one of: {', '.join(User.GENDERS)}")
    return v


class UserRegister(BaseModel):
    """Schema for registering a new account"""

    email: str
    password: str
    name: Optional[str] = None
    surname: Optional[str] = None
    patronymic: Optional[str] = None
    bio: Optional[str] = None
    gender: Optional[str] = None
    phone1: Optional[str] = None
    phone2: Optional[str] = None
    remotely: Optional[bool] = None
    role: Optional[Literal["client", "master"]] = None

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v):
        return validate_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return _check_password(v)

    @field_validator("gender")
    @classmethod
    def validate_gender(cls, v):
        return _check_gender(v)

    @field_validator("phone1", "phone2")
    @classmethod
    def validate_phones(cls, v):
        if v:
            return validate_phone(v)
        return v


class UserUpdate(BaseModel):
    """Schema for updating the current user's profile"""

    name: Optional[str] = None
    surname: Optional[str] = None
    patronymic: Optional[str] = None
    bio: Optional[str] = None
    gender: Optional[str] = None
    phone1: Optional[str] = None
    phone2: Optional[str] = None
    remotely: Optional[bool] = None
    image: Optional[str] = None
    password: Optional[str] = None

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return _check_password(v)

    @field_validator("gender")
    @classmethod
    def validate_gender(cls, v):
        return _check_gender(v)

    @field_validator("phone1", "phone2")
    @classmethod
    def validate_phones(cls, v):
        if v:
            return validate_phone(v)
        return v


class UserResponse(BaseModel):
    id: int
    email: str
    name: Optional[str]
    surname: Optional[str]
    patronymic: Optional[str]
    bio: Optional[str]
    gender: Optional[str]
    image: Optional[str]
    phone1: Optional[str]
    phone2: Optional[str]
    remotely: Optional[bool]
    rating: Optional[float]
    roles: list[str]
    active: bool
    approved: bool
    isOnline: bool
    lastSeen: Optional[str]
    createdAt: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            surname=user.surname,
            patronymic=user.patronymic,
            bio=user.bio,
            gender=user.gender,
            image=user.image,
            phone1=user.phone1,
            phone2=user.phone2,
            remotely=user.remotely,
            rating=user.rating,
            roles=user.get_roles(),
            active=user.active,
            approved=user.approved,
            isOnline=user.is_online,
            lastSeen=format_last_seen(user),
            createdAt=user.created_at,
        )


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    token: str


class ConfirmAccountRequest(BaseModel):
    token: Optional[str] = None


class ConfirmAccountResponse(BaseModel):
    success: bool
    redirectUrl: str


class GrantRoleRequest(BaseModel):
    role: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


class PresenceResponse(BaseModel):
    ok: bool = True
