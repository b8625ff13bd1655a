"""Pydantic schemas for authentication."""

from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from happy_thoughts.schemas.base import BaseResponse, normalize_email
from happy_thoughts.security import BCRYPT_MAX_PASSWORD_BYTES

PASSWORD_MIN_LENGTH = 6


class SignupRequest(BaseModel):
    """Schema for user signup."""

    email: EmailStr
    password: Annotated[str, Field(min_length=PASSWORD_MIN_LENGTH, max_length=128)]

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, value: object) -> object:
        return normalize_email(value)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes")
        return value


class LoginRequest(BaseModel):
    """Schema for user login.

    Neither field is format- or length-checked, so a malformed address or an
    empty password fails the same way an unknown account does.
    """

    email: str
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, value: object) -> object:
        return normalize_email(value)


class SignupResponse(BaseResponse):
    """Public view of a newly created user. Never carries the password hash."""

    email: str
    id: UUID


class LoginResponse(BaseResponse):
    """Schema for login response - returns user info and JWT token."""

    id: UUID
    email: str
    token: str
