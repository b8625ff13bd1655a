"""Pydantic schemas package."""

from happy_thoughts.schemas.auth import LoginRequest, LoginResponse, SignupRequest, SignupResponse
from happy_thoughts.schemas.base import BaseResponse
from happy_thoughts.schemas.thought import (
    ThoughtCreate,
    ThoughtDeleteResponse,
    ThoughtResponse,
    ThoughtUpdate,
)

__all__ = [
    "BaseResponse",
    "LoginRequest",
    "LoginResponse",
    "SignupRequest",
    "SignupResponse",
    "ThoughtCreate",
    "ThoughtDeleteResponse",
    "ThoughtResponse",
    "ThoughtUpdate",
]
