"""Common FastAPI dependencies for consistent type annotations.

This module provides type aliases for frequently used FastAPI dependencies,
reducing boilerplate and ensuring consistency across routers.

Usage:
    from happy_thoughts.deps import CurrentUser, DbSession

    async def my_endpoint(db: DbSession, auth: CurrentUser):
        # db is AsyncSession with get_db dependency injected
        # auth is AuthContext with get_auth_context dependency injected
        ...
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from happy_thoughts.auth import AuthContext, get_auth_context
from happy_thoughts.config import Settings
from happy_thoughts.database import get_db
from happy_thoughts.security import PasswordHasher, TokenIssuer


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


DbSession = Annotated[AsyncSession, Depends(get_db)]
CurrentUser = Annotated[AuthContext, Depends(get_auth_context)]
AppSettings = Annotated[Settings, Depends(get_settings)]
Hasher = Annotated[PasswordHasher, Depends(get_password_hasher)]
Issuer = Annotated[TokenIssuer, Depends(get_token_issuer)]

__all__ = ["AppSettings", "CurrentUser", "DbSession", "Hasher", "Issuer"]
