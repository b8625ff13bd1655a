"""Authentication helpers for request-scoped user context.

``authenticate`` is a pure stage: it takes the raw Authorization header and a
token issuer and returns either an ``AuthContext`` or an ``AuthRejection``.
The FastAPI dependency at the bottom turns a rejection into a 401.
"""

from dataclasses import dataclass

from fastapi import Header, Request

from happy_thoughts.ids import UserId
from happy_thoughts.security import TokenError, TokenIssuer
from happy_thoughts.utils.exceptions import Unauthenticated

MISSING_TOKEN = "Missing token"
INVALID_TOKEN = "Invalid or expired token"


@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller once the bearer token has been verified."""

    user_id: UserId


@dataclass(frozen=True)
class AuthRejection:
    """Why a request could not be authenticated."""

    error: str
    details: str | None = None


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from ``Bearer <token>``, or None if the header is unusable."""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def authenticate(authorization: str | None, issuer: TokenIssuer) -> AuthContext | AuthRejection:
    token = extract_bearer_token(authorization)
    if token is None:
        return AuthRejection(MISSING_TOKEN)
    try:
        user_id = issuer.verify(token)
    except TokenError as exc:
        return AuthRejection(INVALID_TOKEN, str(exc))
    return AuthContext(user_id=user_id)


async def get_auth_context(
    request: Request,
    authorization: str | None = Header(default=None),
) -> AuthContext:
    """Resolve the authenticated caller or raise 401."""
    outcome = authenticate(authorization, request.app.state.token_issuer)
    if isinstance(outcome, AuthRejection):
        raise Unauthenticated(outcome.error, outcome.details)
    return outcome
