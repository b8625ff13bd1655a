"""Services package."""

from happy_thoughts.services.thoughts import (
    RECENT_THOUGHTS_LIMIT,
    ThoughtNotFoundError,
    ThoughtOwnershipError,
    ThoughtServiceError,
)
from happy_thoughts.services.users import EmailAlreadyRegisteredError, UserServiceError

__all__ = [
    "RECENT_THOUGHTS_LIMIT",
    "EmailAlreadyRegisteredError",
    "ThoughtNotFoundError",
    "ThoughtOwnershipError",
    "ThoughtServiceError",
    "UserServiceError",
]
