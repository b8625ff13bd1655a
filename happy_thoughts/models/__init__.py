"""SQLAlchemy models package."""

from happy_thoughts.models.thought import MESSAGE_MAX_LENGTH, MESSAGE_MIN_LENGTH, Thought
from happy_thoughts.models.user import User

__all__ = [
    "MESSAGE_MAX_LENGTH",
    "MESSAGE_MIN_LENGTH",
    "Thought",
    "User",
]
