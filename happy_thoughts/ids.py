"""Typed identifiers for users and thoughts.

Both id spaces are UUIDs in the store; wrapping them in distinct NewTypes keeps
an ownership check from comparing a thought id against a user id by accident.
"""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
ThoughtId = NewType("ThoughtId", UUID)


class InvalidIdentifierError(ValueError):
    """Raised when a raw value is not a well-formed identifier."""


def _parse_uuid(raw: str | UUID, kind: str) -> UUID:
    if isinstance(raw, UUID):
        return raw
    try:
        return UUID(str(raw).strip())
    except (ValueError, AttributeError, TypeError) as exc:
        raise InvalidIdentifierError(f"Invalid {kind} id: {raw!r}") from exc


def parse_user_id(raw: str | UUID) -> UserId:
    return UserId(_parse_uuid(raw, "user"))


def parse_thought_id(raw: str | UUID) -> ThoughtId:
    return ThoughtId(_parse_uuid(raw, "thought"))
