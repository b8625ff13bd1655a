"""Pydantic schemas for thoughts."""

from datetime import UTC, datetime
from typing import Annotated
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field, StringConstraints, field_serializer, field_validator

from happy_thoughts.models.thought import MESSAGE_MAX_LENGTH, MESSAGE_MIN_LENGTH
from happy_thoughts.schemas.base import BaseResponse

Message = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=MESSAGE_MIN_LENGTH, max_length=MESSAGE_MAX_LENGTH),
]


class ThoughtBase(BaseModel):
    """Base thought schema."""

    message: Message

    @field_validator("message")
    @classmethod
    def message_is_printable(cls, value: str) -> str:
        if not value.isprintable():
            raise ValueError("Message must contain only printable characters")
        return value


class ThoughtCreate(ThoughtBase):
    """Schema for posting a thought."""

    pass


class ThoughtUpdate(ThoughtBase):
    """Schema for editing a thought's message."""

    pass


class ThoughtResponse(BaseResponse):
    """Schema for thought response."""

    id: UUID
    message: str
    hearts: int
    created_at: datetime = Field(
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt",
    )
    created_by: UUID | None = Field(
        default=None,
        validation_alias=AliasChoices("created_by", "createdBy"),
        serialization_alias="createdBy",
    )

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> datetime:
        # SQLite hands back naive datetimes; stored values are always UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)


class ThoughtDeleteResponse(BaseModel):
    """Schema for delete confirmation."""

    success: bool = True
    id: UUID
