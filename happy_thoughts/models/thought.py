"""Thought model."""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from happy_thoughts.database import Base
from happy_thoughts.models.base import UUIDMixin

MESSAGE_MIN_LENGTH = 5
MESSAGE_MAX_LENGTH = 140


class Thought(UUIDMixin, Base):
    """A short message with a like counter.

    ``created_by`` is a weak reference to the author: it decides who may edit
    or delete the thought, but deleting the user does not delete the thought.
    """

    __tablename__ = "thoughts"
    __table_args__ = (CheckConstraint("hearts >= 0", name="ck_thoughts_hearts_non_negative"),)

    message: Mapped[str] = mapped_column(String(MESSAGE_MAX_LENGTH), nullable=False)
    hearts: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        index=True,
    )
    created_by: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
