"""User model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from happy_thoughts.database import Base
from happy_thoughts.models.base import TimestampMixin, UUIDMixin


class User(UUIDMixin, TimestampMixin, Base):
    """Account that can post, edit and delete thoughts.

    ``hashed_password`` only ever holds a bcrypt hash.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
