"""User signup and credential checks."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from happy_thoughts.models import User
from happy_thoughts.security import PasswordHasher


class UserServiceError(Exception):
    """Base exception for user service errors."""


class EmailAlreadyRegisteredError(UserServiceError):
    """Signup email collides with an existing account."""


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, hasher: PasswordHasher, email: str, password: str) -> User:
    """Persist a new user with a hashed password.

    Raises:
        EmailAlreadyRegisteredError: if the unique email constraint rejects the row
    """
    if await get_user_by_email(db, email) is not None:
        raise EmailAlreadyRegisteredError("Duplicate key: email already exists")

    user = User(email=email, hashed_password=hasher.hash(password))
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as exc:
        # Race: another request created the same email between lookup and insert
        await db.rollback()
        raise EmailAlreadyRegisteredError("Duplicate key: email already exists") from exc
    await db.refresh(user)
    return user


async def authenticate_user(db: AsyncSession, hasher: PasswordHasher, email: str, password: str) -> User | None:
    """Return the user when ``password`` matches, otherwise None.

    Unknown emails still pay for one bcrypt verification.
    """
    user = await get_user_by_email(db, email)
    if user is None:
        hasher.verify_dummy(password)
        return None
    if not hasher.verify(password, user.hashed_password):
        return None
    return user
