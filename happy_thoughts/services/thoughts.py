"""Thought persistence and ownership rules."""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from happy_thoughts.ids import ThoughtId, UserId
from happy_thoughts.models import Thought

RECENT_THOUGHTS_LIMIT = 20


class ThoughtServiceError(Exception):
    """Base exception for thought service errors."""


class ThoughtNotFoundError(ThoughtServiceError):
    """Thought not found error."""


class ThoughtOwnershipError(ThoughtServiceError):
    """Caller is authenticated but did not author the thought."""


async def list_recent_thoughts(db: AsyncSession, limit: int = RECENT_THOUGHTS_LIMIT) -> list[Thought]:
    """Return at most ``limit`` thoughts, newest first."""
    limit = max(0, min(limit, RECENT_THOUGHTS_LIMIT))
    result = await db.execute(select(Thought).order_by(Thought.created_at.desc(), Thought.id.desc()).limit(limit))
    return list(result.scalars().all())


async def get_thought(db: AsyncSession, thought_id: ThoughtId) -> Thought:
    result = await db.execute(select(Thought).where(Thought.id == thought_id))
    thought = result.scalar_one_or_none()

    if not thought:
        raise ThoughtNotFoundError(f"Thought {thought_id} not found")

    return thought


async def create_thought(db: AsyncSession, author_id: UserId, message: str) -> Thought:
    thought = Thought(message=message, hearts=0, created_by=author_id)
    db.add(thought)
    await db.commit()
    await db.refresh(thought)
    return thought


def ensure_owner(thought: Thought, user_id: UserId) -> None:
    """Raise unless ``user_id`` authored ``thought``."""
    if thought.created_by is None or UserId(thought.created_by) != user_id:
        raise ThoughtOwnershipError(f"Thought {thought.id} belongs to another user")


async def update_thought_message(db: AsyncSession, user_id: UserId, thought_id: ThoughtId, message: str) -> Thought:
    """Replace the message of a thought the caller owns.

    Existence is checked before ownership, ownership before the write.
    """
    thought = await get_thought(db, thought_id)
    ensure_owner(thought, user_id)

    thought.message = message
    await db.commit()
    await db.refresh(thought)
    return thought


async def delete_thought(db: AsyncSession, user_id: UserId, thought_id: ThoughtId) -> None:
    thought = await get_thought(db, thought_id)
    ensure_owner(thought, user_id)

    await db.delete(thought)
    await db.commit()


async def like_thought(db: AsyncSession, thought_id: ThoughtId) -> Thought:
    """Increment ``hearts`` in the store and return the updated row.

    A single UPDATE ... RETURNING, so concurrent likes never overwrite each other.
    """
    stmt = (
        update(Thought)
        .where(Thought.id == thought_id)
        .values(hearts=Thought.hearts + 1)
        .returning(Thought)
        .execution_options(synchronize_session=False, populate_existing=True)
    )
    result = await db.execute(stmt)
    thought = result.scalar_one_or_none()
    if thought is None:
        await db.rollback()
        raise ThoughtNotFoundError(f"Thought {thought_id} not found")
    await db.commit()
    return thought
