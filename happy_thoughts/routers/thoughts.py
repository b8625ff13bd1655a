"""Thoughts API router."""

from fastapi import APIRouter, status
from sqlalchemy.exc import SQLAlchemyError

from happy_thoughts.deps import CurrentUser, DbSession
from happy_thoughts.ids import InvalidIdentifierError, ThoughtId, parse_thought_id
from happy_thoughts.logger import get_logger, log_exception
from happy_thoughts.schemas.thought import (
    ThoughtCreate,
    ThoughtDeleteResponse,
    ThoughtResponse,
    ThoughtUpdate,
)
from happy_thoughts.services import thoughts as thought_service
from happy_thoughts.utils.exceptions import (
    raise_forbidden,
    raise_malformed_id,
    raise_not_found,
    raise_store_error,
)

router = APIRouter(prefix="/thoughts", tags=["thoughts"])
logger = get_logger(__name__)


def _thought_id(raw: str) -> ThoughtId:
    try:
        return parse_thought_id(raw)
    except InvalidIdentifierError as exc:
        raise_malformed_id(str(exc), cause=exc)


@router.get("", response_model=list[ThoughtResponse])
async def list_thoughts(db: DbSession) -> list[ThoughtResponse]:
    """List the most recent thoughts, newest first."""
    try:
        thoughts = await thought_service.list_recent_thoughts(db)
    except SQLAlchemyError as exc:
        log_exception(logger, exc, "Failed to list thoughts")
        raise_store_error("Could not fetch thoughts", cause=exc)
    return [ThoughtResponse.model_validate(thought) for thought in thoughts]


@router.get("/{thought_id}", response_model=ThoughtResponse)
async def get_thought(thought_id: str, db: DbSession) -> ThoughtResponse:
    """Get a single thought."""
    parsed_id = _thought_id(thought_id)
    try:
        thought = await thought_service.get_thought(db, parsed_id)
    except thought_service.ThoughtNotFoundError as exc:
        logger.debug("Thought not found", thought_id=thought_id)
        raise_not_found("Thought", cause=exc)
    except SQLAlchemyError as exc:
        log_exception(logger, exc, "Failed to load thought", thought_id=thought_id)
        raise_store_error("Could not fetch thought", cause=exc)
    return ThoughtResponse.model_validate(thought)


@router.post("", response_model=ThoughtResponse, status_code=status.HTTP_201_CREATED)
async def create_thought(data: ThoughtCreate, db: DbSession, auth: CurrentUser) -> ThoughtResponse:
    """Post a new thought as the authenticated user."""
    try:
        thought = await thought_service.create_thought(db, auth.user_id, data.message)
    except SQLAlchemyError as exc:
        log_exception(logger, exc, "Failed to create thought", user_id=str(auth.user_id))
        raise_store_error("Could not create thought", cause=exc)

    logger.info("Thought created", thought_id=str(thought.id), user_id=str(auth.user_id))
    return ThoughtResponse.model_validate(thought)


@router.patch("/{thought_id}", response_model=ThoughtResponse)
async def update_thought(
    thought_id: str,
    data: ThoughtUpdate,
    db: DbSession,
    auth: CurrentUser,
) -> ThoughtResponse:
    """Edit the message of a thought the caller authored."""
    parsed_id = _thought_id(thought_id)
    try:
        thought = await thought_service.update_thought_message(db, auth.user_id, parsed_id, data.message)
    except thought_service.ThoughtNotFoundError as exc:
        raise_not_found("Thought", cause=exc)
    except thought_service.ThoughtOwnershipError as exc:
        logger.warning("Edit refused: not the author", thought_id=thought_id, user_id=str(auth.user_id))
        raise_forbidden("You can only edit your own thoughts", cause=exc)
    except SQLAlchemyError as exc:
        log_exception(logger, exc, "Failed to update thought", thought_id=thought_id)
        raise_store_error("Could not update thought", cause=exc)

    return ThoughtResponse.model_validate(thought)


@router.delete("/{thought_id}", response_model=ThoughtDeleteResponse)
async def delete_thought(thought_id: str, db: DbSession, auth: CurrentUser) -> ThoughtDeleteResponse:
    """Delete a thought the caller authored."""
    parsed_id = _thought_id(thought_id)
    try:
        await thought_service.delete_thought(db, auth.user_id, parsed_id)
    except thought_service.ThoughtNotFoundError as exc:
        raise_not_found("Thought", cause=exc)
    except thought_service.ThoughtOwnershipError as exc:
        logger.warning("Delete refused: not the author", thought_id=thought_id, user_id=str(auth.user_id))
        raise_forbidden("You can only delete your own thoughts", cause=exc)
    except SQLAlchemyError as exc:
        log_exception(logger, exc, "Failed to delete thought", thought_id=thought_id)
        raise_store_error("Could not delete thought", cause=exc)

    logger.info("Thought deleted", thought_id=thought_id, user_id=str(auth.user_id))
    return ThoughtDeleteResponse(id=parsed_id)


@router.post("/{thought_id}/like", response_model=ThoughtResponse)
async def like_thought(thought_id: str, db: DbSession) -> ThoughtResponse:
    """Add one heart to a thought."""
    parsed_id = _thought_id(thought_id)
    try:
        thought = await thought_service.like_thought(db, parsed_id)
    except thought_service.ThoughtNotFoundError as exc:
        raise_not_found("Thought", cause=exc)
    except SQLAlchemyError as exc:
        log_exception(logger, exc, "Failed to like thought", thought_id=thought_id)
        raise_store_error("Could not like thought", cause=exc)

    return ThoughtResponse.model_validate(thought)
