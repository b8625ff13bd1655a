"""Base schema classes."""

from pydantic import BaseModel, ConfigDict


class BaseResponse(BaseModel):
    """Base for all response schemas with from_attributes config."""

    model_config = ConfigDict(from_attributes=True)


def normalize_email(value: object) -> object:
    """Trim and lowercase an email before format validation."""
    if isinstance(value, str):
        return value.strip().lower()
    return value
