"""Base class for value objects."""

from pydantic import BaseModel, ConfigDict


class ValueObject(BaseModel):
    """Frozen value compared by its fields, like a rating aggregate."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)
