"""Base model for comment entities."""

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Base class for comments, drafts and threads.

    Instances are frozen; changes go through ``model_copy(update=...)``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)
