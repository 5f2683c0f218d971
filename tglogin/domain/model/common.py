"""Base model for domain entities."""

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Base class for domain models.

    Models are immutable snapshots; changes go through the repository and
    come back as new instances. Unknown fields are rejected so a store row
    cannot smuggle columns into the domain.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
