"""Shared pieces of the domain entities."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Base class for User and Account.

    Entities are frozen: services build changed copies with
    model_copy(update=...) and hand them to the repository.
    """

    model_config = ConfigDict(frozen=True)


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)
