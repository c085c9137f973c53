"""Value object base."""

from pydantic import BaseModel, ConfigDict


class ValueObject(BaseModel):
    """Immutable data compared by its fields.

    Provider profiles cross the boundary between strategies and the
    identity service as value objects, so nothing downstream can change
    what a provider reported.
    """

    model_config = ConfigDict(frozen=True)
