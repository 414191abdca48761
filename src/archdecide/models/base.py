"""
Base model shared by every archdecide model.
"""

from pydantic import BaseModel, ConfigDict


class ArchDecideBaseModel(BaseModel):
    """
    Base model for all archdecide values.

    Decisions are built once from validated data and never mutated, so
    every model is frozen (and therefore hashable).
    """

    model_config = ConfigDict(
        # Immutable value objects
        frozen=True,
        # Prevent extra fields
        extra="forbid",
        # Better documentation
        json_schema_extra={"additionalProperties": False},
    )
