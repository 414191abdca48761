"""
Result of an explain query.
"""

from typing import Tuple
from pydantic import Field
from archdecide.models.base import ArchDecideBaseModel
from archdecide.models.decision import Decision

NO_DECISION_MESSAGE = "No recorded decision covers this topic."


class Explanation(ArchDecideBaseModel):
    """Matched decisions plus the text shown to the user."""

    decisions: Tuple[Decision, ...] = Field(default=())
    message: str

    @property
    def has_decisions(self) -> bool:
        return bool(self.decisions)
