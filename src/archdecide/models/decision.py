"""
Model for recorded architecture decisions.

A decision file describes one choice the team made (what, why, where it
applies, what the alternatives were) and is the only source of truth the
explain command is allowed to use.
"""

import re
import datetime
from enum import Enum
from fnmatch import fnmatchcase
from typing import Any, Optional, Tuple

from pydantic import Field, field_validator, model_validator

from archdecide.core.exceptions import DecisionValidationError
from archdecide.models.base import ArchDecideBaseModel

DECISION_ID_PATTERN = re.compile(r"DEC-[0-9]{4}")


class DecisionStatus(str, Enum):
    """Lifecycle status of a decision."""

    ACTIVE = "active"
    DEPRECATED = "deprecated"
    SUPERSEDED = "superseded"


class ScopeType(str, Enum):
    """Where a decision applies."""

    GLOBAL = "global"  # Whole codebase
    PATH = "path"  # Files matching the glob patterns
    MODULE = "module"  # Module directories matching the glob patterns


def _non_empty_items(values: Tuple[str, ...]) -> Tuple[str, ...]:
    for value in values:
        if not value.strip():
            raise ValueError("entries must be non-empty strings")
    return values


class DecisionId(ArchDecideBaseModel):
    """
    Decision identifier: ``DEC-`` followed by exactly 4 digits.

    Equality is by value. A plain string is accepted wherever a
    DecisionId is expected and validated the same way.
    """

    value: str

    @model_validator(mode="before")
    @classmethod
    def _from_plain_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"value": data}
        return data

    @field_validator("value", mode="before")
    @classmethod
    def validate_format(cls, v: Any) -> Any:
        if not isinstance(v, str) or not DECISION_ID_PATTERN.fullmatch(v):
            raise ValueError("Invalid Decision ID format.")
        return v

    @classmethod
    def from_string(cls, value: str) -> "DecisionId":
        """Build an id, raising DecisionValidationError on a malformed value."""
        if not isinstance(value, str) or not DECISION_ID_PATTERN.fullmatch(value):
            raise DecisionValidationError(
                f"Invalid Decision ID format: {value!r}", context={"field": "id"}
            )
        return cls(value=value)

    def equals(self, other: "DecisionId") -> bool:
        return self.value == other.value

    def __str__(self) -> str:
        return self.value


class Scope(ArchDecideBaseModel):
    """
    Scope of a decision.

    Global scope matches every path. Path and module scopes match a path
    when it glob-matches at least one pattern (shell-style wildcards,
    case-sensitive, ``*`` may cross ``/``).
    """

    type: ScopeType
    paths: Tuple[str, ...] = ()

    def applies_to(self, path: str) -> bool:
        if self.type is ScopeType.GLOBAL:
            return True

        return any(fnmatchcase(path, pattern) for pattern in self.paths)

    @property
    def is_global(self) -> bool:
        return self.type is ScopeType.GLOBAL


class DecisionContent(ArchDecideBaseModel):
    """What was decided and why."""

    summary: str = Field(..., min_length=1, description="One-line statement of the decision")
    rationale: Tuple[str, ...] = Field(..., description="Reasons, in recorded order")
    alternatives: Tuple[str, ...] = Field(default=(), description="Options that were rejected")

    @field_validator("rationale")
    @classmethod
    def validate_rationale(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        return _non_empty_items(v)


class Examples(ArchDecideBaseModel):
    """Code snippets illustrating what the decision allows or forbids."""

    allowed: Tuple[str, ...] = ()
    forbidden: Tuple[str, ...] = ()


class Rules(ArchDecideBaseModel):
    """Machine-checkable rules attached to a decision."""

    forbid: Tuple[str, ...] = ()
    allow: Tuple[str, ...] = ()

    def has_rules(self) -> bool:
        return bool(self.forbid) or bool(self.allow)


class References(ArchDecideBaseModel):
    """Links to the issues, commits and ADR documents behind a decision."""

    issues: Tuple[str, ...] = ()
    commits: Tuple[str, ...] = ()
    adr: Optional[str] = None


class AiMetadata(ArchDecideBaseModel):
    """Hints for the AI summarizer and extra search keywords."""

    explain_style: str = Field(..., min_length=1)
    keywords: Tuple[str, ...] = ()


class Decision(ArchDecideBaseModel):
    """
    A recorded architecture decision.

    Immutable aggregate; optional parts (rules, AI metadata, references)
    are None when the decision file does not define them.
    """

    id: DecisionId
    title: str = Field(..., min_length=1)
    status: DecisionStatus
    date: datetime.date
    scope: Scope
    content: DecisionContent
    examples: Examples = Field(default_factory=Examples)
    rules: Optional[Rules] = None
    ai_metadata: Optional[AiMetadata] = None
    references: Optional[References] = None

    @property
    def is_active(self) -> bool:
        return self.status is DecisionStatus.ACTIVE

    def to_search_text(self) -> str:
        """
        Text searched by keyword lookup and question matching.

        STANDARD INTERFACE: title, summary, rationale and AI keywords joined
        by single spaces, in that order. Not lower-cased.
        """
        keywords = self.ai_metadata.keywords if self.ai_metadata else ()
        return " ".join(
            [
                self.title,
                self.content.summary,
                " ".join(self.content.rationale),
                " ".join(keywords),
            ]
        )
