"""
archdecide models.
Exports the main models for use in other modules.
"""

# Base
from archdecide.models.base import ArchDecideBaseModel

# Decisions
from archdecide.models.decision import (
    DECISION_ID_PATTERN,
    DecisionId,
    DecisionStatus,
    ScopeType,
    Scope,
    DecisionContent,
    Examples,
    Rules,
    References,
    AiMetadata,
    Decision,
)

# Chat (OpenAI compatible)
from archdecide.models.chat import Role, Message, ChatCompletionRequest

# Explanations
from archdecide.models.explanation import NO_DECISION_MESSAGE, Explanation

__all__ = [
    "ArchDecideBaseModel",
    "DECISION_ID_PATTERN",
    "DecisionId",
    "DecisionStatus",
    "ScopeType",
    "Scope",
    "DecisionContent",
    "Examples",
    "Rules",
    "References",
    "AiMetadata",
    "Decision",
    "Role",
    "Message",
    "ChatCompletionRequest",
    "NO_DECISION_MESSAGE",
    "Explanation",
]
