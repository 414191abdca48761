"""
Pluggable AI step of the explain flow.
"""

from typing import Protocol, Sequence, runtime_checkable

from archdecide.ai.client import AiClient
from archdecide.models.decision import Decision


@runtime_checkable
class AiExplainer(Protocol):
    """Writes the explanation text for already matched decisions."""

    def explain(self, question: str, decisions: Sequence[Decision]) -> str:
        ...  # pragma: no cover


class AiClientExplainer:
    """AiExplainer backed by an AI client."""

    def __init__(self, client: AiClient):
        self.client = client

    def explain(self, question: str, decisions: Sequence[Decision]) -> str:
        return self.client.explain_decision(question, decisions)
