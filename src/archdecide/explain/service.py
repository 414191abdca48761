"""
Explain service: question (and optional path) in, Explanation out.
"""

from typing import List, Optional, Sequence

from archdecide.core.logging import logger
from archdecide.decisions.repository import DecisionRepository
from archdecide.explain.explainer import AiExplainer
from archdecide.explain.matcher import DecisionMatcher
from archdecide.models.decision import Decision
from archdecide.models.explanation import NO_DECISION_MESSAGE, Explanation


class ExplainService:
    """
    Answers questions from recorded decisions only.

    Flow:
    1. Match active decisions against the question text
    2. Keep those whose scope applies to ``path`` (when given)
    3. Let the AI explainer write the message, or render plain text

    Errors raised by the AI explainer propagate unchanged; falling back to
    plain text is the caller's call.
    """

    def __init__(
        self, repository: DecisionRepository, ai_explainer: Optional[AiExplainer] = None
    ):
        self.repository = repository
        self.ai_explainer = ai_explainer
        self.matcher = DecisionMatcher(repository)

    def explain(self, question: str, path: Optional[str] = None) -> Explanation:
        decisions = self.matcher.match(question)

        if path is not None:
            decisions = [decision for decision in decisions if decision.scope.applies_to(path)]

        logger.debug(
            "Decisions matched",
            matched=len(decisions),
            path=path,
            ai=self.ai_explainer is not None,
        )

        if not decisions:
            return Explanation(decisions=(), message=NO_DECISION_MESSAGE)

        if self.ai_explainer is not None:
            message = self.ai_explainer.explain(question, decisions)
        else:
            message = self.render_plain(decisions)

        return Explanation(decisions=tuple(decisions), message=message)

    @staticmethod
    def render_plain(decisions: Sequence[Decision]) -> str:
        """One "- [id] title" paragraph per decision with its summary on the next line."""
        paragraphs: List[str] = [
            f"- [{decision.id.value}] {decision.title}\n {decision.content.summary}"
            for decision in decisions
        ]
        return "\n\n".join(paragraphs)
