"""
Question to decision matching.

Deliberately crude: a decision is relevant when any meaningful word of the
question appears in its text. No ranking, no stemming.
"""

import re
from typing import List

from archdecide.decisions.repository import DecisionRepository, SearchIndexedDecisionRepository
from archdecide.models.decision import Decision

MIN_TOKEN_LENGTH = 3

# Anything but letters, digits and whitespace becomes a separator
_NON_WORD = re.compile(r"[^\w\s]|_")


def tokenize(question: str) -> List[str]:
    """Lower-cased words of at least 3 characters, deduplicated in first-seen order."""
    cleaned = _NON_WORD.sub(" ", question.lower())

    tokens: List[str] = []
    for token in cleaned.split():
        if len(token) >= MIN_TOKEN_LENGTH and token not in tokens:
            tokens.append(token)
    return tokens


class DecisionMatcher:
    """Finds the active decisions a question is about."""

    def __init__(self, repository: DecisionRepository):
        self.repository = repository

    def match(self, question: str) -> List[Decision]:
        """Active decisions whose text contains any question token, in repository order."""
        tokens = tokenize(question)
        if not tokens:
            return []

        return [
            decision
            for decision in self.repository.active()
            if any(token in self._haystack(decision) for token in tokens)
        ]

    def _haystack(self, decision: Decision) -> str:
        if isinstance(self.repository, SearchIndexedDecisionRepository):
            return self.repository.haystack_lower_for(decision)
        return decision.to_search_text().lower()
