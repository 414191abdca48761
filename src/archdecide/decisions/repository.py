"""
Read-only, in-memory index over a batch of decisions.

The index is built once from a decision source and never written to
afterwards, so it can be shared freely between queries.
"""

from typing import Dict, Iterable, List, Optional, Protocol, Union, runtime_checkable

from archdecide.core.logging import logger
from archdecide.decisions.loader import DecisionLoader
from archdecide.models.decision import Decision, DecisionId


@runtime_checkable
class DecisionRepository(Protocol):
    """Read API over recorded decisions."""

    def all(self) -> List[Decision]:
        ...  # pragma: no cover

    def active(self) -> List[Decision]:
        ...  # pragma: no cover

    def find_by_id(self, decision_id: Union[DecisionId, str]) -> Optional[Decision]:
        ...  # pragma: no cover

    def applicable_to(self, path: str) -> List[Decision]:
        ...  # pragma: no cover

    def search_by_keyword(self, keyword: str) -> List[Decision]:
        ...  # pragma: no cover


@runtime_checkable
class SearchIndexedDecisionRepository(Protocol):
    """
    Optional capability: a repository that precomputes lower-cased search text.

    Matchers check for it with ``isinstance`` and fall back to computing the
    text themselves when a repository does not offer it.
    """

    def haystack_lower_for(self, decision: Decision) -> str:
        ...  # pragma: no cover


class IndexedDecisionRepository:
    """
    Decision repository backed by a precomputed search index.

    Duplicate ids: the id lookup keeps the last decision loaded with that
    id, while all() keeps every loaded decision in load order. Reporting
    duplicates is left to the lint command.
    """

    def __init__(self, source: Union[DecisionLoader, Iterable[Decision]]):
        decisions = source.load() if isinstance(source, DecisionLoader) else source

        self._by_id: Dict[str, Decision] = {}
        self._all: List[Decision] = []
        self._active: List[Decision] = []
        # Keyed by object identity: duplicates with equal ids keep their own text
        self._haystacks: Dict[int, str] = {}

        for decision in decisions:
            self._by_id[decision.id.value] = decision
            self._all.append(decision)
            if decision.is_active:
                self._active.append(decision)
            self._haystacks[id(decision)] = decision.to_search_text().lower()

        logger.debug(
            "Decision repository built", decisions=len(self._all), active=len(self._active)
        )

    def all(self) -> List[Decision]:
        return list(self._all)

    def active(self) -> List[Decision]:
        return list(self._active)

    def find_by_id(self, decision_id: Union[DecisionId, str]) -> Optional[Decision]:
        key = decision_id.value if isinstance(decision_id, DecisionId) else decision_id
        return self._by_id.get(key)

    def applicable_to(self, path: str) -> List[Decision]:
        return [decision for decision in self._active if decision.scope.applies_to(path)]

    def search_by_keyword(self, keyword: str) -> List[Decision]:
        """Case-insensitive substring search over every decision, active or not."""
        needle = keyword.lower()
        return [decision for decision in self._all if needle in self.haystack_lower_for(decision)]

    def haystack_lower_for(self, decision: Decision) -> str:
        haystack = self._haystacks.get(id(decision))
        if haystack is None:
            return decision.to_search_text().lower()
        return haystack

    def __len__(self) -> int:
        return len(self._all)
