"""
Decision sources, repository and lint.
"""

from archdecide.decisions.factory import DecisionFactory
from archdecide.decisions.collector import CollectedFiles, DecisionFileCollector
from archdecide.decisions.loader import DecisionLoader, YamlDecisionLoader, InMemoryDecisionLoader
from archdecide.decisions.repository import (
    DecisionRepository,
    SearchIndexedDecisionRepository,
    IndexedDecisionRepository,
)
from archdecide.decisions.lint import DecisionLinter, LintReport

__all__ = [
    "DecisionFactory",
    "CollectedFiles",
    "DecisionFileCollector",
    "DecisionLoader",
    "YamlDecisionLoader",
    "InMemoryDecisionLoader",
    "DecisionRepository",
    "SearchIndexedDecisionRepository",
    "IndexedDecisionRepository",
    "DecisionLinter",
    "LintReport",
]
