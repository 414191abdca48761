"""
Explain flow: match a question to recorded decisions and describe them.
"""

from archdecide.explain.matcher import DecisionMatcher, tokenize
from archdecide.explain.explainer import AiClientExplainer, AiExplainer
from archdecide.explain.service import ExplainService

__all__ = [
    "DecisionMatcher",
    "tokenize",
    "AiClientExplainer",
    "AiExplainer",
    "ExplainService",
]
