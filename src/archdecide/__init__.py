"""
archdecide - Explain architecture decisions from recorded decision files.

Decisions are YAML files kept next to the code; questions are answered
only from what they record, optionally summarized by an AI model.
"""

from archdecide._version import __version__, __version_info__

__author__ = "archdecide contributors"
__license__ = "MIT"

# Core components
from archdecide.core import (
    logger,
    Settings,
    ArchDecideError,
    ConfigurationError,
    ValidationError,
    DecisionValidationError,
    NotFoundError,
    AiClientError,
    TransportError,
)

# Models
from archdecide.models import (
    Decision,
    DecisionId,
    DecisionStatus,
    Scope,
    ScopeType,
    Explanation,
)

# Decision sources and lookup
from archdecide.decisions import (
    DecisionFactory,
    YamlDecisionLoader,
    IndexedDecisionRepository,
    DecisionLinter,
)

# Explain flow
from archdecide.explain import DecisionMatcher, ExplainService, AiClientExplainer

# AI client
from archdecide.ai import AiClientConfig, OpenAiChatCompletionsClient, ai_client_from_environment

__all__ = [
    # Version info
    "__version__",
    "__version_info__",
    "__author__",
    "__license__",
    # Core
    "logger",
    "Settings",
    # Exceptions
    "ArchDecideError",
    "ConfigurationError",
    "ValidationError",
    "DecisionValidationError",
    "NotFoundError",
    "AiClientError",
    "TransportError",
    # Models
    "Decision",
    "DecisionId",
    "DecisionStatus",
    "Scope",
    "ScopeType",
    "Explanation",
    # Decisions
    "DecisionFactory",
    "YamlDecisionLoader",
    "IndexedDecisionRepository",
    "DecisionLinter",
    # Explain
    "DecisionMatcher",
    "ExplainService",
    "AiClientExplainer",
    # AI
    "AiClientConfig",
    "OpenAiChatCompletionsClient",
    "ai_client_from_environment",
]


def get_config():
    """
    Get the current archdecide configuration.

    Example:
        >>> config = get_config()
        >>> print(config.get("decisions.dir"))
        '.decisions'

    Returns:
        Settings: Configuration instance
    """
    return Settings()


def explain_question(question: str, path=None, directory=None) -> Explanation:
    """
    Plain-text explanation for ``question`` from a decisions directory.

    Example:
        >>> print(explain_question("Why no ORMs?").message)
        - [DEC-0001] No ORMs
         Use raw SQL

    Returns:
        Explanation: matched decisions and the rendered message
    """
    loader = YamlDecisionLoader(directory or get_config().decisions_dir)
    return ExplainService(IndexedDecisionRepository(loader)).explain(question, path)
