"""
archdecide core module.

Exports the fundamental components shared by the decision core,
the AI client and the CLI.
"""

# Configuration
from archdecide.core.secure_config import Settings, ConfigValidator, DEFAULT_DECISIONS_DIR

# Exceptions
from archdecide.core.exceptions import (
    ArchDecideError,
    ConfigurationError,
    ValidationError,
    DecisionValidationError,
    NotFoundError,
    ExternalServiceError,
    AiClientError,
    TransportError,
)

# Logging
from archdecide.core.logging import (
    AsyncLogger,
    SensitiveDataMasker,
    PerformanceLogger,
    logger,  # Pre-configured global logger
)

# ID generator
from archdecide.core.id_generator import generate_id, is_valid_id

__all__ = [
    # Configuration
    "Settings",
    "ConfigValidator",
    "DEFAULT_DECISIONS_DIR",
    # Exceptions
    "ArchDecideError",
    "ConfigurationError",
    "ValidationError",
    "DecisionValidationError",
    "NotFoundError",
    "ExternalServiceError",
    "AiClientError",
    "TransportError",
    # Logging
    "AsyncLogger",
    "SensitiveDataMasker",
    "PerformanceLogger",
    "logger",
    # IDs
    "generate_id",
    "is_valid_id",
]
