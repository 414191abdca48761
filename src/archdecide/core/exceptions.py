"""
Unified exception hierarchy for archdecide.
Single source of the errors raised by the decision core and the AI client.
"""

from typing import Dict, Any, Optional, List
from datetime import datetime
from archdecide.core.id_generator import generate_id
from archdecide.core.utils.datetime_utils import utc_now, format_iso


class ArchDecideError(Exception):
    """
    Base error for archdecide.

    Features:
    1. Structured serialization
    2. Rich context (field, file, HTTP status, decision id)
    3. Resolution suggestions
    4. Unique ID for tracking in debug.log
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        self.id: str = generate_id()
        self.timestamp: datetime = utc_now()
        self.message: str = message
        self.code: str = code or self.__class__.__name__
        self.context: Dict[str, Any] = context or {}
        self.cause: Optional[Exception] = cause
        self.suggestions: List[str] = []
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to a dictionary.

        Returns:
            {
                "error_id": "hex32chars",
                "code": "AiClientError",
                "message": "AI request failed (HTTP 401): invalid key",
                "timestamp": "2026-01-20T10:30:00Z",
                "context": {...}
            }
        """
        result: Dict[str, Any] = {
            "error_id": self.id,
            "code": self.code,
            "message": self.message,
            "timestamp": format_iso(self.timestamp),
            "context": self.context,
        }

        if self.cause:
            result["cause"] = {"type": type(self.cause).__name__, "message": str(self.cause)}

        if self.suggestions:
            result["suggestions"] = self.suggestions

        return result

    def add_suggestion(self, suggestion: str) -> None:
        """
        Add a resolution suggestion to the error.

        Example:
            error = AiClientError("AI request failed (HTTP 401)")
            error.add_suggestion("Check ARCHDECIDE_AI_API_KEY")
        """
        if not suggestion or not isinstance(suggestion, str):
            return

        if suggestion not in self.suggestions:
            self.suggestions.append(suggestion)

    def is_retryable(self) -> bool:
        """Whether a caller may reasonably retry the failed operation."""
        return False


class ConfigurationError(ArchDecideError):
    """Invalid project settings or AI client configuration."""

    @property
    def field(self) -> Optional[str]:
        """Name of the offending configuration field, if known."""
        return self.context.get("field")


class ValidationError(ArchDecideError):
    """
    Validation error with field details.

    Context structure:
    {
        "field": "scope.type",
        "source": "DEC-0001.yaml"
    }
    """

    @property
    def field(self) -> Optional[str]:
        return self.context.get("field")


class DecisionValidationError(ValidationError):
    """Decision data that does not satisfy the decision schema."""

    def with_source(self, source: str) -> "DecisionValidationError":
        """Return a copy whose message is prefixed with the file label."""
        error = DecisionValidationError(
            f"{source}: {self.message}",
            code=self.code,
            context={**self.context, "source": source},
            cause=self.cause,
        )
        for suggestion in self.suggestions:
            error.add_suggestion(suggestion)
        return error


class NotFoundError(ArchDecideError):
    """A requested resource (decisions directory, decision) does not exist."""

    pass


class ExternalServiceError(ArchDecideError):
    """
    Error from an external service (the chat-completions endpoint).

    Tracking:
    - HTTP status when one was received
    - Endpoint URL
    """

    def is_retryable(self) -> bool:
        """External service failures are generally retryable."""
        return True


class AiClientError(ExternalServiceError):
    """
    Failure of an AI round trip.

    Covers non-2xx responses, malformed or empty response bodies,
    refused insecure configurations and unsafe header values.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, code=code, context=context, cause=cause)
        self.status_code: Optional[int] = status_code
        if status_code is not None:
            self.context.setdefault("status_code", status_code)

    def is_retryable(self) -> bool:
        """Only throttling and upstream failures are worth retrying."""
        if self.status_code is None:
            return False
        return self.status_code == 429 or self.status_code >= 500


class TransportError(AiClientError):
    """Network-level failure (DNS, refused connection, TLS, timeout)."""

    def __init__(
        self,
        message: str,
        error_code: str,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, context=context, cause=cause)
        self.error_code: str = error_code
        self.context.setdefault("error_code", error_code)

    def is_retryable(self) -> bool:
        return True
