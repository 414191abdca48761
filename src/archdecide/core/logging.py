"""
Simple logging system for archdecide.
"""

import os
import re
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional, Pattern

import yaml
from loguru import logger as loguru_logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra[component]} | {message}"


def _stderr_sink(message: str) -> None:
    # Resolved per write: the CLI test runner swaps sys.stderr between invocations
    sys.stderr.write(message)


class AsyncLogger:
    """
    Component logger with flat format.

    Format: timestamp | level | component | message
    Context keyword arguments are bound as loguru extras, never interpolated
    into the message, so JSON snippets with braces are logged verbatim.
    """

    # Sinks shared by every instance
    _handler_ids: List[int] = []
    _configured = False

    def __init__(self, component: str, debug_mode: bool = False):
        self.component = component
        self.debug_mode = debug_mode
        if not AsyncLogger._configured:
            AsyncLogger.configure_sinks(debug_mode=debug_mode)

    @classmethod
    def configure_sinks(
        cls,
        debug_mode: bool = False,
        level: Optional[str] = None,
        log_file: Optional[str] = None,
    ) -> None:
        """
        Install the shared sinks, replacing any previous ones.

        - stderr: WARNING by default, DEBUG in debug mode
        - optional file: rotation at 10MB, zip compression, enqueued writes
        """
        if not cls._configured:
            # loguru ships a DEBUG stderr handler that would flood CLI output
            loguru_logger.remove()
        for handler_id in cls._handler_ids:
            loguru_logger.remove(handler_id)
        cls._handler_ids = []

        stderr_level = level or ("DEBUG" if debug_mode else "WARNING")
        cls._handler_ids.append(
            loguru_logger.add(_stderr_sink, level=stderr_level.upper(), format=LOG_FORMAT)
        )

        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            cls._handler_ids.append(
                loguru_logger.add(
                    log_file,
                    level="DEBUG",
                    format=LOG_FORMAT,
                    rotation="10 MB",
                    compression="zip",
                    enqueue=True,
                )
            )

        cls._configured = True

    def log(self, level: str, message: str, /, **context: Any) -> None:
        loguru_logger.bind(component=self.component, **context).log(level, message)

    def debug(self, message: str, /, **context: Any) -> None:
        """Log DEBUG level."""
        self.log("DEBUG", message, **context)

    def info(self, message: str, /, **context: Any) -> None:
        """Log INFO level."""
        self.log("INFO", message, **context)

    def warning(self, message: str, /, **context: Any) -> None:
        """Log WARNING level."""
        self.log("WARNING", message, **context)

    def error(
        self, message: str, /, include_trace: Optional[bool] = None, **context: Any
    ) -> None:
        """
        Log ERROR level with optional stack trace.

        Args:
            message: Error message
            include_trace: Whether to include the stack trace (None = follow debug_mode)
            **context: Additional context
        """
        should_include_trace = include_trace if include_trace is not None else self.debug_mode

        if should_include_trace:
            import traceback

            context["stack_trace"] = traceback.format_exc()

        self.log("ERROR", message, **context)


class SensitiveDataMasker:
    """
    Masks sensitive data before it reaches a log sink.

    Patterns masked:
    - Tokens/API keys
    - Bearer credentials
    - key=value pairs for secret-looking keys
    """

    def __init__(self, patterns: Optional[List[Pattern]] = None):
        self.patterns = patterns or []

    def mask(self, text: str) -> str:
        """
        Mask sensitive data.

        Example:
        - "Bearer sk-abc123def456..." -> "Bearer ***"
        - "api_key=abc123def456" -> "api_key=***"
        """
        masked = text

        # 1. Bearer credentials of any length
        masked = re.sub(r"(Bearer\s+)\S+", r"\1***", masked, flags=re.IGNORECASE)

        # 2. Long alphanumeric runs that look like tokens
        masked = re.sub(r"\b[a-zA-Z0-9_-]{32,}\b", "***TOKEN***", masked)

        # 3. key=value pairs with long values
        masked = re.sub(
            r"(api_key|token|secret|password|key)=[a-zA-Z0-9_-]{8,}",
            r"\1=***",
            masked,
            flags=re.IGNORECASE,
        )

        for pattern in self.patterns:
            masked = pattern.sub("***", masked)

        return masked


class PerformanceLogger:
    """
    Logger specialised in timing operations.
    """

    def __init__(self) -> None:
        self.logger = AsyncLogger("performance")

    @contextmanager
    def measure(self, operation: str, **context: Any):
        """
        Context manager that logs the duration of an operation.

        Usage:
        ```
        with perf_logger.measure("ai_chat_completion", url=url):
            response = transport.post(...)
        ```
        """
        start = time.perf_counter()
        try:
            yield
        finally:
            duration = time.perf_counter() - start
            self.logger.debug(
                "Operation completed", operation=operation, duration_ms=duration * 1000, **context
            )


def _get_debug_mode() -> bool:
    """Read debug_mode from .archdecide or the ARCHDECIDE_DEBUG variable."""
    config_path = Path(".archdecide")
    if config_path.is_file():
        try:
            with open(config_path, encoding="utf-8") as f:
                config: Dict[str, Any] = yaml.safe_load(f) or {}
            logging_section = config.get("logging") or {}
            if isinstance(logging_section, dict) and "debug_mode" in logging_section:
                return bool(logging_section["debug_mode"])
        except (OSError, yaml.YAMLError, AttributeError):
            # Settings reports a broken config file with a proper error
            pass

    return os.getenv("ARCHDECIDE_DEBUG", "false").lower() in ("1", "true")


logger = AsyncLogger("archdecide", debug_mode=_get_debug_mode())
