"""
AI summarization of recorded decisions over an OpenAI-compatible API.
"""

from archdecide.ai.config import AiClientConfig, AiEnv
from archdecide.ai.http import HttpClient, HttpResponse, RequestsHttpClient
from archdecide.ai.client import (
    DEFAULT_SYSTEM_PROMPT,
    OPENROUTER_402_HINT,
    AiClient,
    OpenAiChatCompletionsClient,
    format_response_snippet,
)
from archdecide.ai.factory import ai_client_from_environment, create_ai_client

__all__ = [
    "AiClientConfig",
    "AiEnv",
    "HttpClient",
    "HttpResponse",
    "RequestsHttpClient",
    "DEFAULT_SYSTEM_PROMPT",
    "OPENROUTER_402_HINT",
    "AiClient",
    "OpenAiChatCompletionsClient",
    "format_response_snippet",
    "ai_client_from_environment",
    "create_ai_client",
]
