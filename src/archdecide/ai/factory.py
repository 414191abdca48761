"""
Builds the AI client used by the explain command.
"""

from typing import Mapping, Optional

from archdecide.ai.client import AiClient, OpenAiChatCompletionsClient
from archdecide.ai.config import AiClientConfig
from archdecide.ai.http import HttpClient
from archdecide.core.logging import logger


def create_ai_client(
    config: Optional[AiClientConfig], http_client: Optional[HttpClient] = None
) -> Optional[AiClient]:
    """Client for ``config``, or None when AI is not configured."""
    if config is None:
        return None
    return OpenAiChatCompletionsClient(config, http_client=http_client)


def ai_client_from_environment(
    environ: Optional[Mapping[str, str]] = None, http_client: Optional[HttpClient] = None
) -> Optional[AiClient]:
    """
    Read AI settings from the environment and build a client.

    Returns:
        None when no API key is configured

    Raises:
        ConfigurationError: when the key is set but other settings are invalid
    """
    config = AiClientConfig.from_environment(environ)
    if config is None:
        logger.debug("AI client not configured")
    return create_ai_client(config, http_client=http_client)
