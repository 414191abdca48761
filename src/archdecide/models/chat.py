"""
OpenAI-compatible chat models.
Defines the request body sent to a chat-completions endpoint.
"""

from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import Field, field_validator
from archdecide.models.base import ArchDecideBaseModel


class Role(str, Enum):
    """Valid roles in a conversation."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class Message(ArchDecideBaseModel):
    """
    Individual message in a conversation.
    OpenAI format compatible.
    """

    role: Role = Field(..., description="Sender's role")
    content: str = Field(..., min_length=1, description="Message content")

    @field_validator("content")
    @classmethod
    def validate_content_not_empty(cls, v: str) -> str:
        """Ensures content is not empty."""
        if not v.strip():
            raise ValueError("Content cannot be empty")
        return v


class ChatCompletionRequest(ArchDecideBaseModel):
    """
    Body for a /v1/chat/completions call.

    ``model`` is None for gateways that encode the model in the URL; it is
    then left out of the serialized body entirely.
    """

    temperature: float = Field(0.2, ge=0.0, le=2.0, description="Sampling temperature")
    stream: bool = Field(False, description="Only non-streaming JSON responses are supported")
    messages: List[Message] = Field(..., min_length=1, description="System and user messages")
    model: Optional[str] = Field(None, description="Requested model")

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict in wire order: temperature, stream, messages, model."""
        return self.model_dump(mode="json", exclude_none=True)
