"""
AI client configuration.

Built once at process start (normally from the environment) and passed
down explicitly; nothing in the client reads the environment itself.
"""

import os
import re
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, SecretStr, field_validator
from pydantic import ValidationError as PydanticValidationError

from archdecide.core.exceptions import ConfigurationError
from archdecide.core.logging import logger

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_BASE_URL = "https://api.openai.com"
DEFAULT_CHAT_COMPLETIONS_PATH = "/v1/chat/completions"
DEFAULT_AUTH_HEADER_NAME = "Authorization"
DEFAULT_AUTH_PREFIX = "Bearer "
DEFAULT_TIMEOUT_SECONDS = 20

LOCAL_HOSTS = ("localhost", "127.0.0.1", "::1")

_HEADER_NAME = re.compile(r"[A-Za-z0-9-]+")
_BARE_AUTH_SCHEME = re.compile(r"[A-Za-z][A-Za-z0-9_-]*")


class AiEnv:
    """Environment variable names read by AiClientConfig.from_environment."""

    API_KEY = "ARCHDECIDE_AI_API_KEY"
    MODEL = "ARCHDECIDE_AI_MODEL"
    OMIT_MODEL = "ARCHDECIDE_AI_OMIT_MODEL"
    BASE_URL = "ARCHDECIDE_AI_BASE_URL"
    CHAT_COMPLETIONS_PATH = "ARCHDECIDE_AI_CHAT_COMPLETIONS_PATH"
    AUTH_HEADER_NAME = "ARCHDECIDE_AI_AUTH_HEADER_NAME"
    AUTH_PREFIX = "ARCHDECIDE_AI_AUTH_PREFIX"
    TIMEOUT = "ARCHDECIDE_AI_TIMEOUT"
    ORG = "ARCHDECIDE_AI_ORG"
    PROJECT = "ARCHDECIDE_AI_PROJECT"
    SYSTEM_PROMPT = "ARCHDECIDE_AI_SYSTEM_PROMPT"
    CA_INFO = "ARCHDECIDE_AI_CAINFO"
    INSECURE = "ARCHDECIDE_AI_INSECURE"

    # Generic CA bundle variables, in fallback order
    CA_BUNDLE_FALLBACKS = ("CURL_CA_BUNDLE", "REQUESTS_CA_BUNDLE")

    ALL = (
        API_KEY,
        MODEL,
        OMIT_MODEL,
        BASE_URL,
        CHAT_COMPLETIONS_PATH,
        AUTH_HEADER_NAME,
        AUTH_PREFIX,
        TIMEOUT,
        ORG,
        PROJECT,
        SYSTEM_PROMPT,
        CA_INFO,
        INSECURE,
    ) + CA_BUNDLE_FALLBACKS


def contains_newline(value: str) -> bool:
    return "\r" in value or "\n" in value


def _reject_newlines(value: str) -> str:
    if contains_newline(value):
        raise ValueError("contains newline characters, which is not allowed")
    return value


class AiClientConfig(BaseModel):
    """
    Validated settings for the chat-completions client.

    Rules:
    - api_key: non-empty, no CR/LF (kept as SecretStr so repr never shows it)
    - model: may be empty, meaning "omit the model field"
    - base_url: https, or http only for localhost / 127.0.0.1 / ::1
    - chat_completions_path: non-empty, starts with "/"
    - timeout_seconds: clamped to at least 1
    - auth_header_name: [A-Za-z0-9-]+
    - auth_prefix: no CR/LF; a bare scheme word ("Bearer") gets a trailing space
    - organization / project: no CR/LF
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    api_key: SecretStr
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    chat_completions_path: str = DEFAULT_CHAT_COMPLETIONS_PATH
    auth_header_name: str = DEFAULT_AUTH_HEADER_NAME
    auth_prefix: str = DEFAULT_AUTH_PREFIX
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    organization: Optional[str] = None
    project: Optional[str] = None
    system_prompt: Optional[str] = None
    ca_info_path: Optional[str] = None
    insecure_skip_verify: bool = False

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: SecretStr) -> SecretStr:
        raw = v.get_secret_value()
        if not raw.strip():
            raise ValueError("must be a non-empty string")
        _reject_newlines(raw)
        return SecretStr(raw.strip())

    @field_validator("model")
    @classmethod
    def validate_model(cls, v: str) -> str:
        return _reject_newlines(v.strip())

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        url = v.strip().rstrip("/")
        parsed = urlparse(url)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(f"must be an absolute URL with a scheme, got {v!r}")

        scheme = parsed.scheme.lower()
        if scheme == "https":
            return url
        if scheme == "http" and (parsed.hostname or "").lower() in LOCAL_HOSTS:
            return url

        raise ValueError(
            f"must use https (plain http is only allowed for localhost), got {url!r}"
        )

    @field_validator("chat_completions_path")
    @classmethod
    def validate_chat_completions_path(cls, v: str) -> str:
        path = v.strip()
        if not path:
            raise ValueError("must be a non-empty string")
        if not path.startswith("/"):
            raise ValueError("must start with a slash (e.g. /v1/chat/completions)")
        return _reject_newlines(path)

    @field_validator("timeout_seconds")
    @classmethod
    def clamp_timeout(cls, v: int) -> int:
        return max(1, v)

    @field_validator("auth_header_name")
    @classmethod
    def validate_auth_header_name(cls, v: str) -> str:
        name = v.strip()
        if not name:
            raise ValueError("must be a non-empty string")
        if not _HEADER_NAME.fullmatch(name):
            raise ValueError("contains invalid characters (allowed: letters, digits, '-')")
        return name

    @field_validator("auth_prefix")
    @classmethod
    def normalize_auth_prefix(cls, v: str) -> str:
        _reject_newlines(v)
        if _BARE_AUTH_SCHEME.fullmatch(v):
            return v + " "
        return v

    @field_validator("organization", "project")
    @classmethod
    def validate_optional_header_value(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return _reject_newlines(v.strip()) or None

    @field_validator("system_prompt", "ca_info_path")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    @property
    def url(self) -> str:
        """Target URL: base URL plus the chat-completions path."""
        return self.base_url + self.chat_completions_path

    @property
    def omits_model(self) -> bool:
        return self.model == ""

    @classmethod
    def validated(cls, **values: Any) -> "AiClientConfig":
        """
        Build a config, translating validation failures to ConfigurationError.

        Raises:
            ConfigurationError: with ``context["field"]`` naming the bad field
        """
        try:
            return cls(**values)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or "<config>"
            reason = str(first["msg"]).removeprefix("Value error, ")
            logger.error("Invalid AI configuration", field=field, reason=reason)
            error = ConfigurationError(
                f"Invalid AI configuration for '{field}': {reason}",
                context={"field": field},
                cause=e,
            )
            error.add_suggestion(f"Check the value used for '{field}'")
            raise error from None

    @classmethod
    def from_environment(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> Optional["AiClientConfig"]:
        """
        Read the configuration from environment variables.

        Returns:
            None when no API key is set: AI support is disabled, not broken

        Raises:
            ConfigurationError: when the key is set but other values are invalid
        """
        env = os.environ if environ is None else environ

        api_key = _env_string(env, AiEnv.API_KEY)
        if api_key is None:
            return None

        values: Dict[str, Any] = {"api_key": api_key}

        if _env_bool(env, AiEnv.OMIT_MODEL):
            values["model"] = ""
        else:
            values["model"] = _env_string(env, AiEnv.MODEL) or DEFAULT_MODEL

        values["base_url"] = _env_string(env, AiEnv.BASE_URL) or DEFAULT_BASE_URL
        values["chat_completions_path"] = (
            _env_string(env, AiEnv.CHAT_COMPLETIONS_PATH) or DEFAULT_CHAT_COMPLETIONS_PATH
        )
        values["auth_header_name"] = (
            _env_string(env, AiEnv.AUTH_HEADER_NAME) or DEFAULT_AUTH_HEADER_NAME
        )

        # Set-but-empty means "no prefix", so the raw value is kept
        raw_prefix = env.get(AiEnv.AUTH_PREFIX)
        values["auth_prefix"] = DEFAULT_AUTH_PREFIX if raw_prefix is None else raw_prefix.strip()

        values["timeout_seconds"] = _env_positive_int(env, AiEnv.TIMEOUT) or DEFAULT_TIMEOUT_SECONDS
        values["organization"] = _env_string(env, AiEnv.ORG)
        values["project"] = _env_string(env, AiEnv.PROJECT)
        values["system_prompt"] = _env_string(env, AiEnv.SYSTEM_PROMPT)

        ca_info = _env_string(env, AiEnv.CA_INFO)
        for fallback in AiEnv.CA_BUNDLE_FALLBACKS:
            if ca_info is not None:
                break
            ca_info = _env_string(env, fallback)
        values["ca_info_path"] = ca_info

        values["insecure_skip_verify"] = _env_bool(env, AiEnv.INSECURE)

        config = cls.validated(**values)
        logger.debug(
            "AI configuration loaded",
            base_url=config.base_url,
            model=config.model or "[omitted]",
            timeout_seconds=config.timeout_seconds,
        )
        return config


def _env_string(env: Mapping[str, str], name: str) -> Optional[str]:
    value = env.get(name)
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


def _env_positive_int(env: Mapping[str, str], name: str) -> Optional[int]:
    value = _env_string(env, name)
    if value is None or not (value.isascii() and value.isdigit()):
        return None
    return max(1, int(value))


def _env_bool(env: Mapping[str, str], name: str) -> bool:
    value = _env_string(env, name)
    if value is None:
        return False
    return value == "1" or value.lower() == "true"
