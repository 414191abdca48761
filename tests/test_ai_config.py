"""Tests for AiClientConfig validation and environment loading."""

import pytest

from archdecide.ai.config import AiClientConfig, AiEnv
from archdecide.ai.factory import ai_client_from_environment, create_ai_client
from archdecide.ai.client import OpenAiChatCompletionsClient
from archdecide.core.exceptions import ConfigurationError


class TestAiClientConfig:
    """Direct construction through AiClientConfig.validated."""

    def test_defaults(self):
        """Only the key is required."""
        config = AiClientConfig.validated(api_key="sk-test")
        assert config.model == "gpt-4o-mini"
        assert config.base_url == "https://api.openai.com"
        assert config.chat_completions_path == "/v1/chat/completions"
        assert config.auth_header_name == "Authorization"
        assert config.auth_prefix == "Bearer "
        assert config.timeout_seconds == 20
        assert config.url == "https://api.openai.com/v1/chat/completions"
        assert not config.insecure_skip_verify

    def test_key_is_not_in_repr(self):
        """The API key never shows up in repr."""
        config = AiClientConfig.validated(api_key="sk-very-secret")
        assert "sk-very-secret" not in repr(config)
        assert config.api_key.get_secret_value() == "sk-very-secret"

    @pytest.mark.parametrize("api_key", ["", "   ", "sk\ninjected"])
    def test_rejects_bad_keys(self, api_key):
        """Blank keys and keys with newlines are configuration errors."""
        with pytest.raises(ConfigurationError) as exc_info:
            AiClientConfig.validated(api_key=api_key)
        assert exc_info.value.field == "api_key"

    @pytest.mark.parametrize(
        "base_url",
        [
            "https://api.openai.com",
            "https://openrouter.ai/api",
            "http://localhost:1234",
            "http://127.0.0.1:8080",
            "http://[::1]:11434",
        ],
    )
    def test_accepts_secure_or_local_urls(self, base_url):
        """https anywhere, http only on loopback."""
        assert AiClientConfig.validated(api_key="k", base_url=base_url).base_url == base_url

    @pytest.mark.parametrize(
        "base_url", ["http://example.com", "ftp://example.com", "example.com", "http://10.0.0.5"]
    )
    def test_rejects_insecure_urls(self, base_url):
        """Plain http to a remote host is refused."""
        with pytest.raises(ConfigurationError) as exc_info:
            AiClientConfig.validated(api_key="k", base_url=base_url)
        assert exc_info.value.field == "base_url"

    def test_strips_trailing_slashes(self):
        """Trailing slashes are removed from the base URL."""
        config = AiClientConfig.validated(api_key="k", base_url="https://gw.example.com/v1//")
        assert config.base_url == "https://gw.example.com/v1"

    @pytest.mark.parametrize("path", ["", "v1/chat/completions"])
    def test_rejects_bad_paths(self, path):
        """The path must be non-empty and start with a slash."""
        with pytest.raises(ConfigurationError) as exc_info:
            AiClientConfig.validated(api_key="k", chat_completions_path=path)
        assert exc_info.value.field == "chat_completions_path"

    @pytest.mark.parametrize("name", ["", "X Api Key", "X-Key:", "Auth\r\nX"])
    def test_rejects_bad_header_names(self, name):
        """Header names are restricted to letters, digits and dashes."""
        with pytest.raises(ConfigurationError) as exc_info:
            AiClientConfig.validated(api_key="k", auth_header_name=name)
        assert exc_info.value.field == "auth_header_name"

    @pytest.mark.parametrize(
        "prefix, expected",
        [("Bearer", "Bearer "), ("Token", "Token "), ("Bearer ", "Bearer "), ("", "")],
    )
    def test_auth_prefix_normalization(self, prefix, expected):
        """A bare scheme word gets one trailing space."""
        assert AiClientConfig.validated(api_key="k", auth_prefix=prefix).auth_prefix == expected

    def test_rejects_newline_in_prefix(self):
        """Prefixes cannot inject headers."""
        with pytest.raises(ConfigurationError):
            AiClientConfig.validated(api_key="k", auth_prefix="Bearer\r\nX-Evil: 1")

    @pytest.mark.parametrize("field", ["organization", "project"])
    def test_rejects_newline_in_org_and_project(self, field):
        """Organization and project values cannot contain CR/LF."""
        with pytest.raises(ConfigurationError) as exc_info:
            AiClientConfig.validated(api_key="k", **{field: "org\nX-Evil: 1"})
        assert exc_info.value.field == field

    @pytest.mark.parametrize("timeout, expected", [(0, 1), (-5, 1), (1, 1), (45, 45)])
    def test_timeout_clamped(self, timeout, expected):
        """Timeouts are at least one second."""
        assert AiClientConfig.validated(api_key="k", timeout_seconds=timeout).timeout_seconds == expected

    def test_empty_model_means_omitted(self):
        """An empty model is allowed and flagged as omitted."""
        config = AiClientConfig.validated(api_key="k", model="")
        assert config.omits_model

    def test_unknown_fields_rejected(self):
        """Typos in field names are errors."""
        with pytest.raises(ConfigurationError):
            AiClientConfig.validated(api_key="k", modle="gpt")


class TestAiClientConfigFromEnvironment:
    """Loading from ARCHDECIDE_AI_* variables."""

    def test_no_key_means_disabled(self):
        """Without a key there is no configuration and no error."""
        assert AiClientConfig.from_environment({}) is None
        assert AiClientConfig.from_environment({AiEnv.API_KEY: "   "}) is None

    def test_reads_all_values(self):
        """Every variable maps onto its field."""
        config = AiClientConfig.from_environment(
            {
                AiEnv.API_KEY: "  sk-env  ",
                AiEnv.MODEL: "openai/gpt-4o",
                AiEnv.BASE_URL: "https://openrouter.ai/api/",
                AiEnv.CHAT_COMPLETIONS_PATH: "/v1/chat/completions",
                AiEnv.AUTH_HEADER_NAME: "api-key",
                AiEnv.AUTH_PREFIX: "",
                AiEnv.TIMEOUT: "45",
                AiEnv.ORG: "org-1",
                AiEnv.PROJECT: "proj-1",
                AiEnv.SYSTEM_PROMPT: "Be brief.",
                AiEnv.CA_INFO: "/etc/ssl/bundle.pem",
                AiEnv.INSECURE: "true",
            }
        )
        assert config.api_key.get_secret_value() == "sk-env"
        assert config.model == "openai/gpt-4o"
        assert config.base_url == "https://openrouter.ai/api"
        assert config.auth_header_name == "api-key"
        assert config.auth_prefix == ""
        assert config.timeout_seconds == 45
        assert config.organization == "org-1"
        assert config.project == "proj-1"
        assert config.system_prompt == "Be brief."
        assert config.ca_info_path == "/etc/ssl/bundle.pem"
        assert config.insecure_skip_verify

    def test_unset_prefix_defaults_to_bearer(self):
        """An unset prefix is "Bearer "."""
        config = AiClientConfig.from_environment({AiEnv.API_KEY: "k"})
        assert config.auth_prefix == "Bearer "

    def test_bare_prefix_gets_space(self):
        """A bare word prefix gains a trailing space."""
        config = AiClientConfig.from_environment({AiEnv.API_KEY: "k", AiEnv.AUTH_PREFIX: "Token"})
        assert config.auth_prefix == "Token "

    def test_omit_model(self):
        """OMIT_MODEL wins over MODEL."""
        config = AiClientConfig.from_environment(
            {AiEnv.API_KEY: "k", AiEnv.MODEL: "gpt", AiEnv.OMIT_MODEL: "1"}
        )
        assert config.model == ""

    @pytest.mark.parametrize(
        "value, expected", [("abc", 20), ("-3", 20), ("²", 20), ("٣", 20), ("0", 1), ("7", 7)]
    )
    def test_timeout_parsing(self, value, expected):
        """Only ASCII digit strings are read; zero is clamped to one."""
        config = AiClientConfig.from_environment({AiEnv.API_KEY: "k", AiEnv.TIMEOUT: value})
        assert config.timeout_seconds == expected

    def test_ca_bundle_fallbacks(self):
        """CURL_CA_BUNDLE then REQUESTS_CA_BUNDLE are used when CAINFO is unset."""
        config = AiClientConfig.from_environment(
            {AiEnv.API_KEY: "k", "CURL_CA_BUNDLE": "/curl.pem", "REQUESTS_CA_BUNDLE": "/req.pem"}
        )
        assert config.ca_info_path == "/curl.pem"

        config = AiClientConfig.from_environment({AiEnv.API_KEY: "k", "REQUESTS_CA_BUNDLE": "/req.pem"})
        assert config.ca_info_path == "/req.pem"

    @pytest.mark.parametrize("value, expected", [("1", True), ("TRUE", True), ("yes", False), ("0", False)])
    def test_insecure_flag(self, value, expected):
        """Only 1 and true enable the insecure flag."""
        config = AiClientConfig.from_environment({AiEnv.API_KEY: "k", AiEnv.INSECURE: value})
        assert config.insecure_skip_verify is expected

    def test_invalid_url_raises(self):
        """Invalid values with a key present are errors."""
        with pytest.raises(ConfigurationError) as exc_info:
            AiClientConfig.from_environment({AiEnv.API_KEY: "k", AiEnv.BASE_URL: "http://example.com"})
        assert exc_info.value.field == "base_url"

    def test_reads_process_environment(self, clean_ai_env):
        """Without an explicit mapping, os.environ is read."""
        clean_ai_env.setenv(AiEnv.API_KEY, "sk-process")
        config = AiClientConfig.from_environment()
        assert config.api_key.get_secret_value() == "sk-process"


class TestAiClientFactory:
    """Client construction helpers."""

    def test_none_config_gives_no_client(self):
        """No configuration, no client."""
        assert create_ai_client(None) is None

    def test_builds_chat_completions_client(self, ai_config, fake_http):
        """A configuration yields an OpenAI-compatible client."""
        client = create_ai_client(ai_config, http_client=fake_http)
        assert isinstance(client, OpenAiChatCompletionsClient)
        assert client.http_client is fake_http

    def test_from_environment_disabled(self, clean_ai_env):
        """Without a key in the environment there is no client."""
        assert ai_client_from_environment() is None

    def test_from_environment_enabled(self):
        """A key in the given mapping yields a client."""
        client = ai_client_from_environment({AiEnv.API_KEY: "k"})
        assert isinstance(client, OpenAiChatCompletionsClient)
