"""
Chat-completions client that summarizes recorded decisions.

The AI is a presentation layer only: it receives the matched decisions as
JSON and is instructed to summarize them without adding anything.
"""

import json
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from archdecide.ai.config import AiClientConfig, AiEnv, contains_newline
from archdecide.ai.http import HttpClient, HttpResponse, RequestsHttpClient
from archdecide.core.exceptions import AiClientError
from archdecide.core.logging import PerformanceLogger, SensitiveDataMasker, logger
from archdecide.core.utils.datetime_utils import format_calendar_date
from archdecide.models.chat import ChatCompletionRequest, Message, Role
from archdecide.models.decision import Decision

DEFAULT_SYSTEM_PROMPT = """You are a helpful assistant for explaining software architecture decisions.

Critical constraints:
- Decisions and rules are defined ONLY by the provided recorded decision data.
- Do NOT invent new rules, scopes, exceptions, or facts.
- If the information needed to answer is not present, explicitly say it is not recorded.

Output style:
- Be concise.
- Reference decisions by ID like [DEC-0001].
- Prefer short bullets and plain language."""

OPENROUTER_402_HINT = (
    "OpenRouter returned HTTP 402. This usually means the selected model is not "
    "available under your current plan/credits, or free quota is exhausted. "
    'Try a different ":free" model or add a small credit balance in OpenRouter.'
)

UTF8_BOM = "\ufeff"
SNIPPET_MAX_CHARS = 300


class AiClient(ABC):
    """Turns a question plus matched decisions into a short summary."""

    @abstractmethod
    def explain_decision(self, question: str, decisions: Sequence[Decision]) -> str:
        """
        Raises:
            AiClientError: on any failure of the round trip
        """


class OpenAiChatCompletionsClient(AiClient):
    """
    Client for OpenAI-compatible ``/v1/chat/completions`` endpoints.

    One request per call, no retries, no streaming. Works with any gateway
    that accepts the OpenAI request shape (OpenRouter, local proxies,
    Azure-style deployments with the model in the URL).
    """

    def __init__(self, config: AiClientConfig, http_client: Optional[HttpClient] = None):
        self.config = config
        self.http_client = http_client or RequestsHttpClient()
        self._masker = SensitiveDataMasker(
            patterns=[re.compile(re.escape(config.api_key.get_secret_value()))]
        )
        self._perf = PerformanceLogger()

    def explain_decision(self, question: str, decisions: Sequence[Decision]) -> str:
        request = self.build_request(question, decisions)
        url = self.config.url

        headers = self.build_headers()

        if self.config.insecure_skip_verify:
            raise AiClientError(
                f"Insecure TLS verification ({AiEnv.INSECURE}) is not supported. "
                f"Configure {AiEnv.CA_INFO} / CURL_CA_BUNDLE or fix your system trust store instead.",
                context={"url": url},
            )

        logger.info(
            "Requesting AI summary",
            url=url,
            model=self.config.model or "[omitted]",
            decisions=len(decisions),
        )
        with self._perf.measure("ai_chat_completion", url=url):
            response = self.http_client.post(
                url,
                headers,
                json.dumps(request.to_payload(), ensure_ascii=False),
                self.config.timeout_seconds,
                self.config.ca_info_path,
            )

        data = self._decode_response(response, url)

        content = _message_content(data)
        if content is None:
            logger.warning("AI response without message content", url=url)
            raise AiClientError(
                "AI response was missing message content.",
                context={"url": url},
                status_code=response.status_code,
            )

        return content

    def build_request(self, question: str, decisions: Sequence[Decision]) -> ChatCompletionRequest:
        """Request body: system prompt, then the question with the decisions as JSON."""
        payload = [self.decision_to_payload(decision) for decision in decisions]

        user_content = (
            f"Question:\n{question}\n\n"
            "Recorded decisions (authoritative source of truth):\n"
            + json.dumps(payload, indent=4, ensure_ascii=False)
            + "\n\nTask: Summarize ONLY what is recorded above. "
            "If something is missing, say it's not recorded."
        )

        return ChatCompletionRequest(
            messages=[
                Message(role=Role.SYSTEM, content=self.config.system_prompt or DEFAULT_SYSTEM_PROMPT),
                Message(role=Role.USER, content=user_content),
            ],
            model=None if self.config.omits_model else self.config.model,
        )

    @staticmethod
    def decision_to_payload(decision: Decision) -> Dict[str, Any]:
        """
        JSON shape of one decision as sent to the model.

        ``scope.paths`` is left out for a global scope without paths;
        ``rules``, ``references`` and ``ai`` are left out when absent.
        """
        scope: Dict[str, Any] = {"type": decision.scope.type.value}
        if not decision.scope.is_global or decision.scope.paths:
            scope["paths"] = list(decision.scope.paths)

        payload: Dict[str, Any] = {
            "id": decision.id.value,
            "title": decision.title,
            "status": decision.status.value,
            "date": format_calendar_date(decision.date),
            "scope": scope,
            "summary": decision.content.summary,
            "rationale": list(decision.content.rationale),
            "alternatives": list(decision.content.alternatives),
            "examples": {
                "allowed": list(decision.examples.allowed),
                "forbidden": list(decision.examples.forbidden),
            },
        }

        if decision.rules is not None:
            payload["rules"] = {
                "forbid": list(decision.rules.forbid),
                "allow": list(decision.rules.allow),
            }
        if decision.references is not None:
            payload["references"] = {
                "issues": list(decision.references.issues),
                "commits": list(decision.references.commits),
                "adr": decision.references.adr,
            }
        if decision.ai_metadata is not None:
            payload["ai"] = {
                "explain_style": decision.ai_metadata.explain_style,
                "keywords": list(decision.ai_metadata.keywords),
            }

        return payload

    def build_headers(self) -> List[str]:
        """
        Request headers as "Name: Value" strings.

        Raises:
            AiClientError: if any value contains CR or LF
        """
        headers = ["Content-Type: application/json", "Accept: application/json"]

        name = self.config.auth_header_name
        value = self.config.auth_prefix + self.config.api_key.get_secret_value()
        _assert_header_value_safe(value, name)
        headers.append(f"{name}: {value}")

        optional = (
            ("OpenAI-Organization", self.config.organization),
            ("OpenAI-Project", self.config.project),
        )
        for header_name, header_value in optional:
            if header_value is None or not header_value.strip():
                continue
            header_value = header_value.strip()
            _assert_header_value_safe(header_value, header_name)
            headers.append(f"{header_name}: {header_value}")

        return headers

    def auth_diagnostics(self) -> str:
        """Which auth header was sent, without the credential."""
        prefix = self.config.auth_prefix or "[empty]"
        return f"Auth header sent: {self.config.auth_header_name} (prefix: {prefix})."

    def _decode_response(self, response: HttpResponse, url: str) -> Dict[str, Any]:
        status = response.status_code
        data = _try_decode_json_object(response.body)

        if not response.is_success:
            if data is not None:
                raise self._http_status_error(status, data, url)

            snippet = format_response_snippet(response.body)
            logger.warning(
                "AI request failed with non-JSON body",
                url=url,
                status_code=status,
                snippet=self._masker.mask(snippet),
            )
            raise AiClientError(
                f"AI request failed (HTTP {status}). Response was not valid JSON for {url}. "
                f"{self.auth_diagnostics()} Body starts with: {snippet}",
                context={"url": url},
                status_code=status,
            )

        if data is None:
            snippet = format_response_snippet(response.body)
            logger.warning(
                "AI response was not JSON",
                url=url,
                status_code=status,
                snippet=self._masker.mask(snippet),
            )
            raise AiClientError(
                f"AI response was not valid JSON (HTTP {status}) from {url}. "
                f"{self.auth_diagnostics()} Body starts with: {snippet}",
                context={"url": url},
                status_code=status,
            )

        return data

    @staticmethod
    def _http_status_error(status: int, data: Dict[str, Any], url: str) -> AiClientError:
        error = data.get("error")
        message = error.get("message") if isinstance(error, dict) else None
        if not isinstance(message, str) or not message:
            message = None

        if status == 402 and "openrouter.ai" in url:
            if message:
                text = f"AI request failed (HTTP {status}): {message} ({OPENROUTER_402_HINT})"
            else:
                text = f"AI request failed (HTTP {status}): {OPENROUTER_402_HINT}"
        elif message:
            text = f"AI request failed (HTTP {status}): {message}"
        else:
            text = f"AI request failed (HTTP {status})."

        logger.warning("AI request failed", url=url, status_code=status)
        return AiClientError(text, context={"url": url}, status_code=status)


def format_response_snippet(raw: str) -> str:
    """Whitespace-collapsed start of a response body, at most 300 characters."""
    text = _strip_bom(raw).strip()
    if not text:
        return "[empty body]"

    text = re.sub(r"\s+", " ", text)
    if len(text) > SNIPPET_MAX_CHARS:
        text = text[:SNIPPET_MAX_CHARS] + "..."
    return text


def _assert_header_value_safe(value: str, label: str) -> None:
    if contains_newline(value):
        raise AiClientError(
            f"{label} contains newline characters, which is not allowed.",
            context={"header": label},
        )


def _strip_bom(raw: str) -> str:
    return raw[1:] if raw.startswith(UTF8_BOM) else raw


def _try_decode_json_object(raw: str) -> Optional[Dict[str, Any]]:
    try:
        decoded = json.loads(_strip_bom(raw))
    except ValueError:
        return None
    return decoded if isinstance(decoded, dict) else None


def _message_content(data: Dict[str, Any]) -> Optional[str]:
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None

    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str) or not content.strip():
        return None

    return content.strip()
