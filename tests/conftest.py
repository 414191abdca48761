"""Shared pytest fixtures for archdecide tests."""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

import pytest
import yaml

from archdecide.ai.config import AiClientConfig, AiEnv
from archdecide.ai.http import HttpClient, HttpResponse
from archdecide.decisions.factory import DecisionFactory
from archdecide.models.decision import Decision

# ============================================================================
# Decision data
# ============================================================================


def decision_data(
    id: str = "DEC-0001",
    title: str = "No ORMs",
    summary: str = "Use raw SQL",
    status: str = "active",
    scope_type: str = "global",
    paths: Optional[List[str]] = None,
    rationale: Optional[List[str]] = None,
    keywords: Optional[List[str]] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """Raw decision-file mapping, as yaml.safe_load would return it."""
    data: Dict[str, Any] = {
        "id": id,
        "title": title,
        "status": status,
        "date": "2026-02-03",
        "scope": {"type": scope_type},
        "decision": {
            "summary": summary,
            "rationale": rationale if rationale is not None else ["Queries stay explicit"],
        },
    }
    if paths is not None:
        data["scope"]["paths"] = paths
    if keywords is not None:
        data["ai"] = {"explain_style": "short", "keywords": keywords}
    data.update(extra)
    return data


@pytest.fixture
def make_decision() -> Callable[..., Decision]:
    """Factory for Decision values built through DecisionFactory.

    Example:
        def test_scope(make_decision):
            decision = make_decision(scope_type="path", paths=["src/*"])
    """

    def _make(**kwargs: Any) -> Decision:
        return DecisionFactory.from_dict(decision_data(**kwargs))

    return _make


@pytest.fixture
def decisions_dir(tmp_path: Path) -> Path:
    """Empty decisions directory inside a temporary project."""
    directory = tmp_path / ".decisions"
    directory.mkdir()
    return directory


@pytest.fixture
def write_decision(decisions_dir: Path) -> Callable[..., Path]:
    """Writes a decision file into ``decisions_dir``.

    Pass ``data`` for a mapping dumped as YAML, or ``raw`` for literal file text.
    """

    def _write(filename: str, data: Optional[Dict[str, Any]] = None, raw: Optional[str] = None) -> Path:
        path = decisions_dir / filename
        if raw is None:
            raw = yaml.safe_dump(data if data is not None else decision_data(), sort_keys=False)
        path.write_text(raw, encoding="utf-8")
        return path

    return _write


# ============================================================================
# AI fixtures
# ============================================================================


class FakeHttpClient(HttpClient):
    """In-memory transport: records the last request, returns a programmed response."""

    def __init__(self, status_code: int = 200, body: str = "", error: Optional[Exception] = None):
        self.status_code = status_code
        self.body = body
        self.error = error
        self.calls = 0
        self.last_url: Optional[str] = None
        self.last_headers: List[str] = []
        self.last_body: Optional[str] = None
        self.last_timeout: Optional[int] = None
        self.last_ca_info_path: Optional[str] = None

    def respond(self, status_code: int, body: str) -> "FakeHttpClient":
        self.status_code = status_code
        self.body = body
        return self

    def post(
        self,
        url: str,
        headers: Sequence[str],
        body: str,
        timeout_seconds: int,
        ca_info_path: Optional[str] = None,
    ) -> HttpResponse:
        self.calls += 1
        self.last_url = url
        self.last_headers = list(headers)
        self.last_body = body
        self.last_timeout = timeout_seconds
        self.last_ca_info_path = ca_info_path
        if self.error is not None:
            raise self.error
        return HttpResponse(status_code=self.status_code, body=self.body)


@pytest.fixture
def fake_http() -> FakeHttpClient:
    """Fake transport answering with a successful completion."""
    return FakeHttpClient(
        status_code=200, body='{"choices":[{"message":{"content":"Summary [DEC-0001]"}}]}'
    )


@pytest.fixture
def ai_config() -> AiClientConfig:
    """Valid AI configuration with defaults and a dummy key."""
    return AiClientConfig.validated(api_key="sk-test")


@pytest.fixture
def clean_ai_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every AI-related variable from the process environment."""
    for name in AiEnv.ALL:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temporary working directory with no settings overrides in the environment."""
    for name in ("ARCHDECIDE_DECISIONS_DIR", "ARCHDECIDE_LOG_LEVEL", "ARCHDECIDE_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
