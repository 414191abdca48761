"""
Maps raw decision-file data (parsed YAML) onto the Decision model.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Type, TypeVar

from pydantic import ValidationError as PydanticValidationError

from archdecide.core.exceptions import DecisionValidationError
from archdecide.core.utils.datetime_utils import parse_calendar_date
from archdecide.models.base import ArchDecideBaseModel
from archdecide.models.decision import (
    AiMetadata,
    Decision,
    DecisionContent,
    DecisionId,
    DecisionStatus,
    Examples,
    References,
    Rules,
    Scope,
    ScopeType,
)

M = TypeVar("M", bound=ArchDecideBaseModel)

REQUIRED_FIELDS = ("id", "title", "status", "date", "scope", "decision")


class DecisionFactory:
    """
    Builds Decision values from the decision-file schema.

    Schema (YAML):
        id: DEC-0001
        title: ...
        status: active | deprecated | superseded
        date: 2026-02-03
        scope: {type: global | path | module, paths: [...]}
        decision: {summary: ..., rationale: [...], alternatives: [...]}
        examples: {allowed: [...], forbidden: [...]}     # optional
        rules: {forbid: [...], allow: [...]}             # optional
        ai: {explain_style: ..., keywords: [...]}        # optional
        references: {issues: [...], commits: [...], adr: ...}  # optional

    Every failure raises DecisionValidationError with the YAML field path
    in ``context["field"]``.
    """

    @classmethod
    def from_dict(cls, data: Any) -> Decision:
        if not isinstance(data, Mapping):
            raise DecisionValidationError(
                "decision file must parse to a YAML mapping/object", context={"field": "<root>"}
            )

        cls._assert_required(data, REQUIRED_FIELDS)

        return Decision(
            id=DecisionId.from_string(data["id"]),
            title=cls._string(data["title"], "title"),
            status=cls._status(data["status"]),
            date=cls._date(data["date"]),
            scope=cls._scope(data["scope"]),
            content=cls._content(data["decision"]),
            examples=cls._examples(data.get("examples")),
            rules=cls._rules(data.get("rules")),
            ai_metadata=cls._ai_metadata(data.get("ai")),
            references=cls._references(data.get("references")),
        )

    @staticmethod
    def _status(value: Any) -> DecisionStatus:
        try:
            return DecisionStatus(value)
        except ValueError:
            allowed = ", ".join(status.value for status in DecisionStatus)
            raise DecisionValidationError(
                f"Invalid status {value!r}. Allowed: {allowed}", context={"field": "status"}
            ) from None

    @staticmethod
    def _date(value: Any):
        try:
            return parse_calendar_date(value)
        except ValueError as e:
            raise DecisionValidationError(str(e), context={"field": "date"}) from None

    @classmethod
    def _scope(cls, data: Any) -> Scope:
        data = cls._mapping(data, "scope")
        cls._assert_required(data, ("type",), prefix="scope.")

        try:
            scope_type = ScopeType(data["type"])
        except ValueError:
            allowed = ", ".join(scope_type.value for scope_type in ScopeType)
            raise DecisionValidationError(
                f"Invalid scope type {data['type']!r}. Allowed: {allowed}",
                context={"field": "scope.type"},
            ) from None

        paths = data.get("paths")
        if paths is None:
            paths = []
        if not isinstance(paths, list):
            raise DecisionValidationError(
                "Scope paths must be an array.", context={"field": "scope.paths"}
            )

        return cls._build(Scope, "scope", type=scope_type, paths=paths)

    @classmethod
    def _content(cls, data: Any) -> DecisionContent:
        data = cls._mapping(data, "decision")
        cls._assert_required(data, ("summary", "rationale"), prefix="decision.")

        if not isinstance(data["rationale"], list):
            raise DecisionValidationError(
                "Decision rationale must be an array.", context={"field": "decision.rationale"}
            )

        return cls._build(
            DecisionContent,
            "decision",
            summary=cls._string(data["summary"], "decision.summary"),
            rationale=data["rationale"],
            alternatives=cls._list(data.get("alternatives"), "decision.alternatives"),
        )

    @classmethod
    def _examples(cls, data: Any) -> Examples:
        if data is None:
            return Examples()
        data = cls._mapping(data, "examples")
        return cls._build(
            Examples,
            "examples",
            allowed=cls._list(data.get("allowed"), "examples.allowed"),
            forbidden=cls._list(data.get("forbidden"), "examples.forbidden"),
        )

    @classmethod
    def _rules(cls, data: Any) -> Optional[Rules]:
        if data is None:
            return None
        data = cls._mapping(data, "rules")
        return cls._build(
            Rules,
            "rules",
            forbid=cls._list(data.get("forbid"), "rules.forbid"),
            allow=cls._list(data.get("allow"), "rules.allow"),
        )

    @classmethod
    def _ai_metadata(cls, data: Any) -> Optional[AiMetadata]:
        if data is None:
            return None
        data = cls._mapping(data, "ai")
        cls._assert_required(data, ("explain_style",), prefix="ai.")
        return cls._build(
            AiMetadata,
            "ai",
            explain_style=cls._string(data["explain_style"], "ai.explain_style"),
            keywords=cls._list(data.get("keywords"), "ai.keywords"),
        )

    @classmethod
    def _references(cls, data: Any) -> Optional[References]:
        if data is None:
            return None
        data = cls._mapping(data, "references")
        adr = data.get("adr")
        if adr is not None:
            adr = cls._string(adr, "references.adr")
        return cls._build(
            References,
            "references",
            issues=cls._list(data.get("issues"), "references.issues"),
            commits=cls._list(data.get("commits"), "references.commits"),
            adr=adr,
        )

    @staticmethod
    def _build(model: Type[M], label: str, **values: Any) -> M:
        """Instantiate a sub-model, translating pydantic errors to the YAML field path."""
        try:
            return model(**values)
        except PydanticValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            field = f"{label}.{location}" if location else label
            raise DecisionValidationError(
                f"Field '{field}': {first['msg']}", context={"field": field}, cause=e
            ) from None

    @staticmethod
    def _assert_required(data: Mapping[str, Any], fields: Iterable[str], prefix: str = "") -> None:
        for field in fields:
            if field not in data:
                raise DecisionValidationError(
                    f"Missing required field: {prefix}{field}", context={"field": f"{prefix}{field}"}
                )

    @staticmethod
    def _mapping(value: Any, field: str) -> Dict[str, Any]:
        if not isinstance(value, Mapping):
            raise DecisionValidationError(
                f"Field '{field}' must be a mapping.", context={"field": field}
            )
        return dict(value)

    @staticmethod
    def _list(value: Any, field: str) -> List[Any]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise DecisionValidationError(
                f"Field '{field}' must be an array.", context={"field": field}
            )
        return value

    @staticmethod
    def _string(value: Any, field: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise DecisionValidationError(
                f"Field '{field}' must be a non-empty string.", context={"field": field}
            )
        return value.strip()
