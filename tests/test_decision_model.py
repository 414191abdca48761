"""Tests for the decision model: ids, scopes and the aggregate."""

import datetime

import pytest
from pydantic import ValidationError as PydanticValidationError

from archdecide.core.exceptions import DecisionValidationError
from archdecide.models.decision import (
    AiMetadata,
    Decision,
    DecisionContent,
    DecisionId,
    DecisionStatus,
    Rules,
    Scope,
    ScopeType,
)


class TestDecisionId:
    """DecisionId format validation and equality."""

    @pytest.mark.parametrize("value", ["DEC-0001", "DEC-1234", "DEC-9999", "DEC-0000"])
    def test_accepts_valid_ids(self, value):
        """DEC- followed by exactly four digits is accepted."""
        assert DecisionId.from_string(value).value == value

    @pytest.mark.parametrize(
        "value",
        [
            "DEC-001",  # too few digits
            "DEC-00001",  # too many digits
            "dec-0001",  # wrong case
            " DEC-0001",  # leading whitespace
            "DEC-0001 ",  # trailing whitespace
            "ADR-0001",  # wrong prefix
            "DEC0001",  # missing dash
            "DEC-00a1",  # non-digit
            "",
        ],
    )
    def test_rejects_invalid_ids(self, value):
        """Anything else raises DecisionValidationError naming the id field."""
        with pytest.raises(DecisionValidationError) as exc_info:
            DecisionId.from_string(value)
        assert exc_info.value.field == "id"

    def test_direct_construction_validates(self):
        """Building the model directly applies the same rule."""
        with pytest.raises(PydanticValidationError):
            DecisionId(value="DEC-1")

    def test_equality_is_by_value(self):
        """Two ids with the same value are equal."""
        first = DecisionId.from_string("DEC-0042")
        second = DecisionId.from_string("DEC-0042")
        assert first == second
        assert first.equals(second)
        assert not first.equals(DecisionId.from_string("DEC-0043"))

    def test_str_returns_value(self):
        """str() gives the raw id."""
        assert str(DecisionId.from_string("DEC-0007")) == "DEC-0007"

    def test_is_immutable(self):
        """Ids cannot be modified after construction."""
        decision_id = DecisionId.from_string("DEC-0001")
        with pytest.raises(PydanticValidationError):
            decision_id.value = "DEC-0002"


class TestScope:
    """Scope matching."""

    @pytest.mark.parametrize("path", ["src/a.php", "tests/x.php", "", "anything/at/all"])
    def test_global_scope_applies_everywhere(self, path):
        """Global scope matches every path."""
        assert Scope(type=ScopeType.GLOBAL).applies_to(path)

    def test_path_scope_matches_globs(self):
        """Path scope matches when any pattern matches."""
        scope = Scope(type=ScopeType.PATH, paths=("src/*", "lib/*.py"))
        assert scope.applies_to("src/x.php")
        assert scope.applies_to("lib/tool.py")
        assert not scope.applies_to("tests/x.php")
        assert not scope.applies_to("lib/tool.js")

    def test_star_crosses_directories(self):
        """A single * also matches nested paths."""
        scope = Scope(type=ScopeType.PATH, paths=("src/*",))
        assert scope.applies_to("src/Domain/User.php")

    def test_matching_is_case_sensitive(self):
        """Pattern matching does not fold case."""
        scope = Scope(type=ScopeType.MODULE, paths=("src/*",))
        assert not scope.applies_to("SRC/x.php")

    def test_path_scope_without_patterns_matches_nothing(self):
        """A non-global scope with no patterns never applies."""
        assert not Scope(type=ScopeType.PATH).applies_to("src/x.php")

    def test_is_global(self):
        """is_global reflects the scope type."""
        assert Scope(type=ScopeType.GLOBAL).is_global
        assert not Scope(type=ScopeType.MODULE, paths=("src/*",)).is_global


class TestDecision:
    """The Decision aggregate."""

    def test_round_trip_from_data(self, make_decision):
        """Every accessor returns what was given."""
        decision = make_decision(
            id="DEC-0005",
            title="Use PSR-12",
            summary="Follow PSR-12 coding style",
            status="deprecated",
            scope_type="path",
            paths=["src/*"],
            rationale=["Consistency", "Tooling support"],
            keywords=["style", "lint"],
            examples={"allowed": ["$a = 1;"], "forbidden": ["$a=1;"]},
            rules={"forbid": ["tabs"], "allow": ["spaces"]},
            references={"issues": ["#1"], "commits": ["abc123"], "adr": "docs/adr/5.md"},
        )

        assert decision.id.value == "DEC-0005"
        assert decision.title == "Use PSR-12"
        assert decision.status is DecisionStatus.DEPRECATED
        assert decision.date == datetime.date(2026, 2, 3)
        assert decision.scope.type is ScopeType.PATH
        assert decision.scope.paths == ("src/*",)
        assert decision.content.summary == "Follow PSR-12 coding style"
        assert decision.content.rationale == ("Consistency", "Tooling support")
        assert decision.examples.allowed == ("$a = 1;",)
        assert decision.examples.forbidden == ("$a=1;",)
        assert decision.rules.forbid == ("tabs",)
        assert decision.rules.allow == ("spaces",)
        assert decision.references.issues == ("#1",)
        assert decision.references.commits == ("abc123",)
        assert decision.references.adr == "docs/adr/5.md"
        assert decision.ai_metadata.keywords == ("style", "lint")

    def test_code_examples_keep_whitespace(self, make_decision):
        """Indentation and trailing newlines of code examples are preserved."""
        snippet = "    $db->query('SELECT 1');\n"
        decision = make_decision(
            rationale=["  Indented reason"],
            examples={"allowed": [snippet], "forbidden": ["\t$orm->find(1);\n"]},
        )

        assert decision.examples.allowed == (snippet,)
        assert decision.examples.forbidden == ("\t$orm->find(1);\n",)
        assert decision.content.rationale == ("  Indented reason",)

    def test_optional_parts_are_none_when_absent(self, make_decision):
        """Rules, references and AI metadata stay None."""
        decision = make_decision()
        assert decision.rules is None
        assert decision.references is None
        assert decision.ai_metadata is None
        assert decision.examples.allowed == ()

    def test_is_active(self, make_decision):
        """Only the active status counts as active."""
        assert make_decision(status="active").is_active
        assert not make_decision(status="superseded").is_active

    def test_search_text_order(self):
        """Search text joins title, summary, rationale and keywords."""
        decision = Decision(
            id="DEC-0001",
            title="No ORMs",
            status=DecisionStatus.ACTIVE,
            date=datetime.date(2026, 1, 1),
            scope=Scope(type=ScopeType.GLOBAL),
            content=DecisionContent(summary="Use raw SQL", rationale=("Fast", "Explicit")),
            ai_metadata=AiMetadata(explain_style="short", keywords=("database",)),
        )
        assert decision.to_search_text() == "No ORMs Use raw SQL Fast Explicit database"

    def test_rationale_entries_must_be_non_empty(self):
        """Blank rationale entries are rejected."""
        with pytest.raises(PydanticValidationError):
            DecisionContent(summary="x", rationale=("ok", ""))

    def test_rules_has_rules(self):
        """has_rules is false only for empty lists."""
        assert not Rules().has_rules()
        assert Rules(forbid=("orm",)).has_rules()
