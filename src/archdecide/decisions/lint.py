"""
Decision file linting for CI.

Validates syntax and schema of every decision file and reports all
problems at once instead of stopping at the first one.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Sequence, Set, Union

from archdecide.core.exceptions import DecisionValidationError
from archdecide.core.logging import logger
from archdecide.decisions.collector import DecisionFileCollector
from archdecide.decisions.factory import DecisionFactory
from archdecide.decisions.loader import YamlDecisionLoader
from archdecide.models.decision import Decision

# (path inside the YAML document, label used in messages)
STRING_LIST_FIELDS = (
    (("scope", "paths"), "scope.paths"),
    (("decision", "rationale"), "decision.rationale"),
    (("decision", "alternatives"), "decision.alternatives"),
    (("examples", "allowed"), "examples.allowed"),
    (("examples", "forbidden"), "examples.forbidden"),
    (("rules", "forbid"), "rules.forbid"),
    (("rules", "allow"), "rules.allow"),
    (("ai", "keywords"), "ai.keywords"),
)


@dataclass
class LintReport:
    """Outcome of a lint run."""

    directory: Path
    files: List[Path] = field(default_factory=list)
    decisions: List[Decision] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


class DecisionLinter:
    """
    Lints a decisions directory.

    Checks:
    1. Directory exists and is readable
    2. No ``.yml`` files (the loader only reads ``.yaml``)
    3. Each file parses to a YAML mapping and satisfies the decision schema
    4. List fields contain only non-empty strings
    5. No decision id is used twice
    """

    def __init__(self, directory: Union[str, Path], require_any: bool = False):
        self.directory = Path(directory)
        self.require_any = require_any

    def run(self) -> LintReport:
        report = LintReport(directory=self.directory)

        if not self.directory.is_dir():
            report.errors.append(f"Decisions directory not found: {self.directory}")
            return report

        try:
            collected = DecisionFileCollector.collect(self.directory)
        except OSError as e:
            logger.error("Unable to read decisions directory", directory=str(self.directory))
            report.errors.append(f"Unable to read directory: {self.directory} ({e})")
            return report

        for yml_file in collected.yml_files:
            report.errors.append(
                f'Unsupported extension ".yml" (loader only reads ".yaml"): {yml_file.name}'
            )

        report.files = list(collected.yaml_files)
        if not report.files:
            message = f"No decision files found in {self.directory}"
            if self.require_any and not report.errors:
                report.errors.append(message)
            elif not report.errors:
                report.warnings.append(message)
            return report

        for file_path in report.files:
            self._lint_file(file_path, report)

        report.errors.extend(self.duplicate_id_errors(report.decisions))

        logger.info(
            "Decision lint finished",
            files=len(report.files),
            decisions=len(report.decisions),
            errors=len(report.errors),
        )
        return report

    def _lint_file(self, file_path: Path, report: LintReport) -> None:
        label = file_path.name

        try:
            data = YamlDecisionLoader.read_file(file_path)
        except DecisionValidationError as e:
            report.errors.append(e.message)
            return

        if not isinstance(data, dict):
            report.errors.append(f"{label}: decision file must parse to a YAML mapping/object")
            return

        try:
            report.decisions.append(DecisionFactory.from_dict(data))
        except DecisionValidationError as e:
            report.errors.append(f"{label}: {e.message}")
            return

        report.errors.extend(self.string_list_errors(data, label))

    @staticmethod
    def string_list_errors(data: Dict[str, Any], label: str) -> List[str]:
        errors: List[str] = []

        for path, field_label in STRING_LIST_FIELDS:
            value = _nested_value(data, path)
            if value is None:
                continue

            if not isinstance(value, list):
                errors.append(f"{label}: {field_label} must be an array of strings")
                continue

            for index, item in enumerate(value):
                if not isinstance(item, str) or not item.strip():
                    errors.append(f"{label}: {field_label}[{index}] must be a non-empty string")

        return errors

    @staticmethod
    def duplicate_id_errors(decisions: Sequence[Decision]) -> List[str]:
        errors: List[str] = []
        seen: Set[str] = set()

        for decision in decisions:
            decision_id = decision.id.value
            if decision_id in seen:
                errors.append(f'Duplicate decision id "{decision_id}" (seen in multiple files)')
                continue
            seen.add(decision_id)

        return errors


def _nested_value(data: Dict[str, Any], path: Sequence[str]) -> Any:
    current: Any = data
    for key in path:
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current
