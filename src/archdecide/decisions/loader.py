"""
Decision sources.

A DecisionLoader yields validated Decision values; where they come from
(YAML files, fixtures) does not matter to the repository.
"""

from pathlib import Path
from typing import Any, Iterable, Iterator, List, Protocol, Tuple, Union, runtime_checkable

import yaml

from archdecide.core.exceptions import DecisionValidationError, NotFoundError
from archdecide.core.logging import logger
from archdecide.decisions.collector import DecisionFileCollector
from archdecide.decisions.factory import DecisionFactory
from archdecide.models.decision import Decision


@runtime_checkable
class DecisionLoader(Protocol):
    """Producer of a finite, possibly lazy, sequence of decisions."""

    def load(self) -> Iterable[Decision]:
        ...  # pragma: no cover


class YamlDecisionLoader:
    """
    Loads every ``*.yaml`` file of a decisions directory, in sorted order.

    ``.yml`` files are ignored here; the lint command reports them.
    """

    def __init__(self, directory: Union[str, Path]):
        path = Path(directory)
        if not path.is_dir():
            error = NotFoundError(
                f"The provided path is not a directory: {directory}",
                context={"directory": str(directory)},
            )
            error.add_suggestion("Create the directory or pass --dir with the decisions location")
            raise error
        self.directory = path

    def load(self) -> Iterator[Decision]:
        """
        Lazily yield decisions.

        Raises:
            DecisionValidationError: prefixed with the file name, on the
                first file that fails to parse or validate
        """
        for file_path in self._files():
            yield self.load_file(file_path)

    def load_with_errors(self) -> Tuple[List[Decision], List[str]]:
        """Load every file, collecting "<file>: <message>" errors instead of raising."""
        decisions: List[Decision] = []
        errors: List[str] = []

        for file_path in self._files():
            try:
                decisions.append(self.load_file(file_path))
            except DecisionValidationError as e:
                errors.append(e.message)

        return decisions, errors

    @staticmethod
    def read_file(file_path: Path) -> Any:
        """Parse a YAML file, raising DecisionValidationError labeled with its name."""
        label = file_path.name
        try:
            with open(file_path, encoding="utf-8") as f:
                return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise DecisionValidationError(
                f"{label}: invalid YAML ({_describe_yaml_error(e)})",
                context={"source": label},
                cause=e,
            ) from None
        except (OSError, UnicodeDecodeError) as e:
            raise DecisionValidationError(
                f"{label}: unable to read file ({e})", context={"source": label}, cause=e
            ) from None

    @classmethod
    def load_file(cls, file_path: Path) -> Decision:
        data = cls.read_file(file_path)
        try:
            decision = DecisionFactory.from_dict(data)
        except DecisionValidationError as e:
            raise e.with_source(file_path.name) from None

        logger.debug("Decision loaded", decision_id=decision.id.value, file=file_path.name)
        return decision

    def _files(self) -> List[Path]:
        return DecisionFileCollector.collect(self.directory).yaml_files


class InMemoryDecisionLoader:
    """Loader over decisions that already exist in memory (fixtures, caches)."""

    def __init__(self, decisions: Iterable[Decision]):
        self._decisions = list(decisions)

    def load(self) -> Iterator[Decision]:
        return iter(self._decisions)


def _describe_yaml_error(error: yaml.YAMLError) -> str:
    mark = getattr(error, "problem_mark", None)
    problem = getattr(error, "problem", None)
    if mark is not None and problem:
        return f"{problem} at line {mark.line + 1}, column {mark.column + 1}"
    return str(error).replace("\n", " ")
