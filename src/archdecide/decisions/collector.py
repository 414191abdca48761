"""
Lists decision files in a directory.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union


@dataclass(frozen=True)
class CollectedFiles:
    """Decision files found in one directory, each list sorted by path."""

    yaml_files: List[Path] = field(default_factory=list)
    yml_files: List[Path] = field(default_factory=list)


class DecisionFileCollector:
    """
    Collects ``*.yaml`` and ``*.yml`` files (non-recursive).

    Symlinks and non-regular files are skipped; the extension check is
    case-insensitive.
    """

    @staticmethod
    def collect(directory: Union[str, Path]) -> CollectedFiles:
        yaml_files: List[Path] = []
        yml_files: List[Path] = []

        for entry in Path(directory).iterdir():
            if entry.is_symlink() or not entry.is_file():
                continue

            suffix = entry.suffix.lower()
            if suffix == ".yaml":
                yaml_files.append(entry)
            elif suffix == ".yml":
                yml_files.append(entry)

        return CollectedFiles(
            yaml_files=sorted(yaml_files, key=str),
            yml_files=sorted(yml_files, key=str),
        )
