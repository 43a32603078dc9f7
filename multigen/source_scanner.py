"""Inclusion list parsing and eligible source enumeration."""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from .logging import get_logger


def parse_inclusion_list(text: str) -> List[str]:
    """Newline-delimited ids; ``#`` starts a comment, blank lines are ignored."""
    ids: List[str] = []
    for line in text.splitlines():
        entry = line.split("#", 1)[0].strip()
        if entry:
            ids.append(entry)
    return ids


def read_inclusion_list(path: Path) -> List[str]:
    if not path.exists():
        return []
    return parse_inclusion_list(path.read_text(encoding="utf-8"))


class SourceScanner:
    """Lists the canonical class files that take part in a run.

    A file is eligible when its name contains ``pattern`` and its id (the
    name with ``pattern`` removed) is on the inclusion list. An empty
    inclusion list admits every discovered file.
    """

    def __init__(self, pattern: str = ".js", inclusion: Sequence[str] = ()) -> None:
        self.pattern = pattern
        self.inclusion = list(inclusion)
        self.logger = get_logger("scanner")

    def source_id(self, filename: str) -> str:
        if filename.endswith(self.pattern):
            return filename[: -len(self.pattern)]
        return Path(filename).stem

    def is_included(self, source_id: str) -> bool:
        return not self.inclusion or source_id in self.inclusion

    def scan(self, folder: Path) -> List[Path]:
        if not folder.is_dir():
            raise FileNotFoundError(f"Source folder {folder} does not exist")
        eligible: List[Path] = []
        for path in sorted(folder.iterdir()):
            if not path.is_file() or self.pattern not in path.name:
                continue
            if self.is_included(self.source_id(path.name)):
                eligible.append(path)
            else:
                self.logger.debug("Skipping %s (not in inclusion list)", path.name)
        return eligible


__all__ = ["SourceScanner", "parse_inclusion_list", "read_inclusion_list"]
