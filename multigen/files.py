"""Small filesystem helpers used by every generation step."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Union

from .logging import get_logger

logger = get_logger("files")


def overwrite_file(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def replace_in_file(
    path: Path,
    pattern: Union[str, "re.Pattern[str]"],
    replacement: str,
    *,
    flags: int = 0,
) -> bool:
    """Replace the first match of ``pattern`` in ``path`` with ``replacement`` verbatim.

    Returns False (and leaves the file alone) when nothing matches.
    """
    regex = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern, flags)
    text = path.read_text(encoding="utf-8")
    updated, count = regex.subn(lambda _: replacement, text, count=1)
    if not count:
        logger.warning("Pattern %s not found in %s; file left unchanged", regex.pattern, path)
        return False
    if updated != text:
        path.write_text(updated, encoding="utf-8")
    return True


__all__ = ["overwrite_file", "replace_in_file"]
