"""Error hierarchy definitions (error name -> parent name)."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Optional

from .decomposer import FormatError

_TOKEN = re.compile(r"(?:'(\w+)'\s*:\s*)?\{|\}")
_EXPORT_STATEMENT = re.compile(r"module\.exports\s*=\s*[^;\n]+;?\n?")


def parse_error_hierarchy(text: str, *, source: Optional[str] = None) -> Dict[str, Optional[str]]:
    """Flatten the nested ``'Name': { ... }`` literal into ``name -> parent``.

    Top-level errors map to ``None``. Insertion order follows the source,
    so parents always precede their children.
    """
    hierarchy: Dict[str, Optional[str]] = {}
    stack: List[Optional[str]] = []
    for match in _TOKEN.finditer(text):
        if match.group(0) == "}":
            if not stack:
                raise FormatError("unbalanced braces in error hierarchy", source=source)
            stack.pop()
            continue
        name = match.group(1)
        if name is not None:
            parent = next((entry for entry in reversed(stack) if entry is not None), None)
            hierarchy[name] = parent
        stack.append(name)
    if stack:
        raise FormatError("unterminated error hierarchy literal", source=source)
    return hierarchy


def load_error_hierarchy(path: Path) -> Dict[str, Optional[str]]:
    return parse_error_hierarchy(path.read_text(encoding="utf-8"), source=path.name)


def hierarchy_source(text: str) -> str:
    """Canonical hierarchy text ready for the rule catalogs (export line removed)."""
    return _EXPORT_STATEMENT.sub("", text).strip()


__all__ = ["hierarchy_source", "load_error_hierarchy", "parse_error_hierarchy"]
