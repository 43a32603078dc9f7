"""Import inference for generated Python modules."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from .logging import get_logger

# rendered call prefix -> module to import
STDLIB_SYMBOLS: Mapping[str, str] = {
    "base64": "base64",
    "hashlib": "hashlib",
    "math": "math",
    "json.loads": "json",
    "json.dumps": "json",
    "sys.exit": "sys",
}

PRECISION_CONSTANTS: Tuple[str, ...] = (
    "ROUND",
    "TRUNCATE",
    "ROUND_UP",
    "ROUND_DOWN",
    "DECIMAL_PLACES",
    "SIGNIFICANT_DIGITS",
    "TICK_SIZE",
    "NO_PADDING",
    "PAD_WITH_ZERO",
)

_BUILTIN_EXCEPTIONS = frozenset(
    (
        "Exception",
        "BaseException",
        "ValueError",
        "TypeError",
        "KeyError",
        "IndexError",
        "RuntimeError",
        "NotImplementedError",
        "NameError",
        "AttributeError",
    )
)
_RAISED_NAME = re.compile(r"\braise\s+([A-Z]\w*)\s*\(")


def _token(name: str) -> "re.Pattern[str]":
    return re.compile(rf"(?<![\w.'\"]){re.escape(name)}(?![\w'\"])")


@dataclass
class ImportPlan:
    """Import preamble computed for one rendered module."""

    base: str
    stdlib: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    precision: List[str] = field(default_factory=list)
    needs_basestring: bool = False
    missing: List[str] = field(default_factory=list)
    namespace: str = "ccxt"

    @property
    def module_lines(self) -> List[str]:
        lines = [f"import {module}" for module in self.stdlib]
        lines.extend(f"from {self.namespace}.base.errors import {name}" for name in self.errors)
        lines.extend(
            f"from {self.namespace}.base.decimal_to_precision import {name}"
            for name in self.precision
        )
        return lines

    def lines(self) -> List[str]:
        return [self.base, *self.module_lines]


class DependencyInferencer:
    """Scans rendered Python text and works out which imports it needs.

    A symbol is imported exactly when its token occurs in the text as a
    standalone identifier: not inside a quoted string, not as an attribute
    of something else, and not as a prefix of a longer name.
    """

    def __init__(
        self,
        error_names: Iterable[str] = (),
        *,
        namespace: str = "ccxt",
        stdlib: Mapping[str, str] = STDLIB_SYMBOLS,
        precision_constants: Sequence[str] = PRECISION_CONSTANTS,
    ) -> None:
        self.namespace = namespace
        self.error_names = tuple(dict.fromkeys(error_names))
        self.logger = get_logger("imports")
        self._stdlib: Dict[str, "re.Pattern[str]"] = {symbol: _token(symbol) for symbol in stdlib}
        self._stdlib_modules = dict(stdlib)
        self._errors = {name: _token(name) for name in self.error_names}
        self._precision = {name: _token(name) for name in precision_constants}

    def base_import(self, base_class: str, *, asynchronous: bool = False) -> str:
        package = f"{self.namespace}.async_support" if asynchronous else self.namespace
        if base_class.startswith(f"{self.namespace}."):
            return f"import {package} as {self.namespace}"
        if base_class == "Exchange":
            return f"from {package}.base.exchange import Exchange"
        return f"from {package}.{base_class} import {base_class}"

    def infer(self, text: str, base_class: str, *, asynchronous: bool = False) -> ImportPlan:
        plan = ImportPlan(
            base=self.base_import(base_class, asynchronous=asynchronous),
            namespace=self.namespace,
            needs_basestring=_token("basestring").search(text) is not None,
        )
        for symbol, pattern in self._stdlib.items():
            module = self._stdlib_modules[symbol]
            if module not in plan.stdlib and pattern.search(text):
                plan.stdlib.append(module)
        plan.errors = [name for name, pattern in self._errors.items() if pattern.search(text)]
        plan.precision = [name for name, pattern in self._precision.items() if pattern.search(text)]
        plan.missing = self._missing_errors(text)
        return plan

    def _missing_errors(self, text: str) -> List[str]:
        missing: List[str] = []
        for name in _RAISED_NAME.findall(text):
            if name in self._errors or name in _BUILTIN_EXCEPTIONS or name in missing:
                continue
            missing.append(name)
            self.logger.warning("No error hierarchy entry for %s; no import emitted", name)
        return missing


__all__ = ["DependencyInferencer", "ImportPlan", "PRECISION_CONSTANTS", "STDLIB_SYMBOLS"]
