"""Auxiliary one-off transpilations: error hierarchy and base test fixtures."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .config import ErrorsConfig, FixtureConfig
from .decomposer import extract_bindings
from .files import overwrite_file, replace_in_file
from .hierarchy import hierarchy_source
from .logging import get_logger
from .rules import CatalogSet, finish_python_body, nesting_guard, regex_all
from .templating import TemplateRenderer

_USE_STRICT = (r"'use strict';?\s+", "")
_REQUIRE_LINES = (r"[^\n]+require[^\n]+\n", "")

# per-fixture clean-up of the canonical test file before it enters the catalogs
PREPARE_RULES: Dict[str, Tuple[Tuple[str, str], ...]] = {
    "precision": (
        _USE_STRICT,
        _REQUIRE_LINES,
        (r"decimalToPrecision", "decimal_to_precision"),
        (r"numberToString", "number_to_string"),
    ),
    "datetime": (
        _REQUIRE_LINES,
        (r"(?m)^/\*.*\s+", ""),
    ),
    "crypto": (
        _USE_STRICT,
        _REQUIRE_LINES,
        (r"function equals \([\S\s]+?return true\n}\n", ""),
    ),
}

PYTHON_ERRORS_REGION = re.compile(r"error_hierarchy = .+?\n\}", re.S)
PHP_ERRORS_REGION = re.compile(r"\$error_hierarchy = .+?\n\);", re.S)


@dataclass(frozen=True)
class TranspiledText:
    python3: str
    python2: str
    php: str


class FixtureTranspiler:
    """Runs free-standing canonical text (not a class) through every catalog."""

    def __init__(
        self,
        catalogs: CatalogSet,
        templates: TemplateRenderer,
        *,
        strict_nesting: bool = True,
    ) -> None:
        self.catalogs = catalogs
        self.templates = templates
        self.strict_nesting = strict_nesting
        self.logger = get_logger("fixtures")

    def transpile(self, js: str, *, source: Optional[str] = None) -> TranspiledText:
        guard = nesting_guard(strict=self.strict_nesting, logger=self.logger, source=source)
        python3 = finish_python_body(self.catalogs.python3.apply(js, on_overflow=guard))
        python2 = self.catalogs.python2.apply(python3)
        php = self.catalogs.php.apply(js, on_overflow=guard)
        php = self.catalogs.php_variables(extract_bindings(js)).apply(php)
        return TranspiledText(python3=python3, python2=python2, php=php)

    def transpile_fixture(self, fixture: FixtureConfig) -> List[Path]:
        if not fixture.source.exists():
            self.logger.warning("Fixture source %s not found; skipping %s", fixture.source, fixture.name)
            return []
        self.logger.info("Transpiling from %s", fixture.source)
        js = fixture.source.read_text(encoding="utf-8")
        js = regex_all(js, PREPARE_RULES.get(fixture.name, ()))
        result = self.transpile(js, source=fixture.source.name)

        python = (
            self.templates.render("python_test.j2")
            + self.templates.render(f"fixtures/{fixture.name}_python.j2")
            + result.python2
        )
        php = (
            self.templates.render("php_test.j2")
            + self.templates.render(f"fixtures/{fixture.name}_php.j2")
            + result.php
        )
        self.logger.info("-> %s", fixture.python)
        self.logger.info("-> %s", fixture.php)
        return [overwrite_file(fixture.python, python), overwrite_file(fixture.php, php)]

    def transpile_error_hierarchy(self, errors: ErrorsConfig) -> List[Path]:
        if not errors.hierarchy.exists():
            self.logger.warning("Error hierarchy %s not found; skipping", errors.hierarchy)
            return []
        js = hierarchy_source(errors.hierarchy.read_text(encoding="utf-8"))
        result = self.transpile(js, source=errors.hierarchy.name)
        updated: List[Path] = []
        for path, region, replacement in (
            (errors.python, PYTHON_ERRORS_REGION, result.python3),
            (errors.php, PHP_ERRORS_REGION, result.php),
        ):
            if not path.exists():
                self.logger.warning("%s not found; error hierarchy not embedded", path)
                continue
            self.logger.info("Transpiling error hierarchy -> %s", path)
            if replace_in_file(path, region, replacement):
                updated.append(path)
        return updated


__all__ = [
    "FixtureTranspiler",
    "PHP_ERRORS_REGION",
    "PREPARE_RULES",
    "PYTHON_ERRORS_REGION",
    "TranspiledText",
]
