"""Tests for the fixture and error hierarchy transpilation steps."""

from __future__ import annotations

import pytest

from multigen.fixtures import FixtureTranspiler
from multigen.rules import CatalogSet
from multigen.templating import TemplateRenderer
from tests._fixtures.project_builder import ProjectBuilder

PRECISION_SOURCE = """
'use strict';

const assert = require ('assert');
const { decimalToPrecision, ROUND } = require ('../../../base/functions/number');

assert (decimalToPrecision ('12.3456', ROUND, 2) === '12.35');
"""

PYTHON_ERRORS = """
error_hierarchy = {
    'Stale': {},
}


class BaseError(Exception):
    pass
"""

PHP_ERRORS = """
<?php

namespace ccxt;

$error_hierarchy = array (
    'Stale' => array (),
);

class BaseError extends \\Exception {};
"""


@pytest.fixture
def transpiler(catalogs: CatalogSet, templates: TemplateRenderer) -> FixtureTranspiler:
    return FixtureTranspiler(catalogs, templates)


def test_transpile_runs_every_catalog(transpiler: FixtureTranspiler) -> None:
    result = transpiler.transpile("const total = await this.sum (a, b);\n")

    assert result.python3 == "total = await self.sum(a, b)\n"
    assert result.python2 == "total = self.sum(a, b)\n"
    assert result.php == "$total = $this->sum (a, b);\n"


def test_precision_fixture_written_for_both_targets(
    project_builder: ProjectBuilder, transpiler: FixtureTranspiler
) -> None:
    project_builder.write({"js/test/base/functions/test.number.js": PRECISION_SOURCE})
    fixture = project_builder.config().fixtures["precision"]

    written = transpiler.transpile_fixture(fixture)

    assert written == [fixture.python, fixture.php]
    python = fixture.python.read_text(encoding="utf-8")
    php = fixture.php.read_text(encoding="utf-8")
    assert "from ccxt.base.decimal_to_precision import decimal_to_precision" in python
    assert "assert(decimal_to_precision('12.3456', ROUND, 2) == '12.35')" in python
    assert "require" not in python
    assert php.startswith("<?php\nnamespace ccxt;\n")
    assert "decimal_to_precision ('12.3456', ROUND, 2) === '12.35'" in php
    assert "require" not in php


def test_missing_fixture_source_is_skipped(
    project_builder: ProjectBuilder, transpiler: FixtureTranspiler, caplog: pytest.LogCaptureFixture
) -> None:
    fixture = project_builder.config().fixtures["crypto"]

    assert transpiler.transpile_fixture(fixture) == []
    assert not fixture.python.exists()
    assert "not found" in caplog.text


def test_error_hierarchy_embedded_in_both_modules(
    project_builder: ProjectBuilder, transpiler: FixtureTranspiler
) -> None:
    project_builder.write_error_hierarchy()
    project_builder.write(
        {
            "python/ccxt/base/errors.py": PYTHON_ERRORS,
            "php/base/errors.php": PHP_ERRORS,
        }
    )
    errors = project_builder.config().errors

    updated = transpiler.transpile_error_hierarchy(errors)

    assert updated == [errors.python, errors.php]
    python = errors.python.read_text(encoding="utf-8")
    php = errors.php.read_text(encoding="utf-8")
    assert "Stale" not in python
    assert "error_hierarchy = {\n    'BaseError': {\n        'ExchangeError': {" in python
    assert "class BaseError(Exception):" in python
    assert "Stale" not in php
    assert "$error_hierarchy = array (\n    'BaseError' => array (" in php
    assert "'AuthenticationError' => array()," in php
    assert "class BaseError extends \\Exception {};" in php


def test_error_hierarchy_without_targets_is_skipped(
    project_builder: ProjectBuilder, transpiler: FixtureTranspiler
) -> None:
    project_builder.write_error_hierarchy()

    assert transpiler.transpile_error_hierarchy(project_builder.config().errors) == []
