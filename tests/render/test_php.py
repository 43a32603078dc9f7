"""Tests for the PHP renderer."""

from __future__ import annotations

import re

import pytest

from multigen.decomposer import StructuralDecomposer
from multigen.imports import DependencyInferencer
from multigen.models import Parameter, SourceClass
from multigen.render import PhpRenderer
from multigen.render.php import php_default, php_parameter
from multigen.rules import CatalogSet, NestingDepthError
from multigen.templating import TemplateRenderer
from tests._fixtures.project_builder import FOO_SOURCE

DEEP_SOURCE = (
    "module.exports = class deep extends Exchange {\n"
    "    nested () {\n"
    "        return " + "[ " * 21 + "1" + " ]" * 21 + ";\n"
    "    }\n"
    "};\n"
)


@pytest.fixture
def foo() -> SourceClass:
    return StructuralDecomposer().decompose(FOO_SOURCE, source="foo.js")


@pytest.fixture
def php(catalogs: CatalogSet, templates: TemplateRenderer, inferencer: DependencyInferencer) -> PhpRenderer:
    return PhpRenderer(catalogs, templates, inferencer)


def test_php_class_header(php: PhpRenderer, foo: SourceClass) -> None:
    text = php.render_class(foo)

    assert text.startswith("<?php\n")
    assert "namespace ccxt;" in text
    assert "use Exception; // a common import" in text
    assert "class foo extends Exchange {" in text
    assert text.rstrip().endswith("}")


def test_php_methods_use_sigils_and_arrows(php: PhpRenderer, foo: SourceClass) -> None:
    text = php.render_class(foo, source="foo.js")

    assert "    public function fetch_order_book ($symbol, $limit = null) {" in text
    assert "        $response = $this->publicGetDepth ($symbol, $limit);" in text
    assert "        return $this->safe_integer ($response, 'id');" in text
    assert "    public function fetch_balance ($params = array ()) {" in text
    assert "        $balances = $this->fetch_order_book ('BTC/USD');" in text
    assert "        if ($balances === null) {" in text
    assert "            throw new ExchangeError($this->id . ' empty balance');" in text
    assert "        return $balances;" in text
    assert "await" not in text


def test_php_describe_merges_with_parent(php: PhpRenderer, foo: SourceClass) -> None:
    text = php.render_class(foo)

    assert "return array_replace_recursive (parent::describe (), array (" in text
    assert "'id' => 'foo'," in text


def test_methods_keep_source_order(php: PhpRenderer, foo: SourceClass) -> None:
    text = php.render_class(foo)

    positions = [
        text.index(f"public function {name} (")
        for name in ("describe", "fetch_order_book", "fetch_balance")
    ]

    assert positions == sorted(positions)
    assert text.count("public function ") == 3


@pytest.mark.parametrize(
    ("parameter", "rendered"),
    [
        (Parameter("symbol"), "$symbol"),
        (Parameter("limit", "undefined"), "$limit = null"),
        (Parameter("params", "{}"), "$params = array ()"),
        (Parameter("codes", "[]"), "$codes = array ()"),
    ],
)
def test_php_parameter_defaults(parameter: Parameter, rendered: str) -> None:
    assert php_parameter(parameter) == rendered


def test_overly_nested_literal_fails_in_strict_mode(php: PhpRenderer) -> None:
    deep = StructuralDecomposer().decompose(DEEP_SOURCE, source="deep.js")

    with pytest.raises(NestingDepthError) as excinfo:
        php.render_class(deep, source="deep.js")

    assert excinfo.value.source == "deep.js"


def test_overly_nested_literal_warns_when_not_strict(
    catalogs: CatalogSet,
    templates: TemplateRenderer,
    inferencer: DependencyInferencer,
    caplog: pytest.LogCaptureFixture,
) -> None:
    renderer = PhpRenderer(catalogs, templates, inferencer, strict_nesting=False)
    deep = StructuralDecomposer().decompose(DEEP_SOURCE, source="deep.js")

    text = renderer.render_class(deep, source="deep.js")

    assert "public function nested () {" in text
    assert "deep.js" in caplog.text


def test_rendered_signature_round_trips_parameters(php: PhpRenderer, foo: SourceClass) -> None:
    for method in foo.methods:
        signature = php.render_signature(method)
        inner = re.search(r"\((.*)\) \{$", signature).group(1)
        arguments = inner.split(", ") if inner else []

        recovered = [tuple(argument.split(" = ", 1)) for argument in arguments]
        expected = [
            (f"${p.name}",) if p.default is None else (f"${p.name}", php_default(p.default))
            for p in method.parameters
        ]
        assert recovered == expected


def test_registry_names_survive_only_in_snake_case(php: PhpRenderer, foo: SourceClass) -> None:
    text = php.render_class(foo)

    assert "safeInteger" not in text
    assert "fetchOrderBook" not in text
    assert "$this->fetch_order_book (" in text
