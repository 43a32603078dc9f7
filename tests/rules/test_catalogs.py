"""Tests for rule catalogs, their composition and the nesting bound."""

from __future__ import annotations

import pytest

from multigen.decomposer import StructuralDecomposer
from multigen.identifiers import DEFAULT_REGISTRY
from multigen.logging import get_logger
from multigen.rules import (
    DEFAULT_NESTING_DEPTH,
    CatalogSet,
    NestingDepthError,
    Rule,
    RuleCatalog,
    build_catalogs,
    nesting_guard,
)
from multigen.rules.common import build_common_catalog
from multigen.rules.php import build_php_catalog
from tests._fixtures.project_builder import FOO_SOURCE


def _nested_array(depth: int) -> str:
    return "[ " * depth + "1" + " ]" * depth


def test_rules_apply_in_order_over_accumulated_text() -> None:
    catalog = RuleCatalog(
        "demo",
        (
            Rule(r"undefined", "None"),
            Rule(r"(\w+) === None", r"\1 is None"),
        ),
    )

    assert catalog.apply("x === undefined") == "x is None"


def test_compose_splices_catalogs_in_order() -> None:
    common = RuleCatalog("common", (Rule("b", "c"),))
    composed = RuleCatalog.compose("target", [Rule("a", "b")], common, [Rule("c", "d")])

    assert [rule.pattern for rule in composed.rules] == ["a", "b", "c"]
    assert composed.apply("a") == "d"


def test_rule_requires_at_least_one_pass() -> None:
    with pytest.raises(ValueError):
        Rule("a", "b", passes=0)


def test_target_catalogs_embed_common_rules(catalogs: CatalogSet) -> None:
    common_rules = set(catalogs.common.rules)

    assert common_rules <= set(catalogs.python3.rules)
    assert common_rules <= set(catalogs.php.rules)


def test_common_catalog_renames_call_sites_only() -> None:
    common = build_common_catalog(DEFAULT_REGISTRY)
    text = "this.safeInteger (response, 'id'); this.safeIntegerX (a); safeInteger (b); this.safeInteger2 (c, 'a', 'b')"

    result = common.apply(text)

    assert "this.safe_integer (response, 'id')" in result
    assert "this.safeIntegerX (a)" in result
    assert "safeInteger (b)" in result
    assert "this.safe_integer_2 (c, 'a', 'b')" in result


def test_catalog_output_is_deterministic(catalogs: CatalogSet) -> None:
    body = "        const response = await this.publicGetDepth (symbol, limit);\n        return this.safeInteger (response, 'id');"

    first = catalogs.php.apply(body)
    second = catalogs.php.apply(body)

    assert first == second
    assert catalogs.python3.apply(body) == catalogs.python3.apply(body)


def test_interpolation_placeholders_survive_brace_rules(catalogs: CatalogSet) -> None:
    result = catalogs.php.apply("        const path = '/orders/{id}';")

    assert "'/orders/{id}'" in result
    assert "array" not in result


def test_nested_array_within_bound_is_fully_converted(catalogs: CatalogSet) -> None:
    result = catalogs.php.apply(_nested_array(DEFAULT_NESTING_DEPTH))

    assert "[" not in result
    assert result.count("array (") == DEFAULT_NESTING_DEPTH


def test_nested_array_beyond_bound_is_left_incomplete(catalogs: CatalogSet) -> None:
    result = catalogs.php.apply(_nested_array(DEFAULT_NESTING_DEPTH + 1))

    assert result.count("[") == 1
    assert result.count("array (") == DEFAULT_NESTING_DEPTH


def test_overflow_raises_in_strict_mode(catalogs: CatalogSet) -> None:
    guard = nesting_guard(strict=True, logger=get_logger("tests"), source="deep.js")

    catalogs.php.apply(_nested_array(DEFAULT_NESTING_DEPTH), on_overflow=guard)
    with pytest.raises(NestingDepthError) as excinfo:
        catalogs.php.apply(_nested_array(DEFAULT_NESTING_DEPTH + 1), on_overflow=guard)

    assert excinfo.value.source == "deep.js"
    assert excinfo.value.depth == DEFAULT_NESTING_DEPTH


def test_overflow_logs_warning_when_not_strict(catalogs: CatalogSet, caplog: pytest.LogCaptureFixture) -> None:
    guard = nesting_guard(strict=False, logger=get_logger("tests"), source="deep.js")

    result = catalogs.php.apply(_nested_array(DEFAULT_NESTING_DEPTH + 1), on_overflow=guard)

    assert result.count("[") == 1
    assert "nested deeper than" in caplog.text


def test_configurable_nesting_depth() -> None:
    shallow = build_catalogs(nesting_depth=2)

    assert "[" not in shallow.php.apply(_nested_array(2))
    assert shallow.php.apply(_nested_array(3)).count("[") == 1


def test_php_variables_get_sigils_only_on_whole_identifiers(catalogs: CatalogSet) -> None:
    variables = catalogs.php_variables(["id", "order"])

    result = variables.apply("return this->id + id + idx + 'id' + order.id;")

    assert result == "return this->id + $id + idx + 'id' + $order->id;"


def test_php_catalog_rejects_non_positive_depth() -> None:
    common = build_common_catalog(DEFAULT_REGISTRY)

    with pytest.raises(ValueError):
        build_php_catalog(common, depth=0)


def test_self_check_reports_rules_that_still_rewrite() -> None:
    catalog = RuleCatalog("demo", (Rule(r"a", "b", name="a-to-b"), Rule(r"c", "d", name="c-to-d")))

    assert catalog.self_check("bd") == []
    assert catalog.self_check("ab") == ["a-to-b"]


@pytest.mark.parametrize("target", ["python3", "php"])
def test_rendered_bodies_are_fixed_points(catalogs: CatalogSet, target: str) -> None:
    catalog = getattr(catalogs, target)
    foo = StructuralDecomposer().decompose(FOO_SOURCE, source="foo.js")

    for method in foo.methods:
        rendered = catalog.apply(method.body)

        assert catalog.self_check(rendered) == []
        assert catalog.apply(rendered) == rendered
