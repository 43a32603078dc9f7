"""Tests for import inference over rendered Python text."""

from __future__ import annotations

import pytest

from multigen.imports import DependencyInferencer


@pytest.fixture
def inferencer() -> DependencyInferencer:
    return DependencyInferencer(["BaseError", "ExchangeError", "AuthenticationError"])


def test_standalone_tokens_are_imported(inferencer: DependencyInferencer) -> None:
    text = "x = math.floor(y)\nraise AuthenticationError('a')\nz = ROUND_UP\n"

    plan = inferencer.infer(text, "Exchange")

    assert plan.stdlib == ["math"]
    assert plan.errors == ["AuthenticationError"]
    assert plan.precision == ["ROUND_UP"]
    assert plan.missing == []


def test_quoted_and_attribute_tokens_are_ignored(inferencer: DependencyInferencer) -> None:
    text = "name = 'math'\nself.hashlib = None\nmessage = 'ExchangeError'\nROUND_UPPER = 1\n"

    plan = inferencer.infer(text, "Exchange")

    assert plan.stdlib == []
    assert plan.errors == []
    assert plan.precision == []


def test_json_helpers_map_to_one_module(inferencer: DependencyInferencer) -> None:
    plan = inferencer.infer("a = json.loads(b)\nc = json.dumps(a)\n", "Exchange")

    assert plan.stdlib == ["json"]


def test_basestring_shim_requested(inferencer: DependencyInferencer) -> None:
    plan = inferencer.infer("if isinstance(x, basestring):\n", "Exchange")

    assert plan.needs_basestring is True


def test_unknown_raised_name_is_reported(
    inferencer: DependencyInferencer, caplog: pytest.LogCaptureFixture
) -> None:
    plan = inferencer.infer("raise NotSupported('x')\nraise ValueError('y')\n", "Exchange")

    assert plan.missing == ["NotSupported"]
    assert "NotSupported" in caplog.text
    assert "ValueError" not in caplog.text


@pytest.mark.parametrize(
    ("base_class", "asynchronous", "expected"),
    [
        ("Exchange", True, "from ccxt.async_support.base.exchange import Exchange"),
        ("Exchange", False, "from ccxt.base.exchange import Exchange"),
        ("foo", True, "from ccxt.async_support.foo import foo"),
        ("ccxt.foo", False, "import ccxt as ccxt"),
    ],
)
def test_base_import(
    inferencer: DependencyInferencer, base_class: str, asynchronous: bool, expected: str
) -> None:
    assert inferencer.base_import(base_class, asynchronous=asynchronous) == expected


def test_module_lines_order(inferencer: DependencyInferencer) -> None:
    plan = inferencer.infer("hashlib.sha256\nraise ExchangeError('x')\nTRUNCATE\n", "Exchange")

    assert plan.module_lines == [
        "import hashlib",
        "from ccxt.base.errors import ExchangeError",
        "from ccxt.base.decimal_to_precision import TRUNCATE",
    ]
    assert plan.lines()[0] == "from ccxt.base.exchange import Exchange"
