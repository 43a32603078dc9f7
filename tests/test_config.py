"""Tests for multigen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from multigen.config import ConfigError, MultigenConfig, load_config
from multigen.registry import DEFAULT_PRUNE_EXCLUDE
from multigen.rules import DEFAULT_NESTING_DEPTH


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)
    root = tmp_path.resolve()

    assert isinstance(config, MultigenConfig)
    assert config.root == root
    assert config.namespace == "ccxt"
    assert config.templates_dir is None
    assert config.source.folder == root / "js"
    assert config.source.inclusion_list == root / "exchanges.cfg"
    assert config.source.pattern == ".js"
    assert config.targets.enabled == ["python2", "python3", "php"]
    assert config.targets.folder("python3") == root / "python" / "ccxt" / "async_support"
    assert config.manifest.path == root / "ccxt.d.ts"
    assert sorted(config.fixtures) == ["crypto", "datetime", "precision"]
    assert config.rules.nesting_depth == DEFAULT_NESTING_DEPTH
    assert config.rules.strict_nesting is True
    assert config.prune.exclude == list(DEFAULT_PRUNE_EXCLUDE)
    assert config.sync_driver.remove_functions == ["test_tickers_async", "test_l2_order_books_async"]


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".multigen.yml"
    config_file.write_text(
        """
namespace: "acme"
templates_dir: "build/templates"
source:
  folder: "src"
  inclusion_list: "enabled.txt"
  pattern: ".mjs"
targets:
  php: "out/php"
  enabled: [python3, PHP]
manifest: "types/acme.d.ts"
errors:
  hierarchy: "src/errors.js"
fixtures:
  crypto:
    enabled: false
sync_driver:
  remove_functions: [test_only_async]
  enabled: "no"
rules:
  nesting_depth: 8
  strict_nesting: false
identifiers:
  extra: [fetchWidgets, signIn]
prune:
  exclude: ["keep*"]
  enabled: false
""",
        encoding="utf-8",
    )

    config = load_config(config_file)
    root = tmp_path.resolve()

    assert config.namespace == "acme"
    assert config.templates_dir == root / "build/templates"
    assert config.source.folder == root / "src"
    assert config.source.inclusion_list == root / "enabled.txt"
    assert config.source.pattern == ".mjs"
    assert config.targets.php == root / "out" / "php"
    assert config.targets.python2 == root / "python" / "ccxt"
    assert config.targets.enabled == ["python3", "php"]
    assert config.manifest.path == root / "types" / "acme.d.ts"
    assert config.errors.hierarchy == root / "src" / "errors.js"
    assert config.errors.python == root / "python" / "ccxt" / "base" / "errors.py"
    assert config.fixtures["crypto"].enabled is False
    assert config.fixtures["precision"].enabled is True
    assert config.sync_driver.remove_functions == ["test_only_async"]
    assert config.sync_driver.enabled is False
    assert config.rules.nesting_depth == 8
    assert config.rules.strict_nesting is False
    assert config.rules.extra_identifiers == ["fetchWidgets", "signIn"]
    assert config.prune.exclude == ["keep*"]
    assert config.prune.enabled is False


def test_load_config_accepts_file_path_in_root(tmp_path: Path) -> None:
    (tmp_path / ".multigen.yml").write_text("namespace: acme\n", encoding="utf-8")

    assert load_config(tmp_path / "anything.txt").namespace == "acme"


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".multigen.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).namespace == "ccxt"


@pytest.mark.parametrize(
    "content",
    [
        "namespace: [unterminated\n",
        "- just\n- a list\n",
        "rules:\n  nesting_depth: 0\n",
        "rules:\n  nesting_depth: deep\n",
        "fixtures:\n  unknown:\n    enabled: true\n",
    ],
)
def test_invalid_config_raises(tmp_path: Path, content: str) -> None:
    (tmp_path / ".multigen.yml").write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_unknown_target_raises(tmp_path: Path) -> None:
    (tmp_path / ".multigen.yml").write_text("targets:\n  enabled: [ruby]\n", encoding="utf-8")

    with pytest.raises(ValueError, match="ruby"):
        load_config(tmp_path)
