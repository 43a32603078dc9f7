"""Configuration loading for multigen (.multigen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .registry import DEFAULT_PRUNE_EXCLUDE
from .render import TARGET_IDS
from .rules import DEFAULT_NESTING_DEPTH

CONFIG_FILENAME = ".multigen.yml"
DEFAULT_ASYNC_ONLY_TESTS = ("test_tickers_async", "test_l2_order_books_async")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class SourceConfig:
    """Where canonical class files live and which of them participate."""

    folder: Path
    inclusion_list: Path
    pattern: str = ".js"


@dataclass
class TargetConfig:
    """Enabled targets and their output folders."""

    python2: Path
    python3: Path
    php: Path
    enabled: List[str] = field(default_factory=lambda: list(TARGET_IDS))

    def folder(self, target_id: str) -> Path:
        return {"python2": self.python2, "python3": self.python3, "php": self.php}[target_id]


@dataclass
class ManifestConfig:
    path: Path


@dataclass
class ErrorsConfig:
    """Error hierarchy source and the generated modules that embed it."""

    hierarchy: Path
    python: Path
    php: Path


@dataclass
class FixtureConfig:
    """One auxiliary test fixture transpiled into both targets."""

    name: str
    source: Path
    python: Path
    php: Path
    enabled: bool = True


@dataclass
class SyncDriverConfig:
    source: Path
    target: Path
    remove_functions: List[str] = field(default_factory=lambda: list(DEFAULT_ASYNC_ONLY_TESTS))
    enabled: bool = True


@dataclass
class RulesConfig:
    nesting_depth: int = DEFAULT_NESTING_DEPTH
    strict_nesting: bool = True
    extra_identifiers: List[str] = field(default_factory=list)


@dataclass
class PruneConfig:
    exclude: List[str] = field(default_factory=lambda: list(DEFAULT_PRUNE_EXCLUDE))
    enabled: bool = True


@dataclass
class MultigenConfig:
    """Represents the settings defined in .multigen.yml (all paths resolved against root)."""

    root: Path
    source: SourceConfig
    targets: TargetConfig
    manifest: ManifestConfig
    errors: ErrorsConfig
    fixtures: Dict[str, FixtureConfig]
    sync_driver: SyncDriverConfig
    rules: RulesConfig = field(default_factory=RulesConfig)
    prune: PruneConfig = field(default_factory=PruneConfig)
    namespace: str = "ccxt"
    templates_dir: Optional[Path] = None


def default_config(root: Path) -> MultigenConfig:
    """The conventional layout: ``js/`` sources, ``python/`` and ``php/`` outputs."""
    root = root.resolve()
    fixtures_dir = root / "js" / "test" / "base" / "functions"
    return MultigenConfig(
        root=root,
        source=SourceConfig(folder=root / "js", inclusion_list=root / "exchanges.cfg"),
        targets=TargetConfig(
            python2=root / "python" / "ccxt",
            python3=root / "python" / "ccxt" / "async_support",
            php=root / "php",
        ),
        manifest=ManifestConfig(path=root / "ccxt.d.ts"),
        errors=ErrorsConfig(
            hierarchy=root / "js" / "base" / "errorHierarchy.js",
            python=root / "python" / "ccxt" / "base" / "errors.py",
            php=root / "php" / "base" / "errors.php",
        ),
        fixtures={
            "precision": FixtureConfig(
                name="precision",
                source=fixtures_dir / "test.number.js",
                python=root / "python" / "test" / "test_decimal_to_precision.py",
                php=root / "php" / "test" / "decimal_to_precision.php",
            ),
            "datetime": FixtureConfig(
                name="datetime",
                source=fixtures_dir / "test.datetime.js",
                python=root / "python" / "test" / "test_exchange_datetime_functions.py",
                php=root / "php" / "test" / "test_exchange_datetime_functions.php",
            ),
            "crypto": FixtureConfig(
                name="crypto",
                source=fixtures_dir / "test.crypto.js",
                python=root / "python" / "test" / "test_crypto.py",
                php=root / "php" / "test" / "test_crypto.php",
            ),
        },
        sync_driver=SyncDriverConfig(
            source=root / "python" / "test" / "test_async.py",
            target=root / "python" / "test" / "test.py",
        ),
    )


def load_config(config_path: Path) -> MultigenConfig:
    """Load configuration from disk, falling back to defaults for anything unset."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()
    config = default_config(root)

    if not config_file.exists():
        return config

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config.namespace = _as_str(data.get("namespace")) or config.namespace
    templates_dir = _as_str(data.get("templates_dir"))
    config.templates_dir = root / templates_dir if templates_dir else None

    source_data = _as_dict(data.get("source"))
    if source_data:
        config.source.folder = _as_path(root, source_data.get("folder")) or config.source.folder
        config.source.inclusion_list = (
            _as_path(root, source_data.get("inclusion_list")) or config.source.inclusion_list
        )
        config.source.pattern = _as_str(source_data.get("pattern")) or config.source.pattern

    target_data = _as_dict(data.get("targets"))
    if target_data:
        for target_id in TARGET_IDS:
            folder = _as_path(root, target_data.get(target_id))
            if folder is not None:
                setattr(config.targets, target_id, folder)
        if "enabled" in target_data:
            enabled = [name.lower() for name in _as_str_list(target_data.get("enabled"))]
            unknown = sorted(set(enabled).difference(TARGET_IDS))
            if unknown:
                raise ValueError(f"Unknown targets requested: {', '.join(unknown)}")
            config.targets.enabled = enabled

    manifest = _as_path(root, data.get("manifest"))
    if manifest is not None:
        config.manifest.path = manifest

    errors_data = _as_dict(data.get("errors"))
    if errors_data:
        config.errors.hierarchy = _as_path(root, errors_data.get("hierarchy")) or config.errors.hierarchy
        config.errors.python = _as_path(root, errors_data.get("python")) or config.errors.python
        config.errors.php = _as_path(root, errors_data.get("php")) or config.errors.php

    for name, fixture_data in _as_dict(data.get("fixtures")).items():
        fixture_data = _as_dict(fixture_data)
        fixture = config.fixtures.get(name)
        if fixture is None:
            raise ConfigError(f"Unknown fixture '{name}' in {CONFIG_FILENAME}")
        fixture.source = _as_path(root, fixture_data.get("source")) or fixture.source
        fixture.python = _as_path(root, fixture_data.get("python")) or fixture.python
        fixture.php = _as_path(root, fixture_data.get("php")) or fixture.php
        enabled = _as_bool(fixture_data.get("enabled"))
        if enabled is not None:
            fixture.enabled = enabled

    sync_data = _as_dict(data.get("sync_driver"))
    if sync_data:
        driver = config.sync_driver
        driver.source = _as_path(root, sync_data.get("source")) or driver.source
        driver.target = _as_path(root, sync_data.get("target")) or driver.target
        if "remove_functions" in sync_data:
            driver.remove_functions = _as_str_list(sync_data.get("remove_functions"))
        enabled = _as_bool(sync_data.get("enabled"))
        if enabled is not None:
            driver.enabled = enabled

    rules_data = _as_dict(data.get("rules"))
    if rules_data:
        depth = _as_int(rules_data.get("nesting_depth"))
        if depth is not None:
            if depth < 1:
                raise ConfigError("rules.nesting_depth must be a positive integer")
            config.rules.nesting_depth = depth
        strict = _as_bool(rules_data.get("strict_nesting"))
        if strict is not None:
            config.rules.strict_nesting = strict

    identifier_data = _as_dict(data.get("identifiers"))
    if identifier_data:
        config.rules.extra_identifiers = _as_str_list(identifier_data.get("extra"))

    prune_data = _as_dict(data.get("prune"))
    if prune_data:
        if "exclude" in prune_data:
            config.prune.exclude = _as_str_list(prune_data.get("exclude"))
        enabled = _as_bool(prune_data.get("enabled"))
        if enabled is not None:
            config.prune.enabled = enabled

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    if isinstance(value, dict):
        return value
    return {}


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return str(value)


def _as_path(root: Path, value: Any) -> Optional[Path]:
    text = _as_str(value)
    if text is None:
        return None
    return (root / text).resolve()


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Expected an integer, got {value!r}") from None


def _as_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1", "on"}:
            return True
        if lowered in {"false", "no", "0", "off"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = value.strip()
        return [value] if value else []
    if isinstance(value, (list, tuple, set)):
        result: List[str] = []
        for item in value:
            text = _as_str(item)
            if text:
                result.append(text)
        return result
    return []


__all__ = [
    "ConfigError",
    "ErrorsConfig",
    "FixtureConfig",
    "ManifestConfig",
    "MultigenConfig",
    "PruneConfig",
    "RulesConfig",
    "SourceConfig",
    "SyncDriverConfig",
    "TargetConfig",
    "default_config",
    "load_config",
]
