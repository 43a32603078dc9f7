"""Rule catalogs and their explicit composition per target."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from ..identifiers import DEFAULT_REGISTRY, IdentifierRegistry
from .base import NestingDepthError, Rule, RuleCatalog, nesting_guard, regex_all
from .common import build_common_catalog
from .php import DEFAULT_NESTING_DEPTH, build_php_catalog, variable_rules
from .python import build_python2_catalog, build_python3_catalog, finish_python_body


@dataclass(frozen=True)
class CatalogSet:
    """Every catalog one run needs, built once from the same registry."""

    registry: IdentifierRegistry
    common: RuleCatalog
    python3: RuleCatalog
    python2: RuleCatalog
    php: RuleCatalog
    nesting_depth: int = DEFAULT_NESTING_DEPTH

    def php_variables(self, names: Iterable[str]) -> RuleCatalog:
        # binding names go through the common renames so they line up with the body
        return variable_rules(self.common.apply(name) for name in names)


def build_catalogs(
    registry: IdentifierRegistry = DEFAULT_REGISTRY,
    *,
    nesting_depth: int = DEFAULT_NESTING_DEPTH,
    error_names: Sequence[str] = (),
    namespace: str = "ccxt",
) -> CatalogSet:
    common = build_common_catalog(registry)
    return CatalogSet(
        registry=registry,
        common=common,
        python3=build_python3_catalog(common),
        python2=build_python2_catalog(),
        php=build_php_catalog(
            common,
            error_names=error_names,
            namespace=namespace,
            depth=nesting_depth,
        ),
        nesting_depth=nesting_depth,
    )


__all__ = [
    "CatalogSet",
    "DEFAULT_NESTING_DEPTH",
    "NestingDepthError",
    "Rule",
    "RuleCatalog",
    "build_catalogs",
    "finish_python_body",
    "nesting_guard",
    "regex_all",
]
