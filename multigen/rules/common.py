"""Rules shared by every target, spliced into each target catalog."""

from __future__ import annotations

import re
from typing import Tuple

from ..identifiers import IdentifierRegistry
from .base import Rule, RuleCatalog

_FIXED_RULES: Tuple[Rule, ...] = (
    Rule(r"errorHierarchy", "error_hierarchy", name="error-hierarchy-name"),
    Rule(r"'use strict';?\s+", "", name="strip-use-strict"),
)


def registry_rules(registry: IdentifierRegistry) -> Tuple[Rule, ...]:
    """Call-site renames in the canonical dialect (``receiver.name (``)."""
    return tuple(
        Rule(
            rf"\.{re.escape(camel)}(?=\s*\()",
            f".{snake}",
            name=f"rename:{camel}",
        )
        for camel, snake in registry.mapping.items()
        if camel != snake
    )


def build_common_catalog(registry: IdentifierRegistry) -> RuleCatalog:
    return RuleCatalog.compose("common", registry_rules(registry), _FIXED_RULES)


__all__ = ["build_common_catalog", "registry_rules"]
