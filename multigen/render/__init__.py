"""Target renderers and discovery by target id."""

from __future__ import annotations

from typing import Callable, Dict, List, Sequence, Set

from ..imports import DependencyInferencer
from ..rules import CatalogSet
from ..templating import TemplateRenderer
from .base import Renderer
from .php import PhpRenderer
from .python import Python2Renderer, Python3Renderer

_BUILTIN_FACTORIES: Dict[str, Callable[..., Renderer]] = {
    "python2": Python2Renderer,
    "python3": Python3Renderer,
    "php": PhpRenderer,
}

TARGET_IDS = tuple(_BUILTIN_FACTORIES)


def discover_renderers(
    enabled: Sequence[str] | None,
    *,
    catalogs: CatalogSet,
    templates: TemplateRenderer,
    inferencer: DependencyInferencer,
    strict_nesting: bool = True,
) -> List[Renderer]:
    """Instantiate renderers for the enabled targets (all when ``enabled`` is None)."""

    requested: Set[str] | None = None
    if enabled is not None:
        requested = {name.lower() for name in enabled}
        unknown = requested.difference(_BUILTIN_FACTORIES)
        if unknown:
            raise ValueError(f"Unknown targets requested: {', '.join(sorted(unknown))}")

    renderers: List[Renderer] = []
    for name, factory in _BUILTIN_FACTORIES.items():
        if requested is not None and name not in requested:
            continue
        instance = factory(catalogs, templates, inferencer, strict_nesting=strict_nesting)
        if not isinstance(instance, Renderer):
            raise TypeError(f"Renderer factory for '{name}' did not return a Renderer instance")
        renderers.append(instance)
    return renderers


__all__ = [
    "PhpRenderer",
    "Python2Renderer",
    "Python3Renderer",
    "Renderer",
    "TARGET_IDS",
    "discover_renderers",
]
