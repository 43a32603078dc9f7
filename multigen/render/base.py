"""Renderer interface shared by every target backend."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from ..identifiers import IdentifierRegistry
from ..imports import DependencyInferencer
from ..logging import get_logger
from ..models import MethodUnit, SourceClass
from ..rules import CatalogSet, RuleCatalog, nesting_guard
from ..templating import TemplateRenderer


class Renderer(ABC):
    """Turns decomposed source classes into one target's file text."""

    target_id: str = ""
    extension: str = ""

    def __init__(
        self,
        catalogs: CatalogSet,
        templates: TemplateRenderer,
        inferencer: DependencyInferencer,
        *,
        strict_nesting: bool = True,
    ) -> None:
        self.catalogs = catalogs
        self.templates = templates
        self.inferencer = inferencer
        self.strict_nesting = strict_nesting
        self.logger = get_logger(f"render.{self.target_id}")

    def output_name(self, source: str) -> str:
        return f"{Path(source).stem}{self.extension}"

    @abstractmethod
    def render_signature(self, method: MethodUnit) -> str:
        """Return the method's declaration line (without indentation)."""

    @abstractmethod
    def render_body(
        self, method: MethodUnit, source_class: SourceClass, *, source: Optional[str] = None
    ) -> str:
        """Return the method body rewritten into the target dialect."""

    @abstractmethod
    def render_class(self, source_class: SourceClass, *, source: Optional[str] = None) -> str:
        """Return the complete file text for ``source_class``."""

    def render_method(
        self, method: MethodUnit, source_class: SourceClass, *, source: Optional[str] = None
    ) -> List[str]:
        return ["", f"    {self.render_signature(method)}", self.render_body(method, source_class, source=source)]

    def transpile(self, catalog: RuleCatalog, text: str, *, source: Optional[str] = None) -> str:
        guard = nesting_guard(strict=self.strict_nesting, logger=self.logger, source=source)
        result = catalog.apply(text, on_overflow=guard)
        if self.logger.isEnabledFor(logging.DEBUG):
            unstable = catalog.self_check(result)
            if unstable:
                self.logger.debug(
                    "%s: %s catalog output not stable under %s",
                    source or "<text>",
                    catalog.name,
                    ", ".join(unstable),
                )
        return result

    @staticmethod
    def class_methods(source_class: SourceClass) -> IdentifierRegistry:
        return IdentifierRegistry(tuple(source_class.method_names))


__all__ = ["Renderer"]
