"""Sigil-based target backend (PHP)."""

from __future__ import annotations

import re
from typing import List, Optional

from ..identifiers import un_camel_case
from ..models import MethodUnit, Parameter, SourceClass
from .base import Renderer

_LITERALS = (
    (re.compile(r"\bundefined\b"), "null"),
    (re.compile(r"\{\}"), "array ()"),
    (re.compile(r"\[\]"), "array ()"),
)


def php_default(literal: str) -> str:
    for pattern, replacement in _LITERALS:
        literal = pattern.sub(replacement, literal)
    return literal


def php_parameter(parameter: Parameter) -> str:
    if parameter.default is None:
        return f"${parameter.name}"
    return f"${parameter.name} = {php_default(parameter.default)}"


class PhpRenderer(Renderer):
    target_id = "php"
    extension = ".php"

    def render_signature(self, method: MethodUnit) -> str:
        arguments = ", ".join(php_parameter(p) for p in method.parameters)
        return f"public function {un_camel_case(method.name)} ({arguments}) {{"

    def render_body(
        self, method: MethodUnit, source_class: SourceClass, *, source: Optional[str] = None
    ) -> str:
        body = self.transpile(self.catalogs.php, method.body, source=source)
        return self.catalogs.php_variables(method.bindings).apply(body)

    def render_method(
        self, method: MethodUnit, source_class: SourceClass, *, source: Optional[str] = None
    ) -> List[str]:
        return [*super().render_method(method, source_class, source=source), "    }"]

    def render_class(self, source_class: SourceClass, *, source: Optional[str] = None) -> str:
        pieces: List[str] = []
        for method in source_class.methods:
            pieces.extend(self.render_method(method, source_class, source=source))
        body = "\n".join(pieces)
        body = self.class_methods(source_class).rename_calls(body, "this->", spacing=" ")
        return self.templates.render(
            "php_class.j2",
            class_name=source_class.name,
            base_class=source_class.base_class,
            body=body,
        )


__all__ = ["PhpRenderer", "php_default", "php_parameter"]
