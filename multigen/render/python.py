"""Dynamic target backends: generation 3 (async) and generation 2 (sync)."""

from __future__ import annotations

import re
from typing import List, Optional

from ..identifiers import un_camel_case
from ..models import MethodUnit, Parameter, SourceClass
from ..rules import finish_python_body
from .base import Renderer

_LITERALS = (
    (re.compile(r"\bundefined\b"), "None"),
    (re.compile(r"\bfalse\b"), "False"),
    (re.compile(r"\btrue\b"), "True"),
)


def python_default(literal: str) -> str:
    for pattern, replacement in _LITERALS:
        literal = pattern.sub(replacement, literal)
    return literal


def python_parameter(parameter: Parameter) -> str:
    if parameter.default is None:
        return parameter.name
    return f"{parameter.name}={python_default(parameter.default)}"


class Python3Renderer(Renderer):
    """Generation 3: ``async def`` methods importing from ``async_support``."""

    target_id = "python3"
    extension = ".py"
    asynchronous = True

    def render_signature(self, method: MethodUnit) -> str:
        arguments = ", ".join(["self", *(python_parameter(p) for p in method.parameters)])
        keyword = "async " if self.asynchronous and method.is_async else ""
        return f"{keyword}def {un_camel_case(method.name)}({arguments}):"

    def render_body(
        self, method: MethodUnit, source_class: SourceClass, *, source: Optional[str] = None
    ) -> str:
        body = self.transpile(self.catalogs.python3, method.body, source=source)
        return finish_python_body(body, class_name=source_class.name, remove_empty_lines=True)

    def render_class(self, source_class: SourceClass, *, source: Optional[str] = None) -> str:
        pieces: List[str] = []
        for method in source_class.methods:
            pieces.extend(self.render_method(method, source_class, source=source))
        body = "\n".join(pieces)
        body = self.class_methods(source_class).rename_calls(body, "self.")
        imports = self.inferencer.infer(body, source_class.base_class, asynchronous=self.asynchronous)
        return self.templates.render(
            "python_class.j2",
            imports=imports,
            class_name=source_class.name,
            base_class=source_class.base_class,
            body=body,
        )


class Python2Renderer(Python3Renderer):
    """Generation 2: the generation 3 output minus ``async``/``await``."""

    target_id = "python2"
    asynchronous = False

    def render_body(
        self, method: MethodUnit, source_class: SourceClass, *, source: Optional[str] = None
    ) -> str:
        body = super().render_body(method, source_class, source=source)
        return self.transpile(self.catalogs.python2, body, source=source)


__all__ = ["Python2Renderer", "Python3Renderer", "python_default", "python_parameter"]
