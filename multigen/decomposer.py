"""Structural decomposition of a canonical class file into method units."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple

from .logging import get_logger
from .models import MethodUnit, Parameter, SourceClass

_CLASS_HEADER = re.compile(
    r"^module\.exports\s*=\s*class\s+(\S+)\s+extends\s+(\S+)\s+\{([\s\S]+?)^\};*",
    re.M,
)
_METHOD_SEPARATOR = re.compile(r"\n\s*\n")
_SIGNATURE = re.compile(r"^(async )?([\w$]+)\s\(([^)]*)\)\s*\{$")
_LOCAL_DECLARATION = re.compile(
    r"(?:^|[^a-zA-Z0-9_])(?:let|const|var)\s+(?:\[([^\]]+)\]|([a-zA-Z0-9_]+))"
)
_CATCH_CLAUSE = re.compile(r"catch \(([^)]+)\)")
_EMPTY_LINE_HINT = "Make sure your methods don't have empty lines!"


class FormatError(ValueError):
    """Raised when source text does not follow the class/method grammar."""

    def __init__(self, message: str, *, source: Optional[str] = None) -> None:
        self.source = source
        self.reason = message
        prefix = f"{source}: " if source else ""
        super().__init__(f"{prefix}{message}")


class StructuralDecomposer:
    """Splits a class file into a header and blank-line delimited methods.

    Methods are separated by one or more blank lines, so a method body must
    not itself contain an empty line. Each block must open with a signature
    line ``[async ]name (args) {`` and close with the matching ``}``.
    """

    def __init__(self) -> None:
        self.logger = get_logger("decomposer")

    def decompose(self, text: str, *, source: Optional[str] = None) -> SourceClass:
        header = _CLASS_HEADER.search(text)
        if header is None:
            raise FormatError(
                "no `module.exports = class <Name> extends <Base> {` declaration found",
                source=source,
            )
        name, base_class, body = header.group(1), header.group(2), header.group(3)
        blocks = tuple(_METHOD_SEPARATOR.split(body.strip()))
        methods = tuple(self._parse_method(block, source=source) for block in blocks)
        self.logger.debug("Decomposed %s extends %s into %d methods", name, base_class, len(methods))
        return SourceClass(
            name=name,
            base_class=base_class,
            method_blocks=blocks,
            methods=methods,
        )

    def _parse_method(self, block: str, *, source: Optional[str]) -> MethodUnit:
        lines = block.strip().split("\n")
        signature = lines[0].strip()
        match = _SIGNATURE.match(signature)
        if match is None:
            raise FormatError(
                f"unrecognised method signature {signature!r}. {_EMPTY_LINE_HINT}",
                source=source,
            )
        parameters = parse_parameters(match.group(3), source=source)
        body = "\n".join(lines[1:-1])
        bindings = extract_bindings(body, [parameter.name for parameter in parameters])
        return MethodUnit(
            name=match.group(2),
            is_async=bool(match.group(1)),
            parameters=parameters,
            body=body,
            bindings=bindings,
        )


def parse_parameters(text: str, *, source: Optional[str] = None) -> Tuple[Parameter, ...]:
    """Parse ``a, b = undefined, c = {}`` into ordered parameters."""
    text = text.strip()
    if not text:
        return ()
    parameters: List[Parameter] = []
    for raw in _split_top_level(text):
        raw = raw.strip()
        name, sep, default = raw.partition("=")
        name = name.strip()
        if not re.match(r"^[A-Za-z_$][\w$]*$", name):
            raise FormatError(f"unsupported parameter {raw!r}", source=source)
        parameters.append(Parameter(name=name, default=default.strip() if sep else None))
    return tuple(parameters)


def _split_top_level(text: str) -> List[str]:
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    for char in text:
        if char in "{[(":
            depth += 1
        elif char in "}])":
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return parts


def extract_bindings(body: str, parameters: Sequence[str] = ()) -> Tuple[str, ...]:
    """Names bound inside a method: parameters, locals and catch variables.

    Destructuring declarations (``let [ a, b ] = ...``) contribute every
    element. Order is first occurrence; duplicates are dropped.
    """
    names: List[str] = list(parameters)
    for match in _LOCAL_DECLARATION.finditer(body):
        if match.group(1):
            names.extend(part.strip() for part in match.group(1).strip().split(","))
        else:
            names.append(match.group(2).strip())
    names.extend(match.group(1).strip() for match in _CATCH_CLAUSE.finditer(body))
    unique: List[str] = []
    for name in names:
        if name and name not in unique:
            unique.append(name)
    return tuple(unique)


__all__ = ["FormatError", "StructuralDecomposer", "extract_bindings", "parse_parameters"]
