"""Rewrite rules and ordered rule catalogs."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Tuple, Union

from ..decomposer import FormatError

Replacement = Union[str, Callable[["re.Match[str]"], str]]
OverflowHandler = Callable[["Rule", str], None]


class NestingDepthError(FormatError):
    """A collection literal is nested deeper than the configured bound."""

    def __init__(self, rule: str, depth: int, *, source: str | None = None) -> None:
        self.rule = rule
        self.depth = depth
        super().__init__(
            f"{rule} still matches after {depth} passes; literal nested deeper than the bound",
            source=source,
        )


@dataclass(frozen=True)
class Rule:
    """A single global substitution.

    ``passes`` > 1 marks a bounded structural rule: the substitution is
    replayed that many times so each pass can peel one more level of
    nesting. Anything deeper than ``passes`` levels is left unconverted.
    """

    pattern: str
    replacement: Replacement
    flags: int = 0
    passes: int = 1
    name: str = ""
    _regex: "re.Pattern[str]" = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.passes < 1:
            raise ValueError(f"Rule {self.label} must run at least once")
        object.__setattr__(self, "_regex", re.compile(self.pattern, self.flags))

    @property
    def label(self) -> str:
        return self.name or self.pattern

    @property
    def bounded(self) -> bool:
        return self.passes > 1

    def apply(self, text: str) -> str:
        for _ in range(self.passes):
            text = self._regex.sub(self.replacement, text)
        return text

    def matches(self, text: str) -> bool:
        return self._regex.search(text) is not None


@dataclass(frozen=True)
class RuleCatalog:
    """Immutable, named, ordered list of rules.

    Rules run strictly in sequence over the whole accumulated text, so a
    later rule always observes what earlier rules produced.
    """

    name: str
    rules: Tuple[Rule, ...] = ()

    @classmethod
    def compose(cls, name: str, *parts: Union["RuleCatalog", Iterable[Rule]]) -> "RuleCatalog":
        collected: List[Rule] = []
        for part in parts:
            if isinstance(part, RuleCatalog):
                collected.extend(part.rules)
            else:
                collected.extend(part)
        return cls(name=name, rules=tuple(collected))

    def __len__(self) -> int:
        return len(self.rules)

    def apply(self, text: str, *, on_overflow: Optional[OverflowHandler] = None) -> str:
        """Replay every rule in order.

        When ``on_overflow`` is given it is called for each bounded rule that
        still matches right after its last pass, i.e. input nested deeper
        than the rule's bound.
        """
        for rule in self.rules:
            text = rule.apply(text)
            if on_overflow is not None and rule.bounded and rule.matches(text):
                on_overflow(rule, text)
        return text

    def self_check(self, text: str) -> List[str]:
        """Replay the catalog over its own output.

        Returns the labels of rules that still rewrite ``text``; an empty list
        means the output is a fixed point of the catalog.
        """
        changed: List[str] = []
        for rule in self.rules:
            updated = rule.apply(text)
            if updated != text:
                changed.append(rule.label)
                text = updated
        return changed


def indexed(template: str) -> Callable[["re.Match[str]"], str]:
    """Replacement that renders ``name[key]`` into ``template``.

    Group 1 is the name, group 2 the optional subscript; an unmatched
    subscript renders the bare name instead of an empty ``[]``.
    """

    def _replace(match: "re.Match[str]") -> str:
        target = match.group(1)
        if match.group(2) is not None:
            target = f"{target}[{match.group(2)}]"
        return template.format(target=target)

    return _replace


def nesting_guard(
    *, strict: bool, logger: "logging.Logger", source: Optional[str] = None
) -> OverflowHandler:
    """Overflow handler: raise in strict mode, otherwise log and keep going."""

    def _overflow(rule: Rule, _: str) -> None:
        if strict:
            raise NestingDepthError(rule.label, rule.passes, source=source)
        logger.warning(
            "%s: %s nested deeper than %d levels; output left partially converted",
            source or "<text>",
            rule.label,
            rule.passes,
        )

    return _overflow


def regex_all(text: str, rules: Iterable[Union[Rule, Tuple[str, Replacement]]]) -> str:
    """Apply ad-hoc ``(pattern, replacement)`` pairs or rules in order."""
    for item in rules:
        rule = item if isinstance(item, Rule) else Rule(item[0], item[1])
        text = rule.apply(text)
    return text


__all__ = [
    "NestingDepthError",
    "OverflowHandler",
    "Replacement",
    "Rule",
    "RuleCatalog",
    "indexed",
    "nesting_guard",
    "regex_all",
]
