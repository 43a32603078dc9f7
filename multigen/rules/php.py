"""Rules for the sigil-based target (PHP)."""

from __future__ import annotations

import re
from typing import Iterable, List, Sequence, Tuple

from .base import Rule, RuleCatalog, indexed

DEFAULT_NESTING_DEPTH = 20

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# ``{name}`` url placeholders look exactly like object literals; they are
# parked behind ``~name~`` until every brace rule has run.
ESCAPE_INTERPOLATION = Rule(r"\{([a-zA-Z0-9_]+?)\}", r"~\1~", name="escape-interpolation")
RESTORE_INTERPOLATION = Rule(r"~([a-zA-Z0-9_]+?)~", r"{\1}", name="restore-interpolation")

PHP_PRE: Tuple[Rule, ...] = (
    ESCAPE_INTERPOLATION,
    Rule(
        r"Array\.isArray\s*\(([^)]+)\)",
        r"gettype (\1) === 'array' && count (array_filter (array_keys (\1), 'is_string')) == 0",
    ),
    Rule(r"typeof\s+([^\s\[]+)(?:\s|\[(.+?)\])\s+===?\s+'undefined'", indexed("{target} === null")),
    Rule(r"typeof\s+([^\s\[]+)(?:\s|\[(.+?)\])\s+!==?\s+'undefined'", indexed("{target} !== null")),
    Rule(r"typeof\s+([^\s]+)\s+===?\s+'undefined'", r"\1 === null"),
    Rule(r"typeof\s+([^\s]+)\s+!==?\s+'undefined'", r"\1 !== null"),
    Rule(r"typeof\s+(.+?)\s+===?\s+'undefined'", r"\1 === null"),
    Rule(r"typeof\s+(.+?)\s+!==?\s+'undefined'", r"\1 !== null"),
    Rule(r"([^\s\[]+)(?:\s|\[(.+?)\])\s+===?\s+undefined", indexed("{target} === null")),
    Rule(r"([^\s\[]+)(?:\s|\[(.+?)\])\s+!==?\s+undefined", indexed("{target} !== null")),
    Rule(r"([^\s]+)\s+===?\s+undefined", r"\1 === null"),
    Rule(r"([^\s]+)\s+!==?\s+undefined", r"\1 !== null"),
    Rule(r"(.+?)\s+===?\s+undefined", r"\1 === null"),
    Rule(r"(.+?)\s+!==?\s+undefined", r"\1 !== null"),
    Rule(r"typeof\s+([^\s\[]+)(?:\s|\[(.+?)\])\s+===?\s+'string'", indexed("gettype ({target}) === 'string'")),
    Rule(r"typeof\s+([^\s\[]+)(?:\s|\[(.+?)\])\s+!==?\s+'string'", indexed("gettype ({target}) !== 'string'")),
    Rule(r"typeof\s+([^\s]+)\s+===?\s+'string'", r"gettype (\1) === 'string'"),
    Rule(r"typeof\s+([^\s]+)\s+!==?\s+'string'", r"gettype (\1) !== 'string'"),
    Rule(r"undefined", "null"),
    Rule(r"this\.extend", "array_merge"),
    Rule(r"this\.stringToBinary\s*\((.*)\)", r"\1"),
    Rule(r"this\.stringToBase64", "base64_encode"),
    Rule(r"this\.binaryToBase16\s", "bin2hex"),
    Rule(r"this\.base64ToBinary", "base64_decode"),
    Rule(r"this\.deepExtend", "array_replace_recursive"),
    Rule(r"(\w+)\.shift\s*\(\)", r"array_shift(\1)"),
    Rule(r"(\w+)\.pop\s*\(\)", r"array_pop(\1)"),
)


def _members_and_literals(depth: int) -> Tuple[Rule, ...]:
    return (
        Rule(r"this\.", "$this->"),
        Rule(r" this;", " $this;"),
        Rule(r"([^'])this_\.", r"\1$this_->"),
        Rule(r"\{\}", "array()"),
        Rule(r"\[\]", "array()"),
        Rule(r"\{([^\n}]+)\}", r"array(\1)", passes=depth, name="inline-object"),
        Rule(r"(^|[^a-zA-Z0-9_])(?:let|const|var)\s\[\s*([^\]]+)\s\]", r"\1list(\2)"),
        Rule(r"(^|[^a-zA-Z0-9_])(?:let|const|var)\s\{\s*([^}]+)\s\}", r"\1array_values(list(\2))"),
        Rule(r"(^|[^a-zA-Z0-9_])(?:let|const|var)\s", r"\1"),
        Rule(r"Object\.keys\s*\((.*)\)\.length", r"\1"),
        Rule(r"Object\.keys\s*\((.*)\)", r"is_array(\1) ? array_keys(\1) : array()"),
        Rule(r"([^\s]+\s*\(\))\.toString \(\)", r"(string) \1"),
        Rule(r"([^\s]+)\.toString \(\)", r"(string) \1"),
    )


def _exceptions(error_names: Sequence[str], namespace: str) -> Tuple[Rule, ...]:
    rules: List[Rule] = [
        Rule(r"throw new Error \((.*)\)", r"throw new \\Exception(\1)"),
        Rule(r"throw new (\S+) \((.*)\)", r"throw new \1(\2)"),
        Rule(r"throw (\S+);", r"throw $\1;"),
    ]
    if error_names:
        alternatives = "|".join(
            re.escape(name) for name in sorted(error_names, key=len, reverse=True)
        )
        # the doubled backslashes survive as single ones inside a PHP single-quoted string
        rules.append(
            Rule(
                rf"([^a-z]+) ({alternatives})(?!\w)([^\s])",
                rf"\1 '\\\\{namespace}\\\\\2'\3",
                name="qualify-exception-names",
            )
        )
    rules.append(Rule(r"\}\s+catch \((\S+)\) \{", r"} catch (Exception $\1) {"))
    return tuple(rules)


def _control_flow(depth: int) -> Tuple[Rule, ...]:
    return (
        Rule(
            r"for\s+\(([a-zA-Z0-9_]+)\s*=\s*([^;\s]+\s*);[^<>=]+(<=|>=|<|>)\s*(.*)\.length\s*;([^)]+)\)\s*\{",
            r"for (\1 = \2; \1 \3 count (\4);\5) {",
        ),
        Rule(
            r"for\s+\(([a-zA-Z0-9_]+)\s*=\s*([^;\s]+\s*);[^<>=]+(<=|>=|<|>)\s*(.*)\s*;([^)]+)\)\s*\{",
            r"for (\1 = \2; \1 \3 \4;\5) {",
        ),
        Rule(r"([^\s]+)\.length;", r"is_array (\1) ? count (\1) : 0;"),
        Rule(r"([^\s(]+)\.length", r"strlen (\1)"),
        Rule(r"\.push\s*\(([\s\S]+?)\);", r"[] = \1;"),
        Rule(r"(\s)await(\s)", r"\1"),
        Rule(r"(\S): ", r"\1 => "),
        Rule(r"\{([^;{]+?)\}([^\s])", r"array (\1)\2", passes=depth, name="block-object"),
        Rule(r"\[\s*([^\]]+?)\s*\]\.join\s*\(\s*([^)]+?)\s*\)", r"implode(\2, array(\1))"),
        Rule(r"\[(\s[^\]]+?\s)\]", r"array (\1)", passes=depth, name="array-literal"),
    )


def _library_calls(namespace: str) -> Tuple[Rule, ...]:
    return (
        Rule(r"JSON\.stringify", "json_encode"),
        Rule(r"JSON\.parse\s+\(([^)]+)\)", r"json_decode(\1, $as_associative_array = true)"),
        Rule(r"([^(\s]+)\.includes\s+\(([^)]+)\)", r"mb_strpos(\1, \2)"),
        Rule(r"([^\s]+)\.toFixed\s*\(([0-9]+)\)", r"sprintf('%.\2f', \1)"),
        Rule(r"([^\s]+)\.toFixed\s*\(([^)]+)\)", r"sprintf('%.' . \2 . 'f', \1)"),
        Rule(r"parseFloat\s", "floatval "),
        Rule(r"parseInt\s", "intval "),
        Rule(r" \+ ", " . "),
        Rule(r" \+= ", " .= "),
        Rule(r"([^\s(]+(?:\s*\(.+\))?)\.toUpperCase\s*\(\)", r"strtoupper(\1)"),
        Rule(r"([^\s(]+(?:\s*\(.+\))?)\.toLowerCase\s*\(\)", r"strtolower(\1)"),
        Rule(r"([^\s(]+(?:\s*\(.+\))?)\.replace\s*\(([^)]+)\)", r"str_replace(\2, \1)"),
        Rule(r"this\[([^\]+]+)\]", r"$this->$\1"),
        Rule(r"([^\s(]+)\.slice \(([^):,]+)\)", r"mb_substr(\1, \2)"),
        Rule(r"([^\s(]+)\.slice \(([^,)]+),\s*([^)]+)\)", r"mb_substr(\1, \2, \3 - \2)"),
        Rule(r"([^\s(]+)\.split \(('[^']*'|[^,]+?)\)", r"explode(\2, \1)"),
        Rule(r"Math\.floor\s*\(([^)]+)\)", r"(int) floor(\1)"),
        Rule(r"Math\.abs\s*\(([^)]+)\)", r"abs (\1)"),
        Rule(r"Math\.round\s*\(([^)]+)\)", r"(int) round(\1)"),
        Rule(r"Math\.ceil\s*\(([^)]+)\)", r"(int) ceil(\1)"),
        Rule(r"Math\.pow\s*\(([^)]+)\)", r"pow(\1)"),
        Rule(r"Math\.log", "log"),
        Rule(r"([^(\s]+)\s+%\s+([^\s)]+)", r"fmod(\1, \2)"),
        Rule(r"\(([^\s(]+)\.indexOf\s*\(([^)]+)\)\s*>=\s*0\)", r"(mb_strpos(\1, \2) !== false)"),
        Rule(r"([^\s(]+)\.indexOf\s*\(([^)]+)\)\s*>=\s*0", r"mb_strpos(\1, \2) !== false"),
        Rule(r"([^\s(]+)\.indexOf\s*\(([^)]+)\)", r"mb_strpos(\1, \2)"),
        Rule(r"\(([^\s(]+)\sin\s([^)]+)\)", r"(is_array(\2) && array_key_exists(\1, \2))"),
        Rule(r"([^\s]+)\.join\s*\(\s*([^)]+?)\s*\)", r"implode(\2, \1)"),
        Rule(rf"new {re.escape(namespace)}\.", rf"new \\{namespace}\\", name="qualify-new"),
        Rule(r"Math\.(max|min)", r"\1"),
        Rule(r"console\.log", "var_dump"),
        Rule(r"process\.exit", "exit"),
        Rule(r"super\.", "parent::"),
        RESTORE_INTERPOLATION,
    )


def build_php_catalog(
    common: RuleCatalog,
    *,
    error_names: Sequence[str] = (),
    namespace: str = "ccxt",
    depth: int = DEFAULT_NESTING_DEPTH,
) -> RuleCatalog:
    """Compose the PHP catalog: target pre-rules, the common rules, then post-rules."""
    if depth < 1:
        raise ValueError("nesting depth must be a positive integer")
    return RuleCatalog.compose(
        "php",
        PHP_PRE,
        common,
        _members_and_literals(depth),
        _exceptions(error_names, namespace),
        _control_flow(depth),
        _library_calls(namespace),
    )


def variable_rules(names: Iterable[str]) -> RuleCatalog:
    """Sigil and property-access rules for the given locals and parameters.

    ``name`` gains a ``$`` wherever it stands alone (not after another
    identifier character, a member arrow, a dot or a quote), and ``$name.``
    member access becomes ``$name->``.
    """
    unique: List[str] = []
    for name in names:
        if _IDENTIFIER.match(name) and name not in unique:
            unique.append(name)
    sigils = [
        Rule(
            rf"(?<![$a-zA-Z0-9.>'_/]){re.escape(name)}(?![a-zA-Z0-9'_/])",
            f"${name}",
            name=f"sigil:{name}",
        )
        for name in unique
    ]
    properties = [
        Rule(
            rf"(?<![a-zA-Z0-9.>'_]){re.escape(name)}\.",
            f"{name}->",
            name=f"property:{name}",
        )
        for name in unique
    ]
    return RuleCatalog.compose("php-variables", sigils, properties)


__all__ = [
    "DEFAULT_NESTING_DEPTH",
    "ESCAPE_INTERPOLATION",
    "PHP_PRE",
    "RESTORE_INTERPOLATION",
    "build_php_catalog",
    "variable_rules",
]
