"""Rules for the dynamic target (Python generations 2 and 3)."""

from __future__ import annotations

import re
from typing import Optional, Tuple

from .base import Rule, RuleCatalog, indexed

# Absence and type checks are normalised first; every later rule relies on
# ``None`` and ``==``/``!=`` instead of ``undefined`` and the strict operators.
PYTHON_PRE: Tuple[Rule, ...] = (
    Rule(r"Array\.isArray\s*\(([^)]+)\)", r"isinstance(\1, list)"),
    Rule(r"([^(\s]+)\s+instanceof\s+([^)\s]+)", r"isinstance(\1, \2)"),
    Rule(r"typeof\s+([^\s\[]+)(?:\s|\[(.+?)\])\s+===?\s+'undefined'", indexed("{target} is None")),
    Rule(r"typeof\s+([^\s\[]+)(?:\s|\[(.+?)\])\s+!==?\s+'undefined'", indexed("{target} is not None")),
    Rule(r"typeof\s+([^\s]+)\s+===?\s+'undefined'", r"\1 is None"),
    Rule(r"typeof\s+([^\s]+)\s+!==?\s+'undefined'", r"\1 is not None"),
    Rule(r"typeof\s+(.+?)\s+===?\s+'undefined'", r"\1 is None"),
    Rule(r"typeof\s+(.+?)\s+!==?\s+'undefined'", r"\1 is not None"),
    Rule(r"([^\s\[]+)(?:\s|\[(.+?)\])\s+===?\s+undefined", indexed("{target} is None")),
    Rule(r"([^\s\[]+)(?:\s|\[(.+?)\])\s+!==?\s+undefined", indexed("{target} is not None")),
    Rule(r"([^\s]+)\s+===?\s+undefined", r"\1 is None"),
    Rule(r"([^\s]+)\s+!==?\s+undefined", r"\1 is not None"),
    Rule(r"(.+?)\s+===?\s+undefined", r"\1 is None"),
    Rule(r"(.+?)\s+!==?\s+undefined", r"\1 is not None"),
    Rule(r"typeof\s+([^\s\[]+)(?:\s|\[(.+?)\])\s+===?\s+'string'", indexed("isinstance({target}, basestring)")),
    Rule(r"typeof\s+([^\s\[]+)(?:\s|\[(.+?)\])\s+!==?\s+'string'", indexed("not isinstance({target}, basestring)")),
    Rule(r"typeof\s+([^\s]+)\s+===?\s+'string'", r"isinstance(\1, basestring)"),
    Rule(r"typeof\s+([^\s]+)\s+!==?\s+'string'", r"not isinstance(\1, basestring)"),
    Rule(r"undefined", "None"),
    Rule(r"===?", "=="),
    Rule(r"!==?", "!="),
    Rule(r"this\.stringToBinary\s*\((.*)\)", r"\1"),
    Rule(r"this\.stringToBase64\s", "base64.b64encode"),
    Rule(r"this\.binaryToBase16\s", "base64.b16encode"),
    Rule(r"this\.base64ToBinary\s", "base64.b64decode"),
    Rule(r"\.shift\s*\(\)", ".pop(0)"),
)

PYTHON_POST: Tuple[Rule, ...] = (
    Rule(r"this\.", "self."),
    Rule(r"([^a-zA-Z'])this([^a-zA-Z])", r"\1self\2"),
    Rule(r"(^|[^a-zA-Z0-9_])(?:let|const|var)\s\[\s*([^\]]+)\s\]", r"\1\2"),
    Rule(
        r"(^|[^a-zA-Z0-9_])(?:let|const|var)\s\{\s*([^}]+)\s\}\s=\s([^;]+)",
        r"\1\2 = (lambda \2: (\2))(**\3)",
    ),
    Rule(r"(^|[^a-zA-Z0-9_])(?:let|const|var)\s", r"\1"),
    Rule(r"Object\.keys\s*\((.*)\)\.length", r"\1"),
    Rule(r"Object\.keys\s*\((.*)\)", r"list(\1.keys())"),
    Rule(r"\[([^\]]+)\]\.join\s*\(([^)]+)\)", r"\2.join([\1])"),
    Rule(r"hash \(([^,]+), '(sha[0-9])'", r"hash(\1, '\2'"),
    Rule(r"hmac \(([^,]+), ([^,]+), '(md5)'", r"hmac(\1, \2, hashlib.\3"),
    Rule(r"hmac \(([^,]+), ([^,]+), '(sha[0-9]+)'", r"hmac(\1, \2, hashlib.\3"),
    Rule(r"throw new (\S+) \((.*)\)", r"raise \1(\2)"),
    Rule(r"throw (\S+)", r"raise \1"),
    Rule(r"try \{", "try:"),
    Rule(r"\}\s+catch \((\S+)\) \{", r"except Exception as \1:"),
    Rule(r"([\s(])extend(\s)", r"\1self.extend\2"),
    Rule(r"\} else if", "elif"),
    Rule(r"else if", "elif"),
    Rule(r"if\s+\((.*)\)\s+\{", r"if \1:"),
    Rule(r"if\s+\((.*)\)\s*\n", r"if \1:\n"),
    Rule(r"\}\s*else\s*\{", "else:"),
    Rule(r"else\s*\n", r"else:\n"),
    Rule(
        r"for\s+\(([a-zA-Z0-9_]+)\s*=\s*([^;\s]+\s*);[^<>=]+(?:<=|>=|<|>)\s*(.*)\.length\s*;[^)]+\)\s*\{",
        r"for \1 in range(\2, len(\3)):",
    ),
    Rule(
        r"for\s+\(([a-zA-Z0-9_]+)\s*=\s*([^;\s]+\s*);[^<>=]+(?:<=|>=|<|>)\s*(.*)\s*;[^)]+\)\s*\{",
        r"for \1 in range(\2, \3):",
    ),
    Rule(r"\s\|\|\s", " or "),
    Rule(r"\s&&\s", " and "),
    Rule(r"!([^=])", r"not \1"),
    Rule(r"([^\s(]+)\.length", r"len(\1)"),
    Rule(r"\.push\s*\(([\s\S]+?)\);", r".append(\1);"),
    Rule(r"^(\s*}\s*$)+", "", re.M),
    Rule(r";(\s+?//.+?)", r"\1"),
    Rule(r";$", "", re.M),
    Rule(r"\.toUpperCase\s*", ".upper"),
    Rule(r"\.toLowerCase\s*", ".lower"),
    Rule(r"JSON\.stringify\s*", "json.dumps"),
    Rule(r"JSON\.parse\s*", "json.loads"),
    Rule(r"([^\s]+)\.toFixed\s*\(([0-9]+)\)", r"'{:.\2f}'.format(\1)"),
    Rule(r"([^\s]+)\.toFixed\s*\(([^)]+)\)", r"('{:.' + str(\2) + 'f}').format(\1)"),
    Rule(r"parseFloat\s*", "float"),
    Rule(r"parseInt\s*", "int"),
    Rule(r"self\[([^\]+]+)\]", r"getattr(self, \1)"),
    Rule(r"([^\s]+)\.slice \(([^,)]+),\s?([^)]+)\)", r"\1[\2:\3]"),
    Rule(r"([^\s]+)\.slice \(([^):]+)\)", r"\1[\2:]"),
    Rule(r"Math\.floor\s*\(([^)]+)\)", r"int(math.floor(\1))"),
    Rule(r"Math\.abs\s*\(([^)]+)\)", r"abs(\1)"),
    Rule(r"Math\.pow\s*\(([^)]+)\)", r"math.pow(\1)"),
    Rule(r"Math\.round\s*\(([^)]+)\)", r"int(round(\1))"),
    Rule(r"Math\.ceil\s*\(([^)]+)\)", r"int(math.ceil(\1))"),
    Rule(r"Math\.log", "math.log"),
    Rule(
        r"([a-zA-Z0-9_.]*\([^)]+\)|[^\s]+)\s*\?\s*([^:]+)\s+:\s*([^\n]+)",
        r"\2 if \1 else \3",
        name="ternary",
    ),
    Rule(r"(^|\s)//", r"\1#"),
    Rule(r"([^\n\s]) #", r"\1  #"),
    Rule(r"\.indexOf", ".find"),
    Rule(r"(\s)true\b", r"\1True"),
    Rule(r"(\s)false\b", r"\1False"),
    Rule(r"\(([^\s]+)\sin\s([^)]+)\)", r"(\1 in list(\2.keys()))"),
    Rule(r"([^\s]+\s*\(\))\.toString\s+\(\)", r"str(\1)"),
    Rule(r"([^\s]+)\.toString \(\)", r"str(\1)"),
    Rule(r"([^\s]+)\.join\s*\(\s*([^)\[\]]+?)\s*\)", r"\2.join(\1)"),
    Rule(r"Math\.(max|min)\s", r"\1"),
    Rule(r" = new ", " = "),
    Rule(r"console\.log\s", "print"),
    Rule(r"process\.exit\s+", "sys.exit"),
    # PEP8 E211: no whitespace before a call's opening parenthesis
    Rule(r"([^:+=/*\s-]+) \(", r"\1(", name="pep8-call-spacing"),
    Rule(r"\sand\(", " and ("),
    Rule(r"\sor\(", " or ("),
    Rule(r"\snot\(", " not ("),
    Rule(r"\[ ", "["),
    Rule(r"\{ ", "{"),
    Rule(r"([^\s#]+) \]", r"\1]"),
    Rule(r"([^\s#]+) \}", r"\1}"),
    # undo the call-spacing rule for keywords followed by a parenthesised condition
    Rule(r"([^a-z])(elif|if|or|else)\(", r"\1\2 ("),
    Rule(r"==\sTrue", "is True"),
)

# Generation 2 only drops the suspension keyword; nothing else may differ.
PYTHON2_RULES: Tuple[Rule, ...] = (
    Rule(r"(\s)await(\s)", r"\1", name="strip-await"),
)

_NON_ASCII_LITERAL = Rule(r"'([^'\x00-\x7f]+)'", r"u'\1'", name="unicode-literal")
_BLANK_LINES = Rule(r"$\s*$", "", re.M, name="strip-blank-lines")
_ORDERED_CALL = re.compile(r"\.ordered\s*\(\{([^}]+)\}\)")
_ORDERED_ENTRY = re.compile(r"^(\s+)([^:]+):\s*([^,]+),$", re.M)
_SUPER_ACCESS = re.compile(r"super\.")


def build_python3_catalog(common: RuleCatalog) -> RuleCatalog:
    return RuleCatalog.compose("python3", PYTHON_PRE, common, PYTHON_POST)


def build_python2_catalog() -> RuleCatalog:
    return RuleCatalog.compose("python2", PYTHON2_RULES)


def finish_python_body(
    body: str,
    *,
    class_name: Optional[str] = None,
    remove_empty_lines: bool = False,
) -> str:
    """Structural passes that run after the Python catalog."""
    if remove_empty_lines:
        body = _BLANK_LINES.apply(body)
    body = _NON_ASCII_LITERAL.apply(body)
    body = _ORDERED_CALL.sub(_ordered_pairs, body)
    if class_name:
        body = _SUPER_ACCESS.sub(f"super({class_name}, self).", body)
    return body


def _ordered_pairs(match: "re.Match[str]") -> str:
    entries = _ORDERED_ENTRY.sub(r"\1(\2, \3),", match.group(1))
    return f".ordered([{entries}])"


__all__ = [
    "PYTHON2_RULES",
    "PYTHON_POST",
    "PYTHON_PRE",
    "build_python2_catalog",
    "build_python3_catalog",
    "finish_python_body",
]
