"""Derive the synchronous test driver from its asynchronous sibling.

A line-oriented literal filter that only knows the handful of idioms the
async driver uses; the rule catalogs are not involved.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Sequence, Tuple

from .files import overwrite_file
from .logging import get_logger

logger = get_logger("sync_driver")

_DROPPED_LINES = frozenset({"import asyncio"})
_LITERAL_REPLACEMENTS: Tuple[Tuple[str, str], ...] = (
    ("asyncio.get_event_loop().run_until_complete(main())", "main()"),
    ("import ccxt.async_support as ccxt", "import ccxt"),
)
_TOKEN_BUCKET = re.compile(r".*token_bucket.*")


def _convert_line(line: str) -> str:
    for old, new in _LITERAL_REPLACEMENTS:
        line = line.replace(old, new, 1)
    line = _TOKEN_BUCKET.sub("", line)
    line = line.replace("await asyncio.sleep", "time.sleep", 1)
    line = line.replace("async ", "", 1)
    return line.replace("await ", "", 1)


def delete_function(name: str, text: str) -> str:
    """Remove ``def name`` and its calls ``name(exchange)``.

    The definition is cut up to the next ``#``, so it relies on the driver
    separating functions with comment rulers.
    """
    text = re.sub(rf"def {re.escape(name)}[^#]+", "", text)
    return re.sub(rf"\s+{re.escape(name)}\(exchange\)", "", text)


def derive_sync_driver(text: str, remove_functions: Sequence[str] = ()) -> str:
    lines = [_convert_line(line) for line in text.split("\n") if line not in _DROPPED_LINES]
    result = "\n".join(lines)
    for name in remove_functions:
        result = delete_function(name, result)
    return result


def transpile_sync_driver(source: Path, target: Path, remove_functions: Sequence[str] = ()) -> Path:
    logger.info("Transpiling %s -> %s", source, target)
    text = source.read_text(encoding="utf-8")
    return overwrite_file(target, derive_sync_driver(text, remove_functions))


__all__ = ["delete_function", "derive_sync_driver", "transpile_sync_driver"]
