"""Class registry, type-declaration manifest export and stale-file pruning."""

from __future__ import annotations

import re
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Dict, Iterator, List, Sequence, Union

from .logging import get_logger
from .markers import MarkerManager

MANIFEST_KEY = "classes"
DEFAULT_PRUNE_EXCLUDE = ("Exchange*", "*errors*", "__init__*", ".*", "base*")

_DECLARATION_BLOCK = re.compile(r"(?:    export class [^\s]+ extends [^\s]+ \{\}\r?\n)+")
_EXTENSION = re.compile(r"\.[a-z]+$")


class ClassRegistry:
    """Ordered ``class name -> base class`` mapping, append-only during a batch."""

    def __init__(self) -> None:
        self._classes: Dict[str, str] = {}
        self._frozen = False

    def register(self, name: str, base_class: str) -> None:
        if self._frozen:
            raise RuntimeError("class registry is read-only once the batch has finished")
        existing = self._classes.get(name)
        if existing is not None and existing != base_class:
            raise ValueError(f"{name} already registered with base class {existing}")
        self._classes[name] = base_class

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def classes(self) -> Dict[str, str]:
        return dict(self._classes)

    def __contains__(self, name: object) -> bool:
        return name in self._classes

    def __len__(self) -> int:
        return len(self._classes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._classes)

    def declarations(self) -> List[str]:
        return [f"    export class {name} extends {base} {{}}" for name, base in self._classes.items()]

    def manifest_fragment(self) -> str:
        return "\n".join(self.declarations()) + "\n"


class ManifestExporter:
    """Writes the registry's declarations into the type-declaration manifest.

    The target region is either a ``// multigen:begin:classes`` marker block
    or, failing that, the existing run of ``export class ... {}`` lines.
    """

    def __init__(self, markers: MarkerManager | None = None) -> None:
        self.markers = markers or MarkerManager("//")
        self.logger = get_logger("manifest")

    def render(self, registry: ClassRegistry, text: str) -> str | None:
        fragment = registry.manifest_fragment()
        if self.markers.contains(text, MANIFEST_KEY):
            return self.markers.replace(text, MANIFEST_KEY, fragment)
        if _DECLARATION_BLOCK.search(text):
            return _DECLARATION_BLOCK.sub(lambda _: fragment, text, count=1)
        return None

    def export(self, registry: ClassRegistry, path: Path) -> bool:
        if not path.exists():
            self.logger.warning("Manifest %s not found; skipping declarations export", path)
            return False
        text = path.read_text(encoding="utf-8")
        updated = self.render(registry, text)
        if updated is None:
            self.logger.warning("No class declaration region in %s; file left unchanged", path)
            return False
        self.logger.info("Exporting %d class declarations to %s", len(registry), path)
        if updated != text:
            path.write_text(updated, encoding="utf-8")
        return True


class Pruner:
    """Deletes generated files whose class no longer exists."""

    def __init__(self, exclude: Sequence[str] = DEFAULT_PRUNE_EXCLUDE) -> None:
        self.exclude = tuple(exclude)
        self.logger = get_logger("pruner")

    def is_protected(self, filename: str) -> bool:
        return any(fnmatchcase(filename, pattern) for pattern in self.exclude)

    def stale_files(
        self,
        folder: Path,
        pattern: Union[str, "re.Pattern[str]"],
        class_names: Sequence[str],
    ) -> List[Path]:
        if not folder.is_dir():
            return []
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        current = set(class_names)
        stale: List[Path] = []
        for path in sorted(folder.iterdir()):
            if path.is_dir() or not regex.search(path.name):
                continue
            if _EXTENSION.sub("", path.name) in current or self.is_protected(path.name):
                continue
            stale.append(path)
        return stale

    def prune(
        self,
        folder: Path,
        pattern: Union[str, "re.Pattern[str]"],
        class_names: Sequence[str],
    ) -> List[Path]:
        deleted: List[Path] = []
        for path in self.stale_files(folder, pattern, class_names):
            self.logger.info("Deleting %s", path)
            path.unlink()
            deleted.append(path)
        return deleted


__all__ = [
    "ClassRegistry",
    "DEFAULT_PRUNE_EXCLUDE",
    "MANIFEST_KEY",
    "ManifestExporter",
    "Pruner",
]
