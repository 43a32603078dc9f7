"""Batch orchestration: decompose, render, persist, then the one-off steps."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .config import ConfigError, MultigenConfig, load_config
from .decomposer import FormatError, StructuralDecomposer
from .files import overwrite_file
from .fixtures import FixtureTranspiler
from .hierarchy import load_error_hierarchy
from .identifiers import DEFAULT_REGISTRY
from .imports import DependencyInferencer
from .logging import get_logger
from .models import BatchResult, RenderedArtifact, TranspiledClass
from .registry import ClassRegistry, ManifestExporter, Pruner
from .render import Renderer, discover_renderers
from .rules import CatalogSet, build_catalogs
from .source_scanner import SourceScanner, read_inclusion_list
from .sync_driver import transpile_sync_driver
from .templating import TemplateRenderer

# generated-file patterns considered by the pruner, per target
PRUNE_PATTERNS: Dict[str, str] = {
    "python2": r"\.pyc?$",
    "python3": r"\.pyc?$",
    "php": r"\.php$",
}


class Orchestrator:
    """Runs one sequential transpile batch over a project tree.

    Files are handled one at a time. The first file that fails aborts the
    batch; artifacts already written for earlier files stay on disk.
    """

    def __init__(
        self,
        config: MultigenConfig | None = None,
        *,
        decomposer: StructuralDecomposer | None = None,
        manifest_exporter: ManifestExporter | None = None,
        pruner: Pruner | None = None,
    ) -> None:
        self.logger = get_logger("orchestrator")
        self.decomposer = decomposer or StructuralDecomposer()
        self.manifest_exporter = manifest_exporter or ManifestExporter()
        self._pruner = pruner
        self._pruner_injected = pruner is not None
        self._config = config
        self._renderers: Optional[List[Renderer]] = None
        self._catalogs: Optional[CatalogSet] = None
        self._templates: Optional[TemplateRenderer] = None
        self._error_names: Optional[List[str]] = None

    # ------------------------------------------------------------------
    # configuration and lazily built collaborators

    def load(self, path: str | Path = ".") -> MultigenConfig:
        root = Path(path).expanduser().resolve()
        if not root.exists():
            raise FileNotFoundError(f"Project path {root} does not exist")
        try:
            config = load_config(root)
        except ConfigError:
            self.logger.error("Could not read configuration under %s", root)
            raise
        self._config = config
        self._renderers = self._catalogs = self._templates = self._error_names = None
        if not self._pruner_injected:
            self._pruner = None
        return config

    @property
    def config(self) -> MultigenConfig:
        if self._config is None:
            return self.load(".")
        return self._config

    @property
    def pruner(self) -> Pruner:
        if self._pruner is None:
            self._pruner = Pruner(self.config.prune.exclude)
        return self._pruner

    @property
    def templates(self) -> TemplateRenderer:
        if self._templates is None:
            self._templates = TemplateRenderer(self.config.templates_dir, namespace=self.config.namespace)
        return self._templates

    @property
    def catalogs(self) -> CatalogSet:
        if self._catalogs is None:
            config = self.config
            registry = DEFAULT_REGISTRY.extended(config.rules.extra_identifiers)
            self._catalogs = build_catalogs(
                registry,
                nesting_depth=config.rules.nesting_depth,
                error_names=self.error_names(),
                namespace=config.namespace,
            )
            self.logger.debug(
                "Built catalogs: python3=%d python2=%d php=%d rules",
                len(self._catalogs.python3),
                len(self._catalogs.python2),
                len(self._catalogs.php),
            )
        return self._catalogs

    @property
    def renderers(self) -> List[Renderer]:
        if self._renderers is None:
            config = self.config
            inferencer = DependencyInferencer(self.error_names(), namespace=config.namespace)
            self._renderers = discover_renderers(
                config.targets.enabled,
                catalogs=self.catalogs,
                templates=self.templates,
                inferencer=inferencer,
                strict_nesting=config.rules.strict_nesting,
            )
        return self._renderers

    def error_names(self) -> List[str]:
        if self._error_names is None:
            path = self.config.errors.hierarchy
            if path.exists():
                self._error_names = list(load_error_hierarchy(path))
            else:
                self.logger.warning("Error hierarchy %s not found; no error imports will be emitted", path)
                self._error_names = []
        return self._error_names

    def renderer(self, target_id: str) -> Renderer:
        for renderer in self.renderers:
            if renderer.target_id == target_id:
                return renderer
        raise ValueError(f"Target '{target_id}' is not enabled")

    # ------------------------------------------------------------------
    # per-file work

    def transpile_file(self, path: Path) -> TranspiledClass:
        """Decompose ``path`` and render it for every enabled target (nothing is written)."""
        try:
            source_class = self.decomposer.decompose(_read_source(path), source=path.name)
            transpiled = TranspiledClass(
                class_name=source_class.name,
                base_class=source_class.base_class,
                source=path,
            )
            for renderer in self.renderers:
                folder = self.config.targets.folder(renderer.target_id)
                transpiled.artifacts.append(
                    RenderedArtifact(
                        target_id=renderer.target_id,
                        path=folder / renderer.output_name(path.name),
                        text=renderer.render_class(source_class, source=path.name),
                    )
                )
        except FormatError:
            self.logger.error("Failed to transpile source code from %s", path.name)
            raise
        return transpiled

    def render_file(self, path: Path, target_id: str) -> str:
        source_class = self.decomposer.decompose(_read_source(path), source=path.name)
        return self.renderer(target_id).render_class(source_class, source=path.name)

    # ------------------------------------------------------------------
    # batch

    def run(self, path: str | Path = ".", *, pattern: str | None = None) -> BatchResult:
        config = self.load(path)
        if pattern:
            config.source.pattern = pattern
        self.logger.info("Starting transpile run for %s", config.root)

        for renderer in self.renderers:
            config.targets.folder(renderer.target_id).mkdir(parents=True, exist_ok=True)

        scanner = SourceScanner(config.source.pattern, read_inclusion_list(config.source.inclusion_list))
        sources = scanner.scan(config.source.folder)
        self.logger.debug("Scanner found %d eligible sources", len(sources))

        result = BatchResult()
        registry = ClassRegistry()
        output_stems: List[str] = []
        for source in sources:
            transpiled = self.transpile_file(source)
            self.logger.info("Transpiling from %s", source.name)
            for artifact in transpiled.artifacts:
                result.written.append(overwrite_file(artifact.path, artifact.text))
            registry.register(transpiled.class_name, transpiled.base_class)
            output_stems.append(scanner.source_id(source.name))

        if not len(registry):
            self.logger.warning("0 files transpiled.")
            return result

        registry.freeze()
        result.classes = registry.classes
        if config.prune.enabled:
            result.deleted = self.prune([*registry, *output_stems])

        self.manifest_exporter.export(registry, config.manifest.path)

        fixtures = FixtureTranspiler(
            self.catalogs,
            self.templates,
            strict_nesting=config.rules.strict_nesting,
        )
        result.fixtures.extend(fixtures.transpile_error_hierarchy(config.errors))
        for fixture in config.fixtures.values():
            if fixture.enabled:
                result.fixtures.extend(fixtures.transpile_fixture(fixture))

        driver = config.sync_driver
        if driver.enabled and driver.source.exists():
            result.fixtures.append(
                transpile_sync_driver(driver.source, driver.target, driver.remove_functions)
            )
        elif driver.enabled:
            self.logger.warning("Async test driver %s not found; skipping sync derivation", driver.source)

        self.logger.info("Transpiled successfully (%d classes).", result.transpiled)
        return result

    def prune(self, class_names: Sequence[str]) -> List[Path]:
        deleted: List[Path] = []
        seen = set()
        for renderer in self.renderers:
            folder = self.config.targets.folder(renderer.target_id)
            if folder in seen:
                continue
            seen.add(folder)
            deleted.extend(self.pruner.prune(folder, PRUNE_PATTERNS[renderer.target_id], class_names))
        return deleted

    def derive_sync_driver(self, source: Path, target: Path) -> Path:
        return transpile_sync_driver(source, target, self.config.sync_driver.remove_functions)


def _read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise FormatError(f"source is not valid UTF-8 ({exc.reason})", source=path.name) from exc


__all__ = ["Orchestrator", "PRUNE_PATTERNS"]
