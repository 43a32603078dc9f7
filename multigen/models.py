"""Core data models shared across multigen components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Parameter:
    """One formal parameter of a method signature in the canonical dialect."""

    name: str
    default: Optional[str] = None


@dataclass(frozen=True)
class MethodUnit:
    """A single method carved out of a class body."""

    name: str
    is_async: bool
    parameters: Tuple[Parameter, ...]
    body: str
    bindings: Tuple[str, ...] = ()

    @property
    def parameter_names(self) -> List[str]:
        return [parameter.name for parameter in self.parameters]


@dataclass(frozen=True)
class SourceClass:
    """A canonical class split into its header and method units."""

    name: str
    base_class: str
    method_blocks: Tuple[str, ...]
    methods: Tuple[MethodUnit, ...]

    @property
    def method_names(self) -> List[str]:
        return [method.name for method in self.methods]


@dataclass(frozen=True)
class RenderedArtifact:
    """Generated file contents for one target."""

    target_id: str
    path: Path
    text: str


@dataclass
class TranspiledClass:
    """All artifacts produced for one source file."""

    class_name: str
    base_class: str
    source: Path
    artifacts: List[RenderedArtifact] = field(default_factory=list)


@dataclass
class BatchResult:
    """Summary of a full transpile run."""

    classes: Dict[str, str] = field(default_factory=dict)
    written: List[Path] = field(default_factory=list)
    deleted: List[Path] = field(default_factory=list)
    fixtures: List[Path] = field(default_factory=list)

    @property
    def transpiled(self) -> int:
        return len(self.classes)
