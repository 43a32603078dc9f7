"""Jinja2 environment for generated-file headers and footers."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List

from jinja2 import Environment, FileSystemLoader, StrictUndefined

DEFAULT_TEMPLATES_DIR = Path(__file__).with_name("templates")


class TemplateRenderer:
    """Renders the fixed file templates, optionally overridden per project.

    A project ``templates_dir`` is searched before the packaged templates,
    so any single template can be replaced without copying the rest.
    """

    def __init__(self, templates_dir: Path | None = None, *, namespace: str = "ccxt") -> None:
        self.templates_dir = templates_dir
        self.namespace = namespace
        self._env = self._create_env(templates_dir)

    def render(self, name: str, **context: Any) -> str:
        context.setdefault("namespace", self.namespace)
        return self._env.get_template(name).render(**context)

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories: List[str] = []
        if templates_dir:
            directories.append(str(templates_dir))
        default_dir = str(DEFAULT_TEMPLATES_DIR)
        if default_dir not in directories:
            directories.append(default_dir)
        return Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )


__all__ = ["DEFAULT_TEMPLATES_DIR", "TemplateRenderer"]
