from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from multigen.identifiers import DEFAULT_REGISTRY
from multigen.imports import DependencyInferencer
from multigen.rules import CatalogSet, build_catalogs
from multigen.templating import TemplateRenderer
from tests._fixtures.project_builder import ProjectBuilder

ERROR_NAMES = ("BaseError", "ExchangeError", "AuthenticationError")


@pytest.fixture
def project_builder(tmp_path: Path) -> ProjectBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture
def catalogs() -> CatalogSet:
    return build_catalogs(DEFAULT_REGISTRY, error_names=ERROR_NAMES)


@pytest.fixture
def templates() -> TemplateRenderer:
    return TemplateRenderer()


@pytest.fixture
def inferencer() -> DependencyInferencer:
    return DependencyInferencer(ERROR_NAMES)


@pytest.fixture(autouse=True)
def _reset_multigen_logger() -> Iterator[None]:
    """CLI tests configure the package logger; undo it so caplog keeps working."""
    yield
    logger = logging.getLogger("multigen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
