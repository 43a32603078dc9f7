"""Method order must agree across every target of one class."""

from __future__ import annotations

import re

from multigen.decomposer import StructuralDecomposer
from multigen.identifiers import un_camel_case
from multigen.imports import DependencyInferencer
from multigen.render import discover_renderers
from multigen.rules import CatalogSet
from multigen.templating import TemplateRenderer
from tests._fixtures.project_builder import FOO_SOURCE

_DEFINITION = {
    "python2": re.compile(r"^    def (\w+)\(", re.M),
    "python3": re.compile(r"^    (?:async )?def (\w+)\(", re.M),
    "php": re.compile(r"^    public function (\w+) \(", re.M),
}


def test_method_sequence_matches_across_targets(
    catalogs: CatalogSet, templates: TemplateRenderer, inferencer: DependencyInferencer
) -> None:
    foo = StructuralDecomposer().decompose(FOO_SOURCE, source="foo.js")
    expected = [un_camel_case(name) for name in foo.method_names]

    renderers = discover_renderers(None, catalogs=catalogs, templates=templates, inferencer=inferencer)

    assert len(renderers) == len(_DEFINITION)
    for renderer in renderers:
        text = renderer.render_class(foo)
        assert _DEFINITION[renderer.target_id].findall(text) == expected, renderer.target_id
