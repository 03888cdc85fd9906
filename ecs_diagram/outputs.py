# ecs_diagram/outputs.py
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Callable

from .artifact import html_document, svg_document
from .config import DiagramConfig
from .graph import graph_to_dict
from .pipeline import DiagramResult

RenderFn = Callable[[DiagramResult, DiagramConfig], str]


@dataclass(frozen=True)
class OutputSpec:
    output_id: str
    title: str
    filename: str
    render: RenderFn


def _render_graph(result: DiagramResult, _: DiagramConfig) -> str:
    # Entity and slot order is part of the contract: no key sorting.
    return json.dumps(graph_to_dict(result.nodes), indent=2, ensure_ascii=False) + "\n"


def _render_html(result: DiagramResult, cfg: DiagramConfig) -> str:
    return html_document(result.positioned, cfg)


def _render_svg(result: DiagramResult, cfg: DiagramConfig) -> str:
    return svg_document(result.positioned, cfg)


OUTPUTS: list[OutputSpec] = [
    OutputSpec(
        output_id="graph",
        title="Entity/component graph (JSON)",
        filename="ecs_graph.json",
        render=_render_graph,
    ),
    OutputSpec(
        output_id="html",
        title="Standalone HTML diagram",
        filename="ecs_diagram_generated.html",
        render=_render_html,
    ),
    OutputSpec(
        output_id="svg",
        title="Standalone SVG diagram",
        filename="ecs_diagram.svg",
        render=_render_svg,
    ),
]

OUTPUT_IDS: tuple[str, ...] = tuple(spec.output_id for spec in OUTPUTS)


def select_outputs(output_ids: tuple[str, ...]) -> list[OutputSpec]:
    """Output specs for the requested ids, in registry order."""
    unknown = sorted(set(output_ids) - set(OUTPUT_IDS))
    if unknown:
        raise KeyError(f"unknown output(s): {', '.join(unknown)}")
    return [spec for spec in OUTPUTS if spec.output_id in output_ids]
