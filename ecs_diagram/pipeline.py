# ecs_diagram/pipeline.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from .config import DiagramConfig
from .extract import extract_components, extract_entities
from .graph import build_graph
from .layout import layout_graph
from .links import resolve_links
from .model import ComponentDefinition, EntityType, GraphNode, PositionedEntity


@dataclass(frozen=True)
class DiagramResult:
    nodes: list[GraphNode]
    positioned: list[PositionedEntity]
    components: dict[str, ComponentDefinition] = field(default_factory=dict)
    entities: dict[str, EntityType] = field(default_factory=dict)


def build_diagram(nodes: Sequence[GraphNode], cfg: DiagramConfig) -> list[PositionedEntity]:
    """Layout plus link resolution: graph nodes -> positioned entities."""
    positioned = layout_graph(nodes, cfg)
    return resolve_links(positioned, nodes, cfg.slot_targets)


def run_pipeline(
    components_src: str,
    entities_src: str,
    cfg: Optional[DiagramConfig] = None,
    *,
    known_components_only: bool = False,
) -> DiagramResult:
    """Source texts -> registries -> graph -> positioned graph."""
    cfg = cfg or DiagramConfig.default()

    components = extract_components(components_src)
    entities = extract_entities(
        entities_src, known_components=components if known_components_only else None
    )
    nodes = build_graph(components, entities)

    return DiagramResult(
        nodes=nodes,
        positioned=build_diagram(nodes, cfg),
        components=components,
        entities=entities,
    )


def run_graph(nodes: Sequence[GraphNode], cfg: Optional[DiagramConfig] = None) -> DiagramResult:
    """Same as run_pipeline() but starting from an already built graph."""
    cfg = cfg or DiagramConfig.default()
    return DiagramResult(nodes=list(nodes), positioned=build_diagram(nodes, cfg))
