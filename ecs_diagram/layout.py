# ecs_diagram/layout.py
from __future__ import annotations

from typing import Sequence

from .config import DiagramConfig
from .model import GraphNode, PositionedEntity, PositionedSlot


def level_for(name: str, cfg: DiagramConfig) -> int:
    """Row for an entity type; unlisted names share the overflow row."""
    level = cfg.levels.get(name)
    if level is None:
        return cfg.resolved_overflow_level()
    return level


def group_by_level(nodes: Sequence[GraphNode], cfg: DiagramConfig) -> dict[int, list[GraphNode]]:
    """Bucket nodes per level, keeping input order inside each bucket."""
    groups: dict[int, list[GraphNode]] = {}
    for node in nodes:
        groups.setdefault(level_for(node.name, cfg), []).append(node)
    return groups


def layout_graph(nodes: Sequence[GraphNode], cfg: DiagramConfig) -> list[PositionedEntity]:
    """Place every node on its level's row.

    Rows are emitted top to bottom; within a row nodes keep their input order
    and are spaced evenly from the left margin. Links are left unresolved.
    """
    layout = cfg.layout
    positioned: list[PositionedEntity] = []

    groups = group_by_level(nodes, cfg)
    for level in sorted(groups):
        y = layout.base_y + level * layout.row_height
        for idx, node in enumerate(groups[level]):
            positioned.append(
                PositionedEntity(
                    id=node.name,
                    label=node.name,
                    level=level,
                    x=layout.base_x + idx * layout.spacing_x,
                    y=y,
                    slots=tuple(PositionedSlot(name=slot.name) for slot in node.slots),
                )
            )

    return positioned
