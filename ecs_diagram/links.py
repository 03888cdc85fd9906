# ecs_diagram/links.py
from __future__ import annotations

from collections import deque
from dataclasses import replace
from typing import Mapping, Sequence

from .model import GraphNode, PositionedEntity


def resolve_slot_targets(
    owner: str,
    slot_name: str,
    known_names: Sequence[str],
    targets: Mapping[str, Sequence[str]],
) -> tuple[str, ...]:
    """Entity names a slot points at: allowed by the table, known, and not the owner."""
    allowed = targets.get(slot_name)
    if not allowed:
        return ()
    return tuple(name for name in known_names if name in allowed and name != owner)


def resolve_links(
    positioned: Sequence[PositionedEntity],
    nodes: Sequence[GraphNode],
    targets: Mapping[str, Sequence[str]],
) -> list[PositionedEntity]:
    """Fill `links_to` on every entity-referencing slot.

    Targets are listed in graph order. Slots that cannot hold an entity id, or
    whose name is missing from `targets`, resolve to nothing.

    A name may repeat in a graph document; same-named nodes share a row, so
    the n-th positioned entity with a name pairs with the n-th node with it.
    """
    known_names = list(dict.fromkeys(node.name for node in nodes))
    nodes_by_name: dict[str, deque[GraphNode]] = {}
    for node in nodes:
        nodes_by_name.setdefault(node.name, deque()).append(node)

    resolved: list[PositionedEntity] = []
    for entity in positioned:
        pending = nodes_by_name.get(entity.id)
        node = pending.popleft() if pending else None
        if node is None:
            resolved.append(entity)
            continue

        slots = []
        for slot, graph_slot in zip(entity.slots, node.slots):
            if graph_slot.references_entity:
                links_to = resolve_slot_targets(entity.id, slot.name, known_names, targets)
                slot = replace(slot, links_to=links_to)
            slots.append(slot)
        resolved.append(replace(entity, slots=tuple(slots)))

    return resolved
