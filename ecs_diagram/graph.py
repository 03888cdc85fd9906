# ecs_diagram/graph.py
from __future__ import annotations

from typing import Any, Mapping

from .model import ComponentDefinition, EntityType, GraphNode, Slot


def build_graph(
    components: Mapping[str, ComponentDefinition],
    entities: Mapping[str, EntityType],
) -> list[GraphNode]:
    """Join the component and entity registries into graph nodes.

    Nodes follow the entity registry's iteration order. A component name the
    registry does not know becomes a slot that references nothing.
    """
    nodes: list[GraphNode] = []
    for entity in entities.values():
        slots: list[Slot] = []
        links: list[str] = []
        for comp_name in entity.component_names:
            comp = components.get(comp_name)
            references = bool(comp and comp.references_entity)
            slots.append(Slot(name=comp_name, references_entity=references))
            if references:
                links.append(comp_name)
        nodes.append(GraphNode(name=entity.name, slots=tuple(slots), links=tuple(links)))
    return nodes


def graph_to_dict(nodes: list[GraphNode]) -> dict[str, Any]:
    """Serialize nodes to the `{"entities": [...]}` graph document."""
    return {
        "entities": [
            {
                "name": node.name,
                "components": [
                    {"name": slot.name, "referencesEntity": slot.references_entity}
                    for slot in node.slots
                ],
                "links": list(node.links),
            }
            for node in nodes
        ]
    }


def graph_from_dict(data: Any) -> list[GraphNode]:
    """Read a graph document written by graph_to_dict()."""
    if not isinstance(data, dict):
        raise TypeError(f"graph document must be a mapping, got {type(data).__name__}")

    entities = data.get("entities", [])
    if not isinstance(entities, list):
        raise TypeError("graph.entities must be a list")

    nodes: list[GraphNode] = []
    for i, item in enumerate(entities):
        if not isinstance(item, dict) or not isinstance(item.get("name"), str):
            raise ValueError(f"graph.entities[{i}] must be a mapping with a string `name`")

        slots: list[Slot] = []
        for j, comp in enumerate(item.get("components", []) or []):
            if not isinstance(comp, dict) or not isinstance(comp.get("name"), str):
                raise ValueError(
                    f"graph.entities[{i}].components[{j}] must be a mapping with a string `name`"
                )
            slots.append(
                Slot(name=comp["name"], references_entity=bool(comp.get("referencesEntity")))
            )

        # `links` is derived data; recompute it so the slot/link invariant holds.
        links = tuple(slot.name for slot in slots if slot.references_entity)
        nodes.append(GraphNode(name=item["name"], slots=tuple(slots), links=links))
    return nodes
