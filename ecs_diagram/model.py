# ecs_diagram/model.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ComponentDefinition:
    """One `defComponent(...)` declaration and the storage kinds it mentions."""

    name: str
    is_marker: bool = False
    is_text: bool = False
    is_map: bool = False
    is_list: bool = False
    is_movable_list: bool = False
    references_entity: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "isMarker": self.is_marker,
            "isText": self.is_text,
            "isMap": self.is_map,
            "isList": self.is_list,
            "isMovableList": self.is_movable_list,
            "referencesEntity": self.references_entity,
        }


@dataclass(frozen=True)
class EntityType:
    name: str
    component_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class Slot:
    name: str
    references_entity: bool = False


@dataclass(frozen=True)
class GraphNode:
    """An entity type with its component slots.

    `links` lists the slot names able to hold an entity id, in slot order.
    Targets are not resolved at this stage.
    """

    name: str
    slots: tuple[Slot, ...] = ()
    links: tuple[str, ...] = ()


@dataclass(frozen=True)
class PositionedSlot:
    name: str
    links_to: tuple[str, ...] = ()


@dataclass(frozen=True)
class PositionedEntity:
    id: str
    label: str
    level: int
    x: int
    y: int
    slots: tuple[PositionedSlot, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "level": self.level,
            "x": self.x,
            "y": self.y,
            "components": [
                {"name": slot.name, "linksTo": list(slot.links_to)}
                for slot in self.slots
            ],
        }


@dataclass(frozen=True)
class Box:
    """Axis-aligned bounding box in diagram coordinates."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def expand(self, margin: float) -> "Box":
        return Box(
            self.min_x - margin,
            self.min_y - margin,
            self.max_x + margin,
            self.max_y + margin,
        )

    def union(self, other: "Box") -> "Box":
        return Box(
            min(self.min_x, other.min_x),
            min(self.min_y, other.min_y),
            max(self.max_x, other.max_x),
            max(self.max_y, other.max_y),
        )

    def contains(self, other: "Box") -> bool:
        return (
            self.min_x <= other.min_x
            and self.min_y <= other.min_y
            and other.max_x <= self.max_x
            and other.max_y <= self.max_y
        )
