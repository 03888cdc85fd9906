# ecs_diagram/render.py
from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

from .config import DiagramConfig, RenderStyle
from .constants import DEFAULT_MARKER_ID
from .model import Box, PositionedEntity
from .svg_fmt import (
    DIAGRAM_CSS,
    marker_id,
    q,
    quad_path_d,
    svg_num,
    translate_attr,
    unique_id,
    viewbox_attr,
)


class SurfaceNotFoundError(LookupError):
    """The SVG element to draw on does not exist."""


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def find_surface(root: ET.Element, surface_id: Optional[str] = None) -> ET.Element:
    """Locate the `<svg>` element to draw on inside a document tree.

    With no `surface_id`, `root` itself must be an `<svg>` element.
    """
    if surface_id is None:
        if isinstance(root.tag, str) and _local_name(root.tag) == "svg":
            return root
        raise SurfaceNotFoundError("SVG element not found")

    for element in root.iter():
        if not isinstance(element.tag, str):
            continue
        if _local_name(element.tag) == "svg" and element.get("id") == surface_id:
            return element
    raise SurfaceNotFoundError(f"SVG element not found: #{surface_id}")


class SvgSurface:
    """Drawing backend: rectangles, text labels and curved arrows on an SVG tree."""

    def __init__(self, element: Optional[ET.Element] = None):
        self.element = element if element is not None else ET.Element(q("svg"))
        self._defs: Optional[ET.Element] = None
        self._ids: set[str] = set()

    def clear(self) -> None:
        """Drop everything previously drawn (attributes other than the viewBox stay)."""
        for child in list(self.element):
            self.element.remove(child)
        self.element.attrib.pop("viewBox", None)
        self._defs = None
        self._ids = set()

    def add_stylesheet(self, css: str) -> None:
        style = ET.SubElement(self.element, q("style"))
        style.text = css

    def define_arrowhead(self, base_id: str, color: str) -> str:
        """Register an arrowhead marker and return its (unique) id."""
        if self._defs is None:
            self._defs = ET.SubElement(self.element, q("defs"))
        mid = unique_id(base_id, self._ids)
        marker = ET.SubElement(
            self._defs,
            q("marker"),
            {
                "id": mid,
                "markerWidth": "10",
                "markerHeight": "7",
                "refX": "10",
                "refY": "3.5",
                "orient": "auto",
                "markerUnits": "strokeWidth",
            },
        )
        ET.SubElement(marker, q("polygon"), {"points": "0 0, 10 3.5, 0 7", "fill": color})
        return mid

    def group(self, x: float, y: float) -> ET.Element:
        return ET.SubElement(self.element, q("g"), {"transform": translate_attr(x, y)})

    def rect(
        self,
        parent: ET.Element,
        x: float,
        y: float,
        width: float,
        height: float,
        css_class: str,
        radius: float = 0,
    ) -> ET.Element:
        attrs = {
            "x": svg_num(x),
            "y": svg_num(y),
            "width": svg_num(width),
            "height": svg_num(height),
            "class": css_class,
        }
        if radius:
            attrs["rx"] = attrs["ry"] = svg_num(radius)
        return ET.SubElement(parent, q("rect"), attrs)

    def label(self, parent: ET.Element, x: float, y: float, text: str) -> ET.Element:
        node = ET.SubElement(parent, q("text"), {"class": "label", "x": svg_num(x), "y": svg_num(y)})
        node.text = text
        return node

    def curve(
        self,
        start: tuple[float, float],
        control: tuple[float, float],
        end: tuple[float, float],
        color: str,
        marker: str,
    ) -> ET.Element:
        return ET.SubElement(
            self.element,
            q("path"),
            {
                "d": quad_path_d(start, control, end),
                "class": "arrow",
                "stroke": color,
                "marker-end": f"url(#{marker})",
            },
        )

    def set_viewbox(self, box: Box) -> None:
        self.element.set("viewBox", viewbox_attr(box))

    def to_string(self) -> str:
        return ET.tostring(self.element, encoding="unicode")


@dataclass(frozen=True)
class RenderResult:
    viewport: Box
    node_boxes: dict[str, Box] = field(default_factory=dict)
    link_count: int = 0


def node_size(entity: PositionedEntity, style: RenderStyle) -> tuple[int, int]:
    return style.node_width, style.header_height + len(entity.slots) * style.slot_pitch


def node_rect(entity: PositionedEntity, style: RenderStyle) -> Box:
    width, height = node_size(entity, style)
    return Box(
        entity.x - width / 2,
        entity.y - height / 2,
        entity.x + width / 2,
        entity.y + height / 2,
    )


def node_box(entity: PositionedEntity, style: RenderStyle) -> Box:
    """Bounding box of a drawn node including its margin."""
    return node_rect(entity, style).expand(style.node_margin)


def compute_viewport(entities: Sequence[PositionedEntity], style: RenderStyle) -> Box:
    """Union of all node boxes plus the viewport padding."""
    box: Optional[Box] = None
    for entity in entities:
        nb = node_box(entity, style)
        box = nb if box is None else box.union(nb)
    if box is None:
        box = Box(0, 0, 0, 0)
    return box.expand(style.viewport_padding)


def slot_top(entity: PositionedEntity, index: int, style: RenderStyle) -> float:
    """Slot rectangle top edge, relative to the node center."""
    _, height = node_size(entity, style)
    return -height / 2 + style.slot_top + index * style.slot_pitch


def slot_anchor(entity: PositionedEntity, index: int, style: RenderStyle) -> tuple[float, float]:
    """Absolute position of a slot's vertical center on the node axis."""
    return entity.x, entity.y + slot_top(entity, index, style) + style.slot_height / 2


def top_anchor(entity: PositionedEntity, style: RenderStyle) -> tuple[float, float]:
    """Absolute position of the middle of a node's top edge."""
    _, height = node_size(entity, style)
    return entity.x, entity.y - height / 2


def link_geometry(
    source: tuple[float, float], target: tuple[float, float], style: RenderStyle
) -> tuple[tuple[float, float], tuple[float, float], tuple[float, float]]:
    """(start, control, end) of the arc from a slot anchor to a node's top anchor.

    The control point sits above the midpoint so every arc bows upward.
    """
    start = (source[0], source[1] + style.link_offset)
    end = (target[0], target[1] - style.link_offset)
    control = ((start[0] + end[0]) / 2, (start[1] + end[1]) / 2 - style.arc_lift)
    return start, control, end


SurfaceTarget = Union[SvgSurface, ET.Element, None]


def _resolve_surface(target: SurfaceTarget, surface_id: Optional[str]) -> SvgSurface:
    if target is None:
        raise SurfaceNotFoundError("SVG element not found")
    if isinstance(target, SvgSurface):
        return target
    return SvgSurface(find_surface(target, surface_id))


def render_diagram(
    target: SurfaceTarget,
    entities: Sequence[PositionedEntity],
    cfg: Optional[DiagramConfig] = None,
    *,
    surface_id: Optional[str] = None,
) -> RenderResult:
    """Draw positioned entities and their links onto an SVG surface.

    `target` is an SvgSurface, an `<svg>` element, or a document tree searched
    for the `<svg>` with `surface_id`. Anything drawn there before is removed.
    """
    cfg = cfg or DiagramConfig.default()
    style = cfg.style
    surface = _resolve_surface(target, surface_id)

    surface.clear()
    surface.add_stylesheet(DIAGRAM_CSS)

    markers: dict[str, str] = {}
    for slot_name, color in cfg.slot_colors.items():
        markers[slot_name] = surface.define_arrowhead(marker_id(slot_name), color)
    default_marker = surface.define_arrowhead(DEFAULT_MARKER_ID, cfg.default_color)

    node_boxes: dict[str, Box] = {}
    for entity in entities:
        width, height = node_size(entity, style)
        node_boxes[entity.id] = node_box(entity, style)

        group = surface.group(entity.x, entity.y)
        surface.rect(group, -width / 2, -height / 2, width, height, "entity", radius=10)
        surface.label(group, 0, -height / 2 + style.header_label_offset, entity.label)

        slot_width = width - style.slot_inset
        for idx, slot in enumerate(entity.slots):
            top = slot_top(entity, idx, style)
            surface.rect(group, -slot_width / 2, top, slot_width, style.slot_height, "component-slot", radius=5)
            surface.label(group, 0, top + style.slot_height / 2, slot.name)

    viewport = compute_viewport(entities, style)
    surface.set_viewbox(viewport)

    anchors = {entity.id: top_anchor(entity, style) for entity in entities}
    link_count = 0
    for entity in entities:
        for idx, slot in enumerate(entity.slots):
            for target_id in slot.links_to:
                to = anchors.get(target_id)
                if to is None:
                    continue
                start, control, end = link_geometry(slot_anchor(entity, idx, style), to, style)
                surface.curve(
                    start,
                    control,
                    end,
                    color=cfg.slot_colors.get(slot.name, cfg.default_color),
                    marker=markers.get(slot.name, default_marker),
                )
                link_count += 1

    return RenderResult(viewport=viewport, node_boxes=node_boxes, link_count=link_count)
