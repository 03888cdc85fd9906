# ecs_diagram/svg_fmt.py
from __future__ import annotations

import re
import xml.etree.ElementTree as ET

from .model import Box

SVG_NS = "http://www.w3.org/2000/svg"
ET.register_namespace("", SVG_NS)

# XML ids must start with a letter or underscore.
SVG_ID_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.-]*$")

DIAGRAM_CSS = """
.entity { stroke: #333; stroke-width: 2; fill: #e0f7fa; }
.component-slot { stroke: #666; stroke-width: 1.5; fill: #fff; }
.label { font-family: sans-serif; font-size: 12px; text-anchor: middle; dominant-baseline: middle; pointer-events: none; }
.arrow { stroke-width: 1.5; fill: none; }
""".strip()


def q(tag: str) -> str:
    """Qualify a tag name with the SVG namespace."""
    return f"{{{SVG_NS}}}{tag}"


def svg_num(value: float) -> str:
    """Format a coordinate: integral values without a decimal point."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def assert_svg_id(value: str) -> str:
    if not SVG_ID_RE.match(value):
        raise ValueError(f"Not an SVG-safe id: {value!r}")
    return value


def marker_id(key: str) -> str:
    """Arrowhead marker id for a color-table key."""
    safe = re.sub(r"[^A-Za-z0-9_.-]", "_", key)
    return assert_svg_id(f"arrowhead-{safe}")


def quad_path_d(
    start: tuple[float, float], control: tuple[float, float], end: tuple[float, float]
) -> str:
    return (
        f"M {svg_num(start[0])} {svg_num(start[1])} "
        f"Q {svg_num(control[0])} {svg_num(control[1])} "
        f"{svg_num(end[0])} {svg_num(end[1])}"
    )


def viewbox_attr(box: Box) -> str:
    return " ".join(svg_num(v) for v in (box.min_x, box.min_y, box.width, box.height))


def translate_attr(x: float, y: float) -> str:
    return f"translate({svg_num(x)}, {svg_num(y)})"


def unique_id(base: str, used: set[str]) -> str:
    candidate = base
    n = 2
    while candidate in used:
        candidate = f"{base}_{n}"
        n += 1
    used.add(candidate)
    return candidate
