# ecs_diagram/artifact.py
"""Packaging of a positioned diagram into standalone documents."""
from __future__ import annotations

import html
import json
import xml.etree.ElementTree as ET
from typing import Optional, Sequence

from .config import DiagramConfig
from .model import PositionedEntity
from .render import SvgSurface, render_diagram
from .svg_fmt import q, svg_num

DIAGRAM_TITLE = "Entity-Component Relationship Diagram"
SURFACE_ID = "diagram"
DATA_SCRIPT_ID = "diagram-data"

PAGE_CSS = """
  body { font-family: sans-serif; background: #f9f9f9; margin: 0; padding: 0; }
  svg { width: 100%; height: 100vh; background: #fff; border: 1px solid #ccc; }
""".strip("\n")


def diagram_data(entities: Sequence[PositionedEntity]) -> list[dict]:
    return [entity.to_dict() for entity in entities]


def embedded_json(entities: Sequence[PositionedEntity]) -> str:
    """Diagram data as a JSON literal safe to place inside a <script> element."""
    payload = json.dumps(diagram_data(entities), indent=2, ensure_ascii=False)
    return payload.replace("</", "<\\/")


def render_svg_element(
    entities: Sequence[PositionedEntity], cfg: Optional[DiagramConfig] = None
) -> ET.Element:
    element = ET.Element(q("svg"), {"id": SURFACE_ID})
    render_diagram(SvgSurface(element), entities, cfg)
    return element


def svg_document(entities: Sequence[PositionedEntity], cfg: Optional[DiagramConfig] = None) -> str:
    """Standalone SVG file contents."""
    element = ET.Element(q("svg"))
    result = render_diagram(SvgSurface(element), entities, cfg)
    element.set("width", svg_num(result.viewport.width))
    element.set("height", svg_num(result.viewport.height))
    body = ET.tostring(element, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'


def html_document(
    entities: Sequence[PositionedEntity],
    cfg: Optional[DiagramConfig] = None,
    *,
    title: str = DIAGRAM_TITLE,
) -> str:
    """Self-contained HTML page: the drawn diagram plus its data as JSON."""
    svg = ET.tostring(render_svg_element(entities, cfg), encoding="unicode")
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8" />
<title>{html.escape(title)}</title>
<style>
{PAGE_CSS}
</style>
</head>
<body>
{svg}
<script type="application/json" id="{DATA_SCRIPT_ID}">
{embedded_json(entities)}
</script>
</body>
</html>
"""
