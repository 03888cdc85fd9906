# ecs_diagram/config.py
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping, Optional

from .constants import (
    DEFAULT_LINK_COLOR,
    LEVELS,
    SLOT_COLORS,
    SLOT_TARGETS,
)


@dataclass(frozen=True)
class LayoutConfig:
    """Row/column placement of entity nodes (pixels)."""

    base_x: int = 150
    base_y: int = 100
    spacing_x: int = 250
    row_height: int = 250


@dataclass(frozen=True)
class RenderStyle:
    """Box geometry and link shape used by the renderer (pixels)."""

    node_width: int = 110
    header_height: int = 50
    slot_pitch: int = 25
    slot_height: int = 20
    slot_inset: int = 20
    slot_top: int = 30
    header_label_offset: int = 15
    node_margin: int = 20
    viewport_padding: int = 50
    link_offset: int = 10
    arc_lift: int = 40


@dataclass(frozen=True)
class DiagramConfig:
    levels: Mapping[str, int] = field(default_factory=lambda: dict(LEVELS))
    overflow_level: Optional[int] = None
    slot_colors: Mapping[str, str] = field(default_factory=lambda: dict(SLOT_COLORS))
    default_color: str = DEFAULT_LINK_COLOR
    slot_targets: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(SLOT_TARGETS)
    )
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    style: RenderStyle = field(default_factory=RenderStyle)

    @classmethod
    def default(cls) -> "DiagramConfig":
        return cls()

    def resolved_overflow_level(self) -> int:
        """Row for entity types missing from the level table."""
        if self.overflow_level is not None:
            return self.overflow_level
        return max(self.levels.values(), default=-1) + 1


def default_config_mapping() -> dict[str, Any]:
    """The built-in tables in config-file shape (what YAML overrides merge into)."""
    return {
        "levels": dict(LEVELS),
        "overflow_level": None,
        "colors": {"default": DEFAULT_LINK_COLOR, "slots": dict(SLOT_COLORS)},
        "targets": {k: list(v) for k, v in SLOT_TARGETS.items()},
        "layout": {f.name: f.default for f in fields(LayoutConfig)},
        "style": {f.name: f.default for f in fields(RenderStyle)},
    }


CONFIG_KEYS: frozenset[str] = frozenset(default_config_mapping()) | {"replace_tables"}


def _require_mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise TypeError(f"{where} must be a mapping, got {type(value).__name__}")
    return value


def _require_int(value: Any, where: str) -> int:
    # bool is an int subclass; a YAML `yes` is never a coordinate.
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{where} must be an integer, got {value!r}")
    return value


def _int_fields(cls: type, raw: Any, where: str) -> dict[str, int]:
    data = _require_mapping(raw, where)
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"unknown {where} keys: {', '.join(unknown)}")
    return {k: _require_int(v, f"{where}.{k}") for k, v in data.items()}


def config_from_mapping(data: Mapping[str, Any]) -> DiagramConfig:
    """Build a DiagramConfig from a fully merged config mapping."""
    unknown = sorted(set(data) - CONFIG_KEYS)
    if unknown:
        raise ValueError(f"unknown config keys: {', '.join(unknown)}")

    levels = {
        str(name): _require_int(level, f"levels.{name}")
        for name, level in _require_mapping(data.get("levels", {}), "levels").items()
    }

    overflow = data.get("overflow_level")
    if overflow is not None:
        overflow = _require_int(overflow, "overflow_level")

    colors = _require_mapping(data.get("colors", {}), "colors")
    default_color = colors.get("default", DEFAULT_LINK_COLOR)
    if not isinstance(default_color, str):
        raise TypeError(f"colors.default must be a string, got {default_color!r}")
    slot_colors: dict[str, str] = {}
    for name, color in _require_mapping(colors.get("slots", {}), "colors.slots").items():
        if not isinstance(color, str):
            raise TypeError(f"colors.slots.{name} must be a string, got {color!r}")
        slot_colors[str(name)] = color

    slot_targets: dict[str, tuple[str, ...]] = {}
    for name, targets in _require_mapping(data.get("targets", {}), "targets").items():
        if isinstance(targets, str):
            targets = [targets]
        if not isinstance(targets, list) or not all(isinstance(t, str) for t in targets):
            raise TypeError(f"targets.{name} must be a list of entity names")
        slot_targets[str(name)] = tuple(targets)

    return DiagramConfig(
        levels=levels,
        overflow_level=overflow,
        slot_colors=slot_colors,
        default_color=default_color,
        slot_targets=slot_targets,
        layout=LayoutConfig(**_int_fields(LayoutConfig, data.get("layout", {}), "layout")),
        style=RenderStyle(**_int_fields(RenderStyle, data.get("style", {}), "style")),
    )
