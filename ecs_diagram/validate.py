# ecs_diagram/validate.py
from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Literal, Mapping, Optional, Sequence

from .config import DiagramConfig
from .extract import (
    extract_components,
    extract_entities,
    iter_component_declarations,
    iter_entity_declarations,
)
from .graph import build_graph
from .model import ComponentDefinition, EntityType, GraphNode

Severity = Literal["error", "warning"]

COLOR_RE = re.compile(r"^(?:#[0-9A-Fa-f]{3,8}|[A-Za-z]+)$")


@dataclass(frozen=True)
class ValidationIssue:
    """Structured validation issue for callers that want more than strings."""

    severity: Severity
    code: str
    message: str
    path: str = ""
    hint: Optional[str] = None


@dataclass(frozen=True)
class ValidateConfig:
    """Validation configuration.

    NOTE: The CLI uses the `validate_sources()` / `validate_graph()` wrappers,
    which return `(errors, warnings)` as lists of strings.
    """

    ignore: set[str] = field(default_factory=set)
    escalate: set[str] = field(default_factory=set)


EmitFn = Callable[..., None]


def _collector(cfg: ValidateConfig, issues: list[ValidationIssue]) -> EmitFn:
    def emit(
        severity: Severity,
        code: str,
        message: str,
        path: str = "",
        hint: Optional[str] = None,
    ) -> None:
        if code in cfg.ignore:
            return
        final_severity: Severity = (
            "error" if (severity == "warning" and code in cfg.escalate) else severity
        )
        issues.append(
            ValidationIssue(
                severity=final_severity,
                code=code,
                message=message,
                path=path,
                hint=hint,
            )
        )

    return emit


def _check_duplicates(emit: EmitFn, components_src: str, entities_src: str) -> None:
    comp_counts = Counter(name for name, _ in iter_component_declarations(components_src))
    for name, count in comp_counts.items():
        if count > 1:
            emit(
                "warning",
                "W_DUPLICATE_COMPONENT",
                f"component {name!r} is declared {count} times; the last declaration wins",
                path=f"/components/{name}",
            )

    entity_counts = Counter(name for name, _ in iter_entity_declarations(entities_src))
    for name, count in entity_counts.items():
        if count > 1:
            emit(
                "warning",
                "W_DUPLICATE_ENTITY",
                f"entity class {name!r} is declared {count} times; the last declaration wins",
                path=f"/entities/{name}",
            )


def _check_registries(
    emit: EmitFn,
    components: Mapping[str, ComponentDefinition],
    entities: Mapping[str, EntityType],
) -> None:
    if not components:
        emit(
            "warning",
            "W_NO_COMPONENTS",
            "no component declarations found",
            path="/components",
            hint="expected `export const Name = defComponent(...);`",
        )
    if not entities:
        emit(
            "warning",
            "W_NO_ENTITIES",
            "no entity classes found",
            path="/entities",
            hint="expected `export class Name ... { ... }` closed by a column-0 brace",
        )

    for entity in entities.values():
        for comp_name in entity.component_names:
            if comp_name not in components:
                emit(
                    "warning",
                    "W_UNDECLARED_COMPONENT",
                    f"entity {entity.name!r} uses undeclared component {comp_name!r}; "
                    "drawn as a slot without links",
                    path=f"/entities/{entity.name}/components/{comp_name}",
                )


def _check_config(emit: EmitFn, cfg: DiagramConfig) -> None:
    for name, level in cfg.levels.items():
        if level < 0:
            emit(
                "error",
                "E_LEVEL_NEGATIVE",
                f"level for {name!r} must be >= 0 (got {level})",
                path=f"/config/levels/{name}",
            )
    if cfg.overflow_level is not None and cfg.overflow_level < 0:
        emit(
            "error",
            "E_LEVEL_NEGATIVE",
            f"overflow_level must be >= 0 (got {cfg.overflow_level})",
            path="/config/overflow_level",
        )
    if (
        cfg.overflow_level is not None
        and cfg.levels
        and cfg.overflow_level <= max(cfg.levels.values())
    ):
        emit(
            "error",
            "E_OVERFLOW_LEVEL_NOT_LAST",
            f"overflow_level {cfg.overflow_level} must be below every named level "
            f"(deepest is {max(cfg.levels.values())})",
            path="/config/overflow_level",
        )

    for key in ("spacing_x", "row_height"):
        value = getattr(cfg.layout, key)
        if value <= 0:
            emit(
                "error",
                "E_LAYOUT_SPACING",
                f"layout.{key} must be > 0 (got {value})",
                path=f"/config/layout/{key}",
            )

    colors = [("default", cfg.default_color)] + list(cfg.slot_colors.items())
    for name, color in colors:
        if not COLOR_RE.match(color):
            emit(
                "error",
                "E_COLOR_INVALID",
                f"color {color!r} for {name!r} is not a hex or named color",
                path=f"/config/colors/{name}",
            )


def _check_tables(emit: EmitFn, nodes: Sequence[GraphNode], cfg: DiagramConfig) -> None:
    node_names = {node.name for node in nodes}

    for node in nodes:
        if node.name not in cfg.levels:
            emit(
                "warning",
                "W_ENTITY_OVERFLOW_LEVEL",
                f"entity {node.name!r} has no level; placed in overflow row "
                f"{cfg.resolved_overflow_level()}",
                path=f"/config/levels/{node.name}",
            )

    # Reference slots in first-seen order, with the entities using them.
    users: dict[str, list[str]] = {}
    for node in nodes:
        for link in node.links:
            users.setdefault(link, []).append(node.name)

    for slot_name, owners in users.items():
        allowed = cfg.slot_targets.get(slot_name)
        if not allowed:
            emit(
                "warning",
                "W_REFERENCE_SLOT_WITHOUT_TARGETS",
                f"component {slot_name!r} holds entity ids (used by "
                f"{', '.join(owners)}) but has no target types; no links drawn",
                path=f"/config/targets/{slot_name}",
            )
            continue
        for target in allowed:
            if target not in node_names:
                emit(
                    "warning",
                    "W_TARGET_UNKNOWN_ENTITY",
                    f"target type {target!r} of component {slot_name!r} is not an "
                    "extracted entity; no link drawn",
                    path=f"/config/targets/{slot_name}",
                )


def validate_sources_issues(
    components_src: str,
    entities_src: str,
    cfg: Optional[DiagramConfig] = None,
    vcfg: Optional[ValidateConfig] = None,
    *,
    known_components_only: bool = False,
) -> list[ValidationIssue]:
    """Return structured validation issues for a pair of declaration sources."""
    cfg = cfg or DiagramConfig.default()
    issues: list[ValidationIssue] = []
    emit = _collector(vcfg or ValidateConfig(), issues)

    components = extract_components(components_src)
    entities = extract_entities(
        entities_src, known_components=components if known_components_only else None
    )

    _check_config(emit, cfg)
    _check_duplicates(emit, components_src, entities_src)
    _check_registries(emit, components, entities)
    _check_tables(emit, build_graph(components, entities), cfg)
    return issues


def validate_graph_issues(
    nodes: Sequence[GraphNode],
    cfg: Optional[DiagramConfig] = None,
    vcfg: Optional[ValidateConfig] = None,
) -> list[ValidationIssue]:
    """Return structured validation issues for an already built graph."""
    cfg = cfg or DiagramConfig.default()
    issues: list[ValidationIssue] = []
    emit = _collector(vcfg or ValidateConfig(), issues)

    _check_config(emit, cfg)
    if not nodes:
        emit("warning", "W_NO_ENTITIES", "graph contains no entities", path="/entities")
    for name, count in Counter(node.name for node in nodes).items():
        if count > 1:
            emit(
                "warning",
                "W_DUPLICATE_ENTITY",
                f"entity {name!r} appears {count} times in the graph; each is drawn",
                path=f"/entities/{name}",
            )
    _check_tables(emit, nodes, cfg)
    return issues


def split_issues(issues: Sequence[ValidationIssue]) -> tuple[list[str], list[str]]:
    errors = [f"{i.code}: {i.message}" for i in issues if i.severity == "error"]
    warnings = [f"{i.code}: {i.message}" for i in issues if i.severity == "warning"]
    return errors, warnings


def validate_sources(
    components_src: str,
    entities_src: str,
    cfg: Optional[DiagramConfig] = None,
    *,
    known_components_only: bool = False,
) -> tuple[list[str], list[str]]:
    """`(errors, warnings)` as strings, for the CLI."""
    return split_issues(
        validate_sources_issues(
            components_src, entities_src, cfg, known_components_only=known_components_only
        )
    )


def validate_graph(
    nodes: Sequence[GraphNode], cfg: Optional[DiagramConfig] = None
) -> tuple[list[str], list[str]]:
    """`(errors, warnings)` as strings, for the CLI."""
    return split_issues(validate_graph_issues(nodes, cfg))
