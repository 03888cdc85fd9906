from pathlib import Path

from ecs_diagram.config import DiagramConfig, LayoutConfig
from ecs_diagram.model import GraphNode, Slot
from ecs_diagram.validate import (
    ValidateConfig,
    validate_graph,
    validate_graph_issues,
    validate_sources,
    validate_sources_issues,
)


FIXTURE_DIR = Path(__file__).resolve().parents[1] / "fixtures" / "ecs" / "src"


def load_text(name: str) -> str:
    return (FIXTURE_DIR / name).read_text(encoding="utf-8")


def codes(issues) -> list[str]:
    return [i.code for i in issues]


def test_fixture_warnings_with_default_tables():
    issues = validate_sources_issues(load_text("components.ts"), load_text("index.ts"))

    assert all(i.severity == "warning" for i in issues)
    assert sorted(codes(issues)) == [
        "W_ENTITY_OVERFLOW_LEVEL",
        "W_TARGET_UNKNOWN_ENTITY",
        "W_TARGET_UNKNOWN_ENTITY",
    ]
    overflow = next(i for i in issues if i.code == "W_ENTITY_OVERFLOW_LEVEL")
    assert "Bookmark" in overflow.message
    assert overflow.path == "/config/levels/Bookmark"


def test_empty_sources_only_warn():
    errors, warnings = validate_sources("", "")
    assert errors == []
    assert [w.split(":")[0] for w in warnings] == ["W_NO_COMPONENTS", "W_NO_ENTITIES"]


def test_duplicates_and_undeclared_components_reported():
    components = (
        'export const Tags = defComponent("tags", LoroText);\n'
        'export const Tags = defComponent("tags", LoroList<EntityIdStr>);\n'
    )
    entities = (
        "export class Space extends EntityWrapper {\n"
        "  get a() {\n"
        "    return [c.Tags, c.Missing];\n"
        "  }\n"
        "}\n"
        "export class Space extends EntityWrapper {\n"
        "  get a() {\n"
        "    return [c.Tags, c.Missing];\n"
        "  }\n"
        "}\n"
    )

    found = codes(validate_sources_issues(components, entities))

    assert "W_DUPLICATE_COMPONENT" in found
    assert "W_DUPLICATE_ENTITY" in found
    assert "W_UNDECLARED_COMPONENT" in found
    assert "W_REFERENCE_SLOT_WITHOUT_TARGETS" in found


def test_known_components_only_suppresses_undeclared():
    components = 'export const Tags = defComponent("tags", LoroText);\n'
    entities = (
        "export class Space extends EntityWrapper {\n"
        "  get a() {\n"
        "    return [c.Tags, c.Missing];\n"
        "  }\n"
        "}\n"
    )

    found = codes(validate_sources_issues(components, entities, known_components_only=True))

    assert "W_UNDECLARED_COMPONENT" not in found


def test_config_errors():
    cfg = DiagramConfig(levels={"Space": -1}, overflow_level=-2, slot_colors={"Channels": "#12"})
    nodes = [GraphNode(name="Space")]

    errors, _ = validate_graph(nodes, cfg)

    assert [e.split(":")[0] for e in errors] == [
        "E_LEVEL_NEGATIVE",
        "E_LEVEL_NEGATIVE",
        "E_OVERFLOW_LEVEL_NOT_LAST",
        "E_COLOR_INVALID",
    ]


def test_overflow_level_must_sit_below_named_levels():
    nodes = [GraphNode(name="Space"), GraphNode(name="Unlisted")]

    errors, _ = validate_graph(nodes, DiagramConfig(overflow_level=0))
    assert [e.split(":")[0] for e in errors] == ["E_OVERFLOW_LEVEL_NOT_LAST"]

    errors, _ = validate_graph(nodes, DiagramConfig(overflow_level=4))
    assert [e.split(":")[0] for e in errors] == ["E_OVERFLOW_LEVEL_NOT_LAST"]

    errors, _ = validate_graph(nodes, DiagramConfig(overflow_level=7))
    assert errors == []


def test_layout_spacing_must_be_positive():
    cfg = DiagramConfig(layout=LayoutConfig(spacing_x=0, row_height=-250))

    issues = validate_graph_issues([GraphNode(name="Space")], cfg)

    assert [(i.code, i.path) for i in issues if i.severity == "error"] == [
        ("E_LAYOUT_SPACING", "/config/layout/spacing_x"),
        ("E_LAYOUT_SPACING", "/config/layout/row_height"),
    ]


def test_repeated_graph_entity_warns():
    nodes = [GraphNode(name="Space"), GraphNode(name="Space")]

    assert "W_DUPLICATE_ENTITY" in codes(validate_graph_issues(nodes))


def test_ignore_and_escalate():
    nodes = [
        GraphNode(name="Orphan", slots=(Slot("Parent", True),), links=("Parent",)),
    ]

    issues = validate_graph_issues(
        nodes,
        DiagramConfig.default(),
        ValidateConfig(ignore={"W_ENTITY_OVERFLOW_LEVEL"}, escalate={"W_REFERENCE_SLOT_WITHOUT_TARGETS"}),
    )

    assert [(i.severity, i.code) for i in issues] == [
        ("error", "W_REFERENCE_SLOT_WITHOUT_TARGETS"),
    ]
    assert "Orphan" in issues[0].message
