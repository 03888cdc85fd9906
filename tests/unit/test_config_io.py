import json
from pathlib import Path

import pytest

from ecs_diagram.config import DiagramConfig, RenderStyle
from ecs_diagram.constants import LEVELS, SLOT_COLORS, SLOT_TARGETS
from ecs_diagram.io import load_config, load_graph, load_source_text


FIXTURE_DIR = Path(__file__).resolve().parents[1] / "fixtures" / "ecs"


def write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_no_config_file_uses_built_in_tables():
    cfg = load_config(None)

    assert dict(cfg.levels) == LEVELS
    assert dict(cfg.slot_colors) == SLOT_COLORS
    assert dict(cfg.slot_targets) == SLOT_TARGETS
    assert cfg.default_color == "#666"
    assert cfg.resolved_overflow_level() == 5
    assert cfg.style == RenderStyle()


def test_fixture_config_merges_over_defaults():
    cfg = load_config(FIXTURE_DIR / "diagram_config.yaml")

    assert cfg.levels["Bookmark"] == 3
    assert cfg.levels["Space"] == 0
    assert cfg.slot_colors["Timeline"] == "#3f51b5"
    assert cfg.slot_colors["Channels"] == SLOT_COLORS["Channels"]
    assert cfg.slot_targets["Timeline"] == ("Message",)
    assert cfg.slot_targets["Images"] == ("Image",)
    assert cfg.layout.spacing_x == 300
    assert cfg.layout.base_x == 150


def test_replace_tables_drops_defaults(tmp_path):
    path = write(
        tmp_path,
        "cfg.yaml",
        "replace_tables: [levels, colors]\n"
        "levels:\n"
        "  Root: 0\n"
        "colors:\n"
        "  slots:\n"
        "    Children: red\n",
    )

    cfg = load_config(path)

    assert dict(cfg.levels) == {"Root": 0}
    assert dict(cfg.slot_colors) == {"Children": "red"}
    assert cfg.resolved_overflow_level() == 1
    assert dict(cfg.slot_targets) == SLOT_TARGETS


def test_empty_config_file_is_defaults(tmp_path):
    assert load_config(write(tmp_path, "cfg.yaml", "")) == DiagramConfig.default()


def test_single_target_string_is_accepted(tmp_path):
    cfg = load_config(write(tmp_path, "cfg.yaml", "targets:\n  Parent: Folder\n"))
    assert cfg.slot_targets["Parent"] == ("Folder",)


@pytest.mark.parametrize(
    "text, exc",
    [
        ("- not\n- a mapping\n", TypeError),
        ("levels: [1, 2]\n", ValueError),
        ("levels:\n  Space: top\n", TypeError),
        ("colors:\n  slots:\n    Channels: 7\n", TypeError),
        ("layout:\n  margin: 3\n", ValueError),
        ("style:\n  node_width: wide\n", TypeError),
        ("theme: dark\n", ValueError),
        ("replace_tables: [layout]\n", ValueError),
        ("levels: {Space: 0\n", ValueError),
    ],
)
def test_invalid_config_rejected(tmp_path, text, exc):
    with pytest.raises(exc):
        load_config(write(tmp_path, "cfg.yaml", text))


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yaml")


def test_missing_source_is_fatal(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_source_text(tmp_path / "components.ts")


def test_source_text_read_as_utf8(tmp_path):
    path = write(tmp_path, "index.ts", "// héllo\n")
    assert load_source_text(path) == "// héllo\n"


def test_load_graph_document(tmp_path):
    doc = {
        "entities": [
            {
                "name": "Thread",
                "components": [{"name": "Timeline", "referencesEntity": True}],
                "links": ["Timeline"],
            }
        ]
    }
    (node,) = load_graph(write(tmp_path, "ecs_graph.json", json.dumps(doc)))
    assert node.name == "Thread"
    assert node.links == ("Timeline",)

    with pytest.raises(ValueError):
        load_graph(write(tmp_path, "broken.json", "{"))
