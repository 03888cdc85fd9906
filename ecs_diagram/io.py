# ecs_diagram/io.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import yaml

from .config import DiagramConfig, config_from_mapping, default_config_mapping
from .constants import REPLACEABLE_TABLES
from .graph import graph_from_dict
from .model import GraphNode


def load_source_text(path: Path) -> str:
    """Read one declaration source file (UTF-8)."""
    if not path.is_file():
        raise FileNotFoundError(str(path))
    return path.read_text(encoding="utf-8")


def _load_yaml_mapping(path: Path) -> dict[str, Any]:
    raw = path.read_text(encoding="utf-8")

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML {path}: {e}") from e

    # An empty file means "no overrides".
    if data is None:
        return {}

    if not isinstance(data, dict):
        raise TypeError(
            f"Top-level YAML must be a mapping in {path}, got {type(data).__name__}"
        )

    return data


def _merge_overrides(
    dst: dict[str, Any], src: dict[str, Any], *, src_path: Path
) -> None:
    """Merge config overrides from `src` into `dst`.

    Merge rules:
      - missing key -> copy
      - dict + dict -> recursive merge
      - dict vs non-dict -> error
      - anything else -> the override wins
    """
    for key, value in src.items():
        if key not in dst or dst[key] is None:
            dst[key] = value
            continue

        existing = dst[key]
        if isinstance(existing, dict) and isinstance(value, dict):
            _merge_overrides(existing, value, src_path=src_path)
            continue

        if isinstance(existing, dict) or isinstance(value, dict):
            raise ValueError(
                f"Config merge conflict on key {key!r} from {src_path}: "
                f"existing type={type(existing).__name__}, new type={type(value).__name__}"
            )

        dst[key] = value


def _drop_replaced_tables(base: dict[str, Any], overrides: dict[str, Any], *, src_path: Path) -> None:
    replace = overrides.pop("replace_tables", None) or []
    if isinstance(replace, str):
        replace = [replace]
    if not isinstance(replace, list):
        raise TypeError(f"replace_tables must be a list in {src_path}")

    for table in replace:
        if table not in REPLACEABLE_TABLES:
            raise ValueError(
                f"replace_tables entry {table!r} in {src_path} is not one of "
                f"{', '.join(REPLACEABLE_TABLES)}"
            )
        if table == "colors":
            base["colors"]["slots"] = {}
        else:
            base[table] = {}


def load_config(path: Optional[Path] = None) -> DiagramConfig:
    """Load diagram configuration: built-in tables, optionally overridden by YAML."""
    if path is None:
        return DiagramConfig.default()

    if not path.exists():
        raise FileNotFoundError(str(path))

    merged = default_config_mapping()
    overrides = _load_yaml_mapping(path)
    _drop_replaced_tables(merged, overrides, src_path=path)
    _merge_overrides(merged, overrides, src_path=path)

    try:
        return config_from_mapping(merged)
    except (TypeError, ValueError) as e:
        raise type(e)(f"Invalid config {path}: {e}") from e


def load_graph(path: Path) -> list[GraphNode]:
    """Read a graph document (as written for the `graph` output)."""
    if not path.is_file():
        raise FileNotFoundError(str(path))
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse graph JSON {path}: {e}") from e
    return graph_from_dict(data)
