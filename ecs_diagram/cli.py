# ecs_diagram/cli.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from .constants import COMPONENTS_SRC_DEFAULT, ENTITIES_SRC_DEFAULT, OUTPUTS_DEFAULT
from .io import load_config, load_graph, load_source_text
from .outputs import OUTPUT_IDS, select_outputs
from .pipeline import run_graph, run_pipeline
from .validate import validate_graph, validate_sources
from .writer import write_text


def _parse_outputs(raw: str) -> tuple[str, ...]:
    ids = tuple(o.strip() for o in raw.split(",") if o.strip())
    unknown = sorted(set(ids) - set(OUTPUT_IDS))
    if unknown or not ids:
        raise argparse.ArgumentTypeError(
            f"expected a comma-separated subset of {', '.join(OUTPUT_IDS)}"
        )
    return ids


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ecs-diagram",
        description=(
            "Generate an entity/component relationship diagram from component "
            "and entity declaration sources."
        ),
    )
    parser.add_argument(
        "--components",
        type=Path,
        default=Path(COMPONENTS_SRC_DEFAULT),
        help="Component declarations source (defComponent calls)",
    )
    parser.add_argument(
        "--entities",
        type=Path,
        default=Path(ENTITIES_SRC_DEFAULT),
        help="Entity class declarations source",
    )
    parser.add_argument(
        "--graph",
        type=Path,
        default=None,
        help=(
            "Start from a previously generated graph JSON instead of the "
            "declaration sources (--components/--entities are ignored)."
        ),
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file overriding the level, color and target tables or geometry",
    )
    parser.add_argument(
        "--out-dir",
        type=Path,
        default=Path("."),
        help="Output directory for generated artifacts",
    )
    parser.add_argument(
        "--outputs",
        type=_parse_outputs,
        default=OUTPUTS_DEFAULT,
        help=f"Comma-separated outputs to write ({', '.join(OUTPUT_IDS)}; default: "
        f"{','.join(OUTPUTS_DEFAULT)})",
    )
    parser.add_argument(
        "--known-components-only",
        action="store_true",
        help="Only record component uses that match a declared component",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on validation warnings (e.g., undeclared components). Errors always fail.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entrypoint."""
    args = build_parser().parse_args(argv)

    cfg = load_config(args.config)

    if args.graph is not None:
        nodes = load_graph(args.graph)
        errors, warnings = validate_graph(nodes, cfg)
    else:
        # Both sources are read before any extraction.
        components_src = load_source_text(args.components)
        entities_src = load_source_text(args.entities)
        errors, warnings = validate_sources(
            components_src,
            entities_src,
            cfg,
            known_components_only=args.known_components_only,
        )
        nodes = None

    for warning in warnings:
        print(f"warning: {warning}", file=sys.stderr)

    if errors or (args.strict and warnings):
        for error in errors:
            print(f"error: {error}", file=sys.stderr)
        raise SystemExit(2)

    if nodes is not None:
        result = run_graph(nodes, cfg)
    else:
        result = run_pipeline(
            components_src,
            entities_src,
            cfg,
            known_components_only=args.known_components_only,
        )

    out_dir: Path = args.out_dir
    for spec in select_outputs(args.outputs):
        path = out_dir / spec.filename
        write_text(path, spec.render(result, cfg))
        print(f"Generated {path} ({spec.title})")
