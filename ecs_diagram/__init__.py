"""Entity/component relationship diagrams from declaration sources."""
from __future__ import annotations

from .config import DiagramConfig
from .pipeline import DiagramResult, build_diagram, run_pipeline

__all__ = ["DiagramConfig", "DiagramResult", "build_diagram", "run_pipeline"]
__version__ = "0.1.0"
