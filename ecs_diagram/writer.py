from __future__ import annotations

from pathlib import Path


def write_text(path: Path, content: str) -> None:
    """Write a generated artifact, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
