from __future__ import annotations

"""Utilities for resolving the puzzle knowledge-base and config paths."""

from pathlib import Path


def kb_puzzles_path(path: str | None) -> str:
    return path or str(Path.cwd() / "kb" / "puzzles")


def config_path(path: str | None) -> str | None:
    """Explicit config path, else ``bifurcation.yaml`` in the working directory if present."""
    if path:
        return path
    default = Path.cwd() / "bifurcation.yaml"
    return str(default) if default.exists() else None


__all__ = ["kb_puzzles_path", "config_path"]
