"""Repository Layer: Clean abstractions for data access."""

from __future__ import annotations

from .puzzle_repository import PuzzleRepository

__all__ = ["PuzzleRepository"]
