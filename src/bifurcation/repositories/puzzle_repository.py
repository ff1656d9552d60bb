"""Puzzle Repository: Clean abstraction for puzzle definition access."""

from __future__ import annotations

from typing import List, Optional

from bifurcation.core.puzzle import PuzzleDefinition
from bifurcation.core.registries import PuzzleRegistry


class PuzzleRepository:
    """Repository for puzzle access - clean abstraction over the registry."""

    def __init__(self, registry: PuzzleRegistry):
        """
        Initialize puzzle repository.

        Args:
            registry: The registry holding loaded puzzle definitions
        """
        self.registry = registry

    def get_by_id(self, puzzle_id: str) -> PuzzleDefinition:
        """
        Get a puzzle definition by id.

        Raises:
            KeyError: If the puzzle is not registered
        """
        return self.registry.get(puzzle_id)

    def exists(self, puzzle_id: str) -> bool:
        return puzzle_id in self.registry

    def list_all(self) -> List[PuzzleDefinition]:
        """All puzzles in load order."""
        return self.registry.in_order()

    def list_by_layer(self, layer: int) -> List[PuzzleDefinition]:
        return [p for p in self.registry.in_order() if p.bifurcation_layer == layer]

    def list_by_category(self, category: Optional[str]) -> List[PuzzleDefinition]:
        return [p for p in self.registry.in_order() if p.category == category]

    def next_after(self, puzzle_id: str) -> Optional[PuzzleDefinition]:
        """The puzzle following ``puzzle_id`` within the same layer, if any."""
        current = self.get_by_id(puzzle_id)
        layer = self.list_by_layer(current.bifurcation_layer)
        ids = [p.id for p in layer]
        index = ids.index(puzzle_id)
        return layer[index + 1] if index + 1 < len(layer) else None


__all__ = ["PuzzleRepository"]
