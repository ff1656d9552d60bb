from __future__ import annotations

from typing import List

from bifurcation.core.puzzle import PuzzleDefinition

from .registry_base import NameRegistry


class PuzzleRegistry(NameRegistry[PuzzleDefinition]):
    """Puzzle definitions keyed by id, kept in registration order."""

    def in_order(self) -> List[PuzzleDefinition]:
        return list(self.items.values())
