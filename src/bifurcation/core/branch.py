from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from .mechanics import SokobanBox, SokobanPlayer
from .types import Position


class BranchState(BaseModel):
    """One parallel reality: a player and its boxes.

    Branches never share mutable sub-objects; use ``clone`` to fork one.
    """

    player: SokobanPlayer = Field(default_factory=lambda: SokobanPlayer(position=Position(0, 0)))
    boxes: List[SokobanBox] = Field(default_factory=list)

    def box_at(self, pos: Position) -> Optional[SokobanBox]:
        return next((b for b in self.boxes if b.position == pos), None)

    def box_by_id(self, box_id: int) -> Optional[SokobanBox]:
        return next((b for b in self.boxes if b.id == box_id), None)

    def clone(self) -> "BranchState":
        return self.model_copy(deep=True)


__all__ = ["BranchState"]
