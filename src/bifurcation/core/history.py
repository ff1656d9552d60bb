"""
Undo history.

A GameSnapshot holds only what a move can change: branch contents, the
active branch, the counters and the plate/door records. Walls, targets and
color tables are immutable after load, so every snapshot shares them with the
live state instead of copying them.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, List, Optional

from pydantic import BaseModel, Field

from .plates import Door, PressurePlate
from .branch import BranchState

DEFAULT_MAX_HISTORY = 50


class GameSnapshot(BaseModel):
    branches: List[BranchState]
    active_branch: int
    moves: int
    pushes: int
    plates: List[PressurePlate] = Field(default_factory=list)
    doors: List[Door] = Field(default_factory=list)


class MoveHistory:
    """Bounded LIFO of snapshots; the oldest entry is dropped once full."""

    def __init__(self, max_entries: int = DEFAULT_MAX_HISTORY):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: Deque[GameSnapshot] = deque(maxlen=max_entries)

    def push(self, snapshot: GameSnapshot) -> None:
        self._entries.append(snapshot)

    def pop(self) -> Optional[GameSnapshot]:
        if not self._entries:
            return None
        return self._entries.pop()

    def peek(self) -> Optional[GameSnapshot]:
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)


__all__ = ["GameSnapshot", "MoveHistory", "DEFAULT_MAX_HISTORY"]
