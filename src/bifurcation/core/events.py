"""
Events emitted by GameState after a command completes.

Listeners registered with ``GameState.subscribe`` receive the event objects
synchronously, after the state has been fully updated.
"""

from __future__ import annotations

from typing import Callable, Literal, Optional, Union

from pydantic import BaseModel


class PuzzleLoaded(BaseModel):
    kind: Literal["puzzle_loaded"] = "puzzle_loaded"
    puzzle_id: Optional[str] = None
    name: Optional[str] = None
    branch_count: int


class MoveCommitted(BaseModel):
    kind: Literal["move_committed"] = "move_committed"
    branch: int
    direction: str
    pushed: bool
    moves: int
    pushes: int


class PuzzleSolved(BaseModel):
    kind: Literal["puzzle_solved"] = "puzzle_solved"
    moves: int
    pushes: int
    branch_count: int


class UndoPerformed(BaseModel):
    kind: Literal["undo_performed"] = "undo_performed"
    moves: int
    pushes: int
    active_branch: int


GameEvent = Union[PuzzleLoaded, MoveCommitted, PuzzleSolved, UndoPerformed]
EventListener = Callable[[GameEvent], None]

__all__ = [
    "PuzzleLoaded",
    "MoveCommitted",
    "PuzzleSolved",
    "UndoPerformed",
    "GameEvent",
    "EventListener",
]
