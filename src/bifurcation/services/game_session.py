"""Game Session: Orchestrates puzzle selection, key input and game messages."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel

from bifurcation.core.config import EngineConfig
from bifurcation.core.events import GameEvent, PuzzleSolved
from bifurcation.core.puzzle import PuzzleDefinition
from bifurcation.core.state import GameState, MoveOutcome
from bifurcation.core.types import Direction
from bifurcation.repositories.puzzle_repository import PuzzleRepository

logger = logging.getLogger(__name__)

KEY_DIRECTIONS: Dict[str, Direction] = {
    "w": Direction.UP,
    "arrowup": Direction.UP,
    "up": Direction.UP,
    "s": Direction.DOWN,
    "arrowdown": Direction.DOWN,
    "down": Direction.DOWN,
    "a": Direction.LEFT,
    "arrowleft": Direction.LEFT,
    "left": Direction.LEFT,
    "d": Direction.RIGHT,
    "arrowright": Direction.RIGHT,
    "right": Direction.RIGHT,
}

SOLVED_MESSAGE = "PUZZLE SOLVED!"
RESOLVED_MESSAGE = "BIFURCATION RESOLVED!"


class KeyResult(BaseModel):
    """What a single key press did."""

    key: str
    action: str  # move, undo, reset, switch, cycle, hint or ignored
    outcome: Optional[MoveOutcome] = None
    changed: bool = False
    message: Optional[str] = None


class GameSession:
    """
    Drives a GameState from key presses.

    The session owns puzzle selection and player-facing messages; every rule
    decision stays in GameState.
    """

    def __init__(self, repository: PuzzleRepository, config: EngineConfig | None = None):
        """
        Initialize a game session.

        Args:
            repository: Source of puzzle definitions
            config: Engine tunables passed to the GameState
        """
        self.repository = repository
        self.config = config or EngineConfig()
        self.state = GameState(self.config)
        self.puzzle: Optional[PuzzleDefinition] = None
        self.messages: List[str] = []
        self.state.subscribe(self._on_event)

    @property
    def layer(self) -> int:
        return self.puzzle.bifurcation_layer if self.puzzle else 1

    def _on_event(self, event: GameEvent) -> None:
        if isinstance(event, PuzzleSolved):
            self.messages.append(RESOLVED_MESSAGE if self.layer > 1 else SOLVED_MESSAGE)

    def load(self, puzzle_id: str) -> PuzzleDefinition:
        """
        Load a puzzle by id into the session's GameState.

        Raises:
            KeyError: If the puzzle is not registered
            UnsupportedFeatureError: If the puzzle needs an unimplemented feature
        """
        puzzle = self.repository.get_by_id(puzzle_id)
        self.state.load_puzzle(puzzle)
        self.puzzle = puzzle
        self.messages.clear()
        return puzzle

    def reset(self) -> None:
        """Reload the current puzzle from its definition."""
        if self.puzzle is None:
            return
        self.state.load_puzzle(self.puzzle)
        self.messages.clear()

    def hint(self) -> Optional[str]:
        if self.puzzle is None:
            return None
        return self.puzzle.hint or self.puzzle.description or None

    def handle_key(self, key: str) -> KeyResult:
        """
        Translate one key press into a command.

        Movement: w/a/s/d, arrow keys and direction names. From layer 2 on,
        digit keys select a branch (1 = first) and tab cycles branches.
        z undoes, r resets and ? shows the hint.
        """
        token = key.strip().lower()

        direction = KEY_DIRECTIONS.get(token)
        if direction is not None:
            outcome = self.state.try_move(direction)
            return KeyResult(key=key, action="move", outcome=outcome, changed=outcome.ok)

        if self.layer > 1:
            if token.isdigit():
                before = self.state.active_branch
                self.state.switch_branch(int(token) - 1)
                return KeyResult(key=key, action="switch", changed=self.state.active_branch != before)
            if token == "tab":
                self.state.cycle_branch()
                return KeyResult(key=key, action="cycle", changed=True)

        if token == "z":
            return KeyResult(key=key, action="undo", changed=self.state.undo())
        if token == "r":
            self.reset()
            return KeyResult(key=key, action="reset", changed=True)
        if token == "?":
            return KeyResult(key=key, action="hint", message=self.hint())

        logger.debug("Ignoring key %r", key)
        return KeyResult(key=key, action="ignored")

    def play(self, sequence: Iterable[str]) -> List[KeyResult]:
        """Feed every key in ``sequence`` through ``handle_key``."""
        return [self.handle_key(key) for key in sequence]


__all__ = ["GameSession", "KeyResult", "KEY_DIRECTIONS"]
