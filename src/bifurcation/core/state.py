"""
Game State Management

This module defines GameState, which owns every branch of a loaded puzzle,
the shared geometry, the color tables, the plate/door manager and the undo
history. It is the command/query surface an orchestrator drives.

Key concepts:
- Branches share walls and targets but diverge in box positions and colors
- A command runs to completion (validate, commit, plate update, solved check)
- Rejected commands are no-ops reported through MoveOutcome
- Undo restores snapshots of mutable state only; geometry is shared
"""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel

from bifurcation.utils.logging import log_calls

from .branch import BranchState
from .colors import colors_match
from .config import EngineConfig
from .errors import UnsupportedFeatureError
from .events import EventListener, GameEvent, MoveCommitted, PuzzleLoaded, PuzzleSolved, UndoPerformed
from .history import GameSnapshot, MoveHistory
from .mechanics import MoveExecution, SokobanBox, SokobanMechanics, SokobanPlayer, Target
from .plates import PressurePlateManager
from .puzzle import PuzzleDefinition
from .types import Bounds, ColorTag, Direction, DirectionLike, Position

logger = logging.getLogger(__name__)


class MoveOutcome(BaseModel):
    status: str  # ok or rejected
    reason: Optional[str] = None
    direction: Optional[Direction] = None
    pushed: bool = False
    solved: bool = False
    moves: int = 0
    pushes: int = 0

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def rejected(cls, reason: str, state: "GameState", direction: Optional[Direction] = None) -> "MoveOutcome":
        return cls(
            status="rejected",
            reason=reason,
            direction=direction,
            solved=state.is_solved(),
            moves=state.moves,
            pushes=state.pushes,
        )

    @classmethod
    def success(cls, state: "GameState", direction: Direction, pushed: bool, reason: str) -> "MoveOutcome":
        return cls(
            status="ok",
            reason=reason,
            direction=direction,
            pushed=pushed,
            solved=state.is_solved(),
            moves=state.moves,
            pushes=state.pushes,
        )


class GameState:
    """
    Complete state of a loaded bifurcation puzzle.

    Attributes:
        branches: One BranchState per parallel reality (1, 2 or 4)
        active_branch: Index of the branch commands apply to
        walls: Wall cells shared by every branch
        targets: Target cells shared by every branch
        box_colors: Box id -> color tag
        target_colors_per_branch: Branch index -> target id -> color tag
        moves / pushes: Counters reset on load
        plates: The single PressurePlateManager
        history: Bounded undo stack

    Examples:
        >>> state = GameState()
        >>> state.load_puzzle(PuzzleDefinition(width=5, height=3, layout=["#####", "#P$.#", "#####"]))
        >>> state.try_move("right").ok
        True
        >>> state.is_solved()
        True
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()
        self.puzzle: Optional[PuzzleDefinition] = None
        self.branches: List[BranchState] = [BranchState()]
        self.active_branch = 0
        self.width = 0
        self.height = 0
        self.walls: FrozenSet[Position] = frozenset()
        self.targets: List[Target] = []
        self.box_colors: Dict[int, ColorTag] = {}
        self.target_colors_per_branch: Dict[int, Dict[int, ColorTag]] = {}
        self.moves = 0
        self.pushes = 0
        self.plates = PressurePlateManager()
        self.history = MoveHistory(self.config.max_history)
        self._listeners: List[EventListener] = []

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def subscribe(self, listener: EventListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: GameEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @log_calls()
    def load_puzzle(self, puzzle: PuzzleDefinition | dict) -> None:
        """
        Load a puzzle definition, replacing all current state.

        Args:
            puzzle: A PuzzleDefinition or a raw mapping in the same shape

        Raises:
            pydantic.ValidationError: If a raw mapping does not fit the schema
            UnsupportedFeatureError: If the puzzle declares per-branch walls and
                the config asks for unsupported features to be rejected
        """
        if not isinstance(puzzle, PuzzleDefinition):
            puzzle = PuzzleDefinition.model_validate(puzzle)

        if puzzle.walls_per_branch:
            if self.config.unsupported_features == "error":
                raise UnsupportedFeatureError("walls_per_branch", puzzle.id)
            logger.warning("Per-branch walls are not implemented; ignoring them for puzzle %s", puzzle.id)

        branch_count = puzzle.branch_count
        layout = puzzle.parse_layout()

        self.puzzle = puzzle
        self.width = puzzle.width
        self.height = puzzle.height
        self.moves = 0
        self.pushes = 0
        self.history = MoveHistory(self.config.max_history)
        self.walls = frozenset(layout.walls)
        self.targets = list(layout.targets)
        self.active_branch = 0

        if layout.player_start is None:
            logger.warning("Puzzle %s has no player start; placing player at (0, 0)", puzzle.id)
        start = layout.player_start or Position(0, 0)
        self.branches = [
            BranchState(
                player=SokobanPlayer(position=start),
                boxes=[box.clone() for box in layout.boxes],
            )
            for _ in range(branch_count)
        ]

        self.box_colors = {
            box.id: puzzle.colors.boxes.get(box.id, ColorTag.NEUTRAL) for box in layout.boxes
        }
        self.target_colors_per_branch = {}
        for branch in range(branch_count):
            authored = puzzle.colors.targets_per_branch.get(branch, {})
            self.target_colors_per_branch[branch] = {
                target.id: authored.get(target.id, ColorTag.NEUTRAL) for target in self.targets
            }

        stray = sorted(
            b
            for b in set(puzzle.pressure_plates_per_branch) | set(puzzle.doors_per_branch)
            if not 0 <= b < branch_count
        )
        if stray:
            logger.warning("Puzzle %s defines plates/doors for missing branches %s", puzzle.id, stray)

        self.plates.reset()
        for plate in puzzle.build_plates():
            self.plates.add_plate(plate)
        for door in puzzle.build_doors():
            self.plates.add_door(door)
        self.plates.update_all(self.branches)

        logger.info(
            "Loaded puzzle %s: %dx%d, %d branch(es), %d box(es), %d target(s), %d plate(s), %d door(s)",
            puzzle.id,
            self.width,
            self.height,
            branch_count,
            len(layout.boxes),
            len(self.targets),
            len(self.plates.plates),
            len(self.plates.doors),
        )
        self._emit(PuzzleLoaded(puzzle_id=puzzle.id, name=puzzle.name, branch_count=branch_count))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def bounds(self) -> Bounds:
        return Bounds(self.width, self.height)

    @property
    def branch_count(self) -> int:
        return len(self.branches)

    def get_active_branch(self) -> BranchState:
        return self.branches[self.active_branch]

    def is_wall(self, pos: Position) -> bool:
        return Position(*pos) in self.walls

    def get_box_at(self, branch: int, pos: Position) -> Optional[SokobanBox]:
        return self.branches[branch].box_at(Position(*pos))

    def is_target(self, pos: Position) -> bool:
        return self.get_target_at(pos) is not None

    def get_target_at(self, pos: Position) -> Optional[Target]:
        pos = Position(*pos)
        return next((t for t in self.targets if t.position == pos), None)

    def box_color(self, box: SokobanBox) -> ColorTag:
        return self.box_colors.get(box.id, ColorTag.NEUTRAL)

    def target_color(self, branch: int, target: Target) -> ColorTag:
        return self.target_colors_per_branch.get(branch, {}).get(target.id, ColorTag.NEUTRAL)

    def is_box_on_correct_target(self, branch: int, box: SokobanBox) -> bool:
        target = self.get_target_at(box.position)
        if target is None:
            return False
        return colors_match(self.box_color(box), self.target_color(branch, target))

    def is_solved(self) -> bool:
        """
        Authoritative win condition across all branches.

        Every target that is not inactive in a branch must hold a box of a
        matching color in that branch. Inactive targets are skipped, and a
        branch without any active target can never be solved. Extra boxes
        never block a solve.
        """
        for index, branch in enumerate(self.branches):
            active = [t for t in self.targets if self.target_color(index, t) is not ColorTag.INACTIVE]
            if not active:
                return False
            for target in active:
                box = branch.box_at(target.position)
                if box is None or not self.is_box_on_correct_target(index, box):
                    return False
        return True

    def unsolvable_branches(self) -> List[int]:
        """Branches with more active targets than boxes."""
        return [
            index
            for index, branch in enumerate(self.branches)
            if sum(1 for t in self.targets if self.target_color(index, t) is not ColorTag.INACTIVE)
            > len(branch.boxes)
        ]

    def deadlocked_boxes(self, branch: int) -> List[SokobanBox]:
        return SokobanMechanics.get_deadlocked_boxes(self.branches[branch].boxes, self.walls, self.targets)

    def heuristic(self, branch: int) -> int:
        return SokobanMechanics.calculate_heuristic(self.branches[branch].boxes, self.targets)

    def is_door_blocking(self, branch: int, pos: Position) -> bool:
        return self.plates.is_door_blocking(branch, Position(*pos))

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _heading(self, direction: DirectionLike) -> Optional[Direction]:
        try:
            return Direction.parse(direction)
        except ValueError:
            logger.debug("Ignoring unknown direction %r", direction)
            return None

    def try_move(self, direction: DirectionLike) -> MoveOutcome:
        """
        Move the active branch's player one cell, pushing a box if needed.

        Phases:
        1. Validate against walls, boxes and blocking doors
        2. Snapshot into history and commit the move
        3. Recompute plates and doors in every branch
        4. Evaluate the solved predicate and emit events
        """
        heading = self._heading(direction)
        if heading is None:
            return MoveOutcome.rejected("direction", self)
        index = self.active_branch
        branch = self.branches[index]

        check = SokobanMechanics.can_player_move(
            branch.player,
            heading,
            self.bounds,
            self.walls,
            branch.boxes,
            blocker=lambda pos: self.plates.is_door_blocking(index, pos),
        )
        if not check.can_move:
            logger.debug("Move %s rejected in branch %d: %s", heading.value, index, check.reason)
            return MoveOutcome.rejected(check.reason, self, heading)

        execution = SokobanMechanics.execute_move(branch.player, heading, branch.boxes, check)
        return self._commit(index, heading, execution, check.reason)

    def try_pull(self, direction: DirectionLike) -> MoveOutcome:
        """Step forward dragging the box behind the player; disabled unless ``allow_pull``."""
        heading = self._heading(direction)
        if heading is None:
            return MoveOutcome.rejected("direction", self)
        if not self.config.allow_pull:
            return MoveOutcome.rejected("pull_disabled", self, heading)

        index = self.active_branch
        branch = self.branches[index]
        check = SokobanMechanics.can_player_pull(
            branch.player,
            heading,
            self.bounds,
            self.walls,
            branch.boxes,
            blocker=lambda pos: self.plates.is_door_blocking(index, pos),
        )
        if not check.can_pull:
            return MoveOutcome.rejected(check.reason, self, heading)

        execution = SokobanMechanics.execute_pull(branch.player, heading, branch.boxes, check)
        return self._commit(index, heading, execution, check.reason)

    def _commit(self, index: int, heading: Direction, execution: MoveExecution, reason: str) -> MoveOutcome:
        was_solved = self.is_solved()
        self.save_state()

        branch = self.branches[index]
        branch.player = execution.player
        branch.boxes = execution.boxes
        self.moves += 1
        if execution.pushed:
            self.pushes += 1

        self.plates.update_all(self.branches)

        outcome = MoveOutcome.success(self, heading, execution.pushed, reason)
        self._emit(
            MoveCommitted(
                branch=index,
                direction=heading.value,
                pushed=execution.pushed,
                moves=self.moves,
                pushes=self.pushes,
            )
        )
        if outcome.solved and not was_solved:
            logger.info("Puzzle %s solved in %d moves, %d pushes", self._puzzle_id, self.moves, self.pushes)
            self._emit(PuzzleSolved(moves=self.moves, pushes=self.pushes, branch_count=self.branch_count))
        return outcome

    def switch_branch(self, branch: int) -> None:
        """Make ``branch`` active; out-of-range indices are ignored."""
        if 0 <= branch < len(self.branches):
            self.active_branch = branch

    def cycle_branch(self) -> None:
        self.active_branch = (self.active_branch + 1) % len(self.branches)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def snapshot(self) -> GameSnapshot:
        manager = self.plates.clone()
        return GameSnapshot(
            branches=[b.clone() for b in self.branches],
            active_branch=self.active_branch,
            moves=self.moves,
            pushes=self.pushes,
            plates=manager.plates,
            doors=manager.doors,
        )

    def restore(self, snapshot: GameSnapshot) -> None:
        self.branches = [b.clone() for b in snapshot.branches]
        self.active_branch = snapshot.active_branch
        self.moves = snapshot.moves
        self.pushes = snapshot.pushes
        restored = PressurePlateManager(snapshot.plates, snapshot.doors).clone()
        self.plates = restored

    def save_state(self) -> None:
        self.history.push(self.snapshot())

    def undo(self) -> bool:
        """Restore the most recent snapshot. Returns False when history is empty."""
        snapshot = self.history.pop()
        if snapshot is None:
            return False
        self.restore(snapshot)
        self._emit(UndoPerformed(moves=self.moves, pushes=self.pushes, active_branch=self.active_branch))
        return True

    @property
    def _puzzle_id(self) -> Optional[str]:
        return self.puzzle.id if self.puzzle else None


__all__ = ["GameState", "MoveOutcome"]
