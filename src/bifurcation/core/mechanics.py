"""
Sokoban Mechanics

Pure push/pull rules evaluated against one branch's geometry. Nothing in this
module mutates its inputs or reaches into a GameState; every fact it needs
(bounds, walls, boxes, an optional blocker predicate) is passed explicitly.

Key concepts:
- Checks return structured results with a ``reason`` instead of raising
- Execution returns fresh copies so a trial move can simply be discarded
- A ``blocker`` is any callable ``(Position) -> bool``, typically a door query
"""

from __future__ import annotations

from typing import Callable, Collection, List, Optional, Sequence

from pydantic import BaseModel, Field

from .types import Bounds, Direction, DirectionLike, Position

Blocker = Callable[[Position], bool]


class SokobanBox(BaseModel):
    """A pushable box. ``id`` is its reading-order index in the puzzle layout."""

    position: Position
    id: int

    def clone(self) -> "SokobanBox":
        return self.model_copy(deep=True)


class Target(BaseModel):
    """A goal cell. Its color is looked up per branch by ``id``."""

    position: Position
    id: int


class SokobanPlayer(BaseModel):
    position: Position
    facing: Direction = Direction.RIGHT

    def clone(self) -> "SokobanPlayer":
        return self.model_copy(deep=True)


class PushCheck(BaseModel):
    can_push: bool
    reason: Optional[str] = None


class MoveCheck(BaseModel):
    can_move: bool
    will_push_box: bool = False
    box: Optional[SokobanBox] = None
    reason: str


class PullCheck(BaseModel):
    can_pull: bool
    box: Optional[SokobanBox] = None
    reason: str


class MoveExecution(BaseModel):
    player: SokobanPlayer
    boxes: List[SokobanBox] = Field(default_factory=list)
    pushed: bool = False


class SokobanMechanics:
    """Stateless move/push rules. All methods are static."""

    @staticmethod
    def is_valid_position(pos: Position, bounds: Bounds, walls: Collection[Position]) -> bool:
        """Check that ``pos`` is inside the grid and not a wall."""
        if not bounds.contains(pos):
            return False
        return pos not in walls

    @staticmethod
    def can_push_box(
        box: SokobanBox,
        direction: DirectionLike,
        bounds: Bounds,
        walls: Collection[Position],
        other_boxes: Sequence[SokobanBox],
        blocker: Optional[Blocker] = None,
    ) -> PushCheck:
        """
        Check whether ``box`` can be pushed one cell in ``direction``.

        Returns:
            PushCheck with reason 'wall', 'box' or 'blocked' on failure
        """
        destination = box.position.offset(Direction.parse(direction))

        if not SokobanMechanics.is_valid_position(destination, bounds, walls):
            return PushCheck(can_push=False, reason="wall")

        if any(other.id != box.id and other.position == destination for other in other_boxes):
            return PushCheck(can_push=False, reason="box")

        if blocker is not None and blocker(destination):
            return PushCheck(can_push=False, reason="blocked")

        return PushCheck(can_push=True)

    @staticmethod
    def can_player_move(
        player: SokobanPlayer,
        direction: DirectionLike,
        bounds: Bounds,
        walls: Collection[Position],
        boxes: Sequence[SokobanBox],
        blocker: Optional[Blocker] = None,
    ) -> MoveCheck:
        """
        Check whether the player can step in ``direction``, possibly pushing a box.

        Failure reasons are 'wall' and 'blocked' for the player's own
        destination, or 'box_<reason>' when the box in the way cannot move.
        Success reasons are 'push' and 'clear'.
        """
        heading = Direction.parse(direction)
        destination = player.position.offset(heading)

        if not SokobanMechanics.is_valid_position(destination, bounds, walls):
            return MoveCheck(can_move=False, reason="wall")

        if blocker is not None and blocker(destination):
            return MoveCheck(can_move=False, reason="blocked")

        box_in_way = next((b for b in boxes if b.position == destination), None)
        if box_in_way is not None:
            push = SokobanMechanics.can_push_box(box_in_way, heading, bounds, walls, boxes, blocker)
            if push.can_push:
                return MoveCheck(can_move=True, will_push_box=True, box=box_in_way, reason="push")
            return MoveCheck(can_move=False, reason=f"box_{push.reason}")

        return MoveCheck(can_move=True, reason="clear")

    @staticmethod
    def execute_move(
        player: SokobanPlayer,
        direction: DirectionLike,
        boxes: Sequence[SokobanBox],
        move_check: MoveCheck,
    ) -> MoveExecution:
        """Apply a validated move to copies of ``player`` and ``boxes``."""
        heading = Direction.parse(direction)

        new_player = player.clone()
        new_player.position = player.position.offset(heading)
        new_player.facing = heading

        new_boxes = [b.clone() for b in boxes]
        pushed = False

        if move_check.will_push_box and move_check.box is not None:
            for box in new_boxes:
                if box.id == move_check.box.id:
                    box.position = box.position.offset(heading)
                    pushed = True
                    break

        return MoveExecution(player=new_player, boxes=new_boxes, pushed=pushed)

    @staticmethod
    def can_player_pull(
        player: SokobanPlayer,
        direction: DirectionLike,
        bounds: Bounds,
        walls: Collection[Position],
        boxes: Sequence[SokobanBox],
        blocker: Optional[Blocker] = None,
    ) -> PullCheck:
        """
        Check whether the player can step forward dragging the box behind them.

        Returns:
            PullCheck with reason 'wall', 'blocked' or 'no_box' on failure, 'pull' on success
        """
        heading = Direction.parse(direction)
        destination = player.position.offset(heading)

        if not SokobanMechanics.is_valid_position(destination, bounds, walls):
            return PullCheck(can_pull=False, reason="wall")

        if blocker is not None and blocker(destination):
            return PullCheck(can_pull=False, reason="blocked")

        behind = player.position.offset(heading.opposite)
        box_behind = next((b for b in boxes if b.position == behind), None)
        if box_behind is None:
            return PullCheck(can_pull=False, reason="no_box")

        return PullCheck(can_pull=True, box=box_behind, reason="pull")

    @staticmethod
    def execute_pull(
        player: SokobanPlayer,
        direction: DirectionLike,
        boxes: Sequence[SokobanBox],
        pull_check: PullCheck,
    ) -> MoveExecution:
        """Apply a validated pull: the box takes the player's old cell."""
        heading = Direction.parse(direction)

        new_player = player.clone()
        new_player.position = player.position.offset(heading)
        new_player.facing = heading

        new_boxes = [b.clone() for b in boxes]
        pulled = False

        if pull_check.can_pull and pull_check.box is not None:
            for box in new_boxes:
                if box.id == pull_check.box.id:
                    box.position = player.position
                    pulled = True
                    break

        return MoveExecution(player=new_player, boxes=new_boxes, pushed=pulled)

    @staticmethod
    def is_solved(
        boxes: Sequence[SokobanBox],
        targets: Sequence[Target],
        color_matcher: Optional[Callable[[SokobanBox, Target], bool]] = None,
    ) -> bool:
        """Classic single-branch win check: one box on every target, colors permitting."""
        if len(boxes) != len(targets):
            return False

        for box in boxes:
            target = next((t for t in targets if t.position == box.position), None)
            if target is None:
                return False
            if color_matcher is not None and not color_matcher(box, target):
                return False

        return True

    @staticmethod
    def is_box_deadlocked(
        box: SokobanBox,
        walls: Collection[Position],
        targets: Sequence[Target],
    ) -> bool:
        """Corner check: a box off-target with a horizontal and a vertical wall neighbour."""
        if any(t.position == box.position for t in targets):
            return False

        x, y = box.position
        horizontal = Position(x - 1, y) in walls or Position(x + 1, y) in walls
        vertical = Position(x, y - 1) in walls or Position(x, y + 1) in walls
        return horizontal and vertical

    @staticmethod
    def get_deadlocked_boxes(
        boxes: Sequence[SokobanBox],
        walls: Collection[Position],
        targets: Sequence[Target],
    ) -> List[SokobanBox]:
        return [b for b in boxes if SokobanMechanics.is_box_deadlocked(b, walls, targets)]

    @staticmethod
    def calculate_heuristic(boxes: Sequence[SokobanBox], targets: Sequence[Target]) -> int:
        """Sum over boxes of the Manhattan distance to the nearest target."""
        if not targets:
            return 0
        return sum(min(box.position.manhattan(t.position) for t in targets) for box in boxes)


__all__ = [
    "Blocker",
    "SokobanBox",
    "SokobanPlayer",
    "Target",
    "PushCheck",
    "MoveCheck",
    "PullCheck",
    "MoveExecution",
    "SokobanMechanics",
]
