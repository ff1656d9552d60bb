"""
Unit tests for the pure push/pull rules.

Tests cover:
- position validity and push checks
- player move checks and their reasons
- move and pull execution on copies
- bijection solve check, deadlocks and heuristic
"""

import pytest

from bifurcation.core.mechanics import SokobanBox, SokobanMechanics, SokobanPlayer, Target
from bifurcation.core.types import Bounds, Direction, Position

BOUNDS = Bounds(6, 5)


def _player(x, y, facing=Direction.RIGHT):
    return SokobanPlayer(position=Position(x, y), facing=facing)


def _box(x, y, box_id=0):
    return SokobanBox(position=Position(x, y), id=box_id)


class TestValidPosition:
    """Tests for is_valid_position."""

    def test_inside_and_free(self):
        assert SokobanMechanics.is_valid_position(Position(1, 1), BOUNDS, set())

    def test_wall(self):
        assert not SokobanMechanics.is_valid_position(Position(1, 1), BOUNDS, {Position(1, 1)})

    @pytest.mark.parametrize("pos", [Position(-1, 0), Position(0, -1), Position(6, 0), Position(0, 5)])
    def test_out_of_bounds(self, pos):
        assert not SokobanMechanics.is_valid_position(pos, BOUNDS, set())


class TestPlayerMove:
    """Tests for can_player_move reasons."""

    def test_clear_move(self):
        check = SokobanMechanics.can_player_move(_player(1, 1), "right", BOUNDS, set(), [])

        assert check.can_move
        assert check.reason == "clear"
        assert not check.will_push_box

    def test_into_wall(self):
        check = SokobanMechanics.can_player_move(_player(1, 1), Direction.RIGHT, BOUNDS, {Position(2, 1)}, [])

        assert not check.can_move
        assert check.reason == "wall"

    def test_off_grid_counts_as_wall(self):
        check = SokobanMechanics.can_player_move(_player(0, 0), Direction.UP, BOUNDS, set(), [])

        assert check.reason == "wall"

    def test_into_blocker(self):
        check = SokobanMechanics.can_player_move(
            _player(1, 1), Direction.RIGHT, BOUNDS, set(), [], blocker=lambda pos: pos == Position(2, 1)
        )

        assert not check.can_move
        assert check.reason == "blocked"

    def test_push(self):
        box = _box(2, 1)
        check = SokobanMechanics.can_player_move(_player(1, 1), Direction.RIGHT, BOUNDS, set(), [box])

        assert check.can_move
        assert check.will_push_box
        assert check.box == box
        assert check.reason == "push"

    def test_box_into_wall(self):
        check = SokobanMechanics.can_player_move(
            _player(1, 1), Direction.RIGHT, BOUNDS, {Position(3, 1)}, [_box(2, 1)]
        )

        assert not check.can_move
        assert check.reason == "box_wall"

    def test_box_into_box(self):
        boxes = [_box(2, 1, 0), _box(3, 1, 1)]
        check = SokobanMechanics.can_player_move(_player(1, 1), Direction.RIGHT, BOUNDS, set(), boxes)

        assert not check.can_move
        assert check.reason == "box_box"

    def test_box_into_blocker(self):
        check = SokobanMechanics.can_player_move(
            _player(1, 1), Direction.RIGHT, BOUNDS, set(), [_box(2, 1)], blocker=lambda pos: pos == Position(3, 1)
        )

        assert not check.can_move
        assert check.reason == "box_blocked"

    def test_vector_direction(self):
        check = SokobanMechanics.can_player_move(_player(1, 1), (0, 1), BOUNDS, set(), [])

        assert check.can_move


class TestPushBox:
    """Tests for can_push_box."""

    def test_same_box_is_not_an_obstacle(self):
        box = _box(2, 1)
        check = SokobanMechanics.can_push_box(box, Direction.LEFT, BOUNDS, set(), [box])

        assert check.can_push
        assert check.reason is None

    def test_off_grid(self):
        check = SokobanMechanics.can_push_box(_box(5, 1), Direction.RIGHT, BOUNDS, set(), [])

        assert not check.can_push
        assert check.reason == "wall"


class TestExecution:
    """Tests for execute_move and execute_pull."""

    def test_move_returns_copies(self):
        player = _player(1, 1)
        boxes = [_box(2, 1, 0), _box(4, 3, 1)]
        check = SokobanMechanics.can_player_move(player, Direction.RIGHT, BOUNDS, set(), boxes)

        result = SokobanMechanics.execute_move(player, Direction.RIGHT, boxes, check)

        assert result.pushed
        assert result.player.position == Position(2, 1)
        assert result.boxes[0].position == Position(3, 1)
        assert result.boxes[1].position == Position(4, 3)
        # inputs untouched
        assert player.position == Position(1, 1)
        assert boxes[0].position == Position(2, 1)

    def test_move_sets_facing(self):
        player = _player(2, 2)
        check = SokobanMechanics.can_player_move(player, Direction.UP, BOUNDS, set(), [])

        result = SokobanMechanics.execute_move(player, Direction.UP, [], check)

        assert result.player.facing == Direction.UP
        assert not result.pushed

    def test_pull_drags_box_into_old_cell(self):
        player = _player(2, 1)
        boxes = [_box(1, 1)]
        check = SokobanMechanics.can_player_pull(player, Direction.RIGHT, BOUNDS, set(), boxes)

        assert check.can_pull
        assert check.reason == "pull"

        result = SokobanMechanics.execute_pull(player, Direction.RIGHT, boxes, check)

        assert result.player.position == Position(3, 1)
        assert result.boxes[0].position == Position(2, 1)
        assert result.pushed

    def test_pull_without_box(self):
        check = SokobanMechanics.can_player_pull(_player(2, 1), Direction.RIGHT, BOUNDS, set(), [])

        assert not check.can_pull
        assert check.reason == "no_box"

    def test_pull_into_wall(self):
        check = SokobanMechanics.can_player_pull(
            _player(2, 1), Direction.RIGHT, BOUNDS, {Position(3, 1)}, [_box(1, 1)]
        )

        assert check.reason == "wall"


class TestSolvedAndHelpers:
    """Tests for is_solved, deadlock detection and heuristic."""

    def test_bijection(self):
        targets = [Target(position=Position(1, 1), id=0)]

        assert SokobanMechanics.is_solved([_box(1, 1)], targets)
        assert not SokobanMechanics.is_solved([_box(2, 1)], targets)
        assert not SokobanMechanics.is_solved([_box(1, 1, 0), _box(2, 2, 1)], targets)

    def test_color_matcher_rejects(self):
        targets = [Target(position=Position(1, 1), id=0)]

        assert not SokobanMechanics.is_solved([_box(1, 1)], targets, color_matcher=lambda box, target: False)

    def test_corner_deadlock(self):
        walls = {Position(0, 1), Position(1, 0)}

        assert SokobanMechanics.is_box_deadlocked(_box(1, 1), walls, [])
        assert not SokobanMechanics.is_box_deadlocked(_box(1, 1), walls, [Target(position=Position(1, 1), id=0)])
        assert not SokobanMechanics.is_box_deadlocked(_box(2, 2), walls, [])

    def test_deadlocked_boxes(self):
        walls = {Position(0, 1), Position(1, 0)}
        boxes = [_box(1, 1, 0), _box(3, 3, 1)]

        assert [b.id for b in SokobanMechanics.get_deadlocked_boxes(boxes, walls, [])] == [0]

    def test_heuristic(self):
        targets = [Target(position=Position(3, 1), id=0), Target(position=Position(1, 4), id=1)]

        assert SokobanMechanics.calculate_heuristic([_box(1, 1)], targets) == 2
        assert SokobanMechanics.calculate_heuristic([_box(1, 1)], []) == 0
        assert SokobanMechanics.calculate_heuristic([], targets) == 0
