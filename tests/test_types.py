import pytest

from bifurcation.core.types import Bounds, Direction, EntityKind, Position, Weight


class TestDirection:
    """Tests for direction parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("up", Direction.UP),
            ("U", Direction.UP),
            ("ArrowDown", Direction.DOWN),
            ("l", Direction.LEFT),
            ("right", Direction.RIGHT),
            ((1, 0), Direction.RIGHT),
            ((0, -1), Direction.UP),
            (Direction.LEFT, Direction.LEFT),
        ],
    )
    def test_parse(self, value, expected):
        assert Direction.parse(value) is expected

    @pytest.mark.parametrize("value", ["north", "", (1, 1), (0, 0)])
    def test_parse_rejects(self, value):
        with pytest.raises(ValueError):
            Direction.parse(value)

    def test_opposites(self):
        for direction in Direction:
            assert direction.opposite.opposite is direction
            dx, dy = direction.vector
            assert direction.opposite.vector == (-dx, -dy)


def test_position_offset():
    assert Position(2, 2).offset(Direction.UP) == Position(2, 1)
    assert Position(2, 2).offset(Direction.RIGHT) == Position(3, 2)


def test_bounds_contains():
    bounds = Bounds(3, 2)

    assert bounds.contains(Position(2, 1))
    assert not bounds.contains(Position(3, 1))
    assert not bounds.contains(Position(0, -1))


def test_entity_weights():
    assert EntityKind.PLAYER.weight == Weight.LIGHT == 1
    assert EntityKind.BOX.weight == Weight.MEDIUM == 2
