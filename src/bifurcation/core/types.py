"""
Primitive value types shared across the engine.

- Position / Bounds: grid coordinates and grid extent
- Direction: the four cardinal moves
- ColorTag: box/target color labels
- Logic / Orientation: plate gate kinds and door orientation
- EntityKind: things that can stand on a pressure plate, with their weight
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Tuple, Union


class Position(NamedTuple):
    x: int
    y: int

    def offset(self, direction: "Direction") -> "Position":
        dx, dy = direction.vector
        return Position(self.x + dx, self.y + dy)

    def manhattan(self, other: "Position") -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)


class Bounds(NamedTuple):
    width: int
    height: int

    def contains(self, pos: Position) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def vector(self) -> Tuple[int, int]:
        return _VECTORS[self]

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]

    @classmethod
    def from_vector(cls, dx: int, dy: int) -> "Direction":
        for direction, vec in _VECTORS.items():
            if vec == (dx, dy):
                return direction
        raise ValueError(f"Not a unit cardinal vector: ({dx}, {dy})")

    @classmethod
    def parse(cls, value: "DirectionLike") -> "Direction":
        """Resolve a direction from an enum, a name/alias, or a unit vector.

        Raises:
            ValueError: If the value does not name a cardinal direction
        """
        if isinstance(value, Direction):
            return value
        if isinstance(value, tuple):
            return cls.from_vector(*value)
        key = str(value).strip().lower()
        if key in _ALIASES:
            return _ALIASES[key]
        raise ValueError(f"Unknown direction: {value!r}. Valid: {[d.value for d in cls]}")


DirectionLike = Union[Direction, str, Tuple[int, int]]

_VECTORS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}

_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

_ALIASES = {
    "up": Direction.UP,
    "u": Direction.UP,
    "arrowup": Direction.UP,
    "down": Direction.DOWN,
    "d": Direction.DOWN,
    "arrowdown": Direction.DOWN,
    "left": Direction.LEFT,
    "l": Direction.LEFT,
    "arrowleft": Direction.LEFT,
    "right": Direction.RIGHT,
    "r": Direction.RIGHT,
    "arrowright": Direction.RIGHT,
}


class ColorTag(str, Enum):
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    NEUTRAL = "neutral"  # matches any color
    INACTIVE = "inactive"  # matches nothing


class Logic(str, Enum):
    OR = "OR"
    AND = "AND"
    XOR = "XOR"


class Orientation(str, Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


class Weight(int, Enum):
    LIGHT = 1  # player
    MEDIUM = 2  # box


class EntityKind(str, Enum):
    """Entities that can press a plate."""

    PLAYER = "player"
    BOX = "box"

    @property
    def weight(self) -> int:
        return int(Weight.LIGHT) if self is EntityKind.PLAYER else int(Weight.MEDIUM)


__all__ = [
    "Position",
    "Bounds",
    "Direction",
    "DirectionLike",
    "ColorTag",
    "Logic",
    "Orientation",
    "Weight",
    "EntityKind",
]
