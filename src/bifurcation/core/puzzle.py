from __future__ import annotations

"""Schema definitions for puzzle definitions (YAML files or plain dicts).

Keys may be written in snake_case or in camelCase (``bifurcationLayer``,
``pressurePlatesPerBranch``, ``requiredWeight`` ...).
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .mechanics import SokobanBox, Target
from .plates import Door, PressurePlate
from .types import Bounds, ColorTag, Orientation, Position, Weight

WALL = "#"
PLAYER = "P"
BOX = "$"
TARGET = "."
PLATE_MARKER = "p"
DOOR_MARKER = "D"
FLOOR = " "

_SPEC_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class PointSpec(BaseModel):
    x: int
    y: int

    model_config = _SPEC_CONFIG

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)


class PlateSpec(BaseModel):
    id: int
    x: int
    y: int
    required_weight: Optional[int] = Field(default=None, ge=0)
    affects_all_branches: Optional[bool] = None
    connected_doors: List[int] = Field(default_factory=list)
    logic: str = "OR"

    model_config = _SPEC_CONFIG

    def build(self, branch: Optional[int] = None) -> PressurePlate:
        """Build a plate shared by every branch, or scoped to ``branch``.

        Scoped plates default to local (non-gated) behaviour.
        """
        affects_all = self.affects_all_branches
        if affects_all is None:
            affects_all = branch is None
        return PressurePlate(
            position=Position(self.x, self.y),
            id=self.id,
            required_weight=self.required_weight if self.required_weight is not None else int(Weight.MEDIUM),
            affects_all_branches=affects_all,
            connected_doors=list(self.connected_doors),
            logic=self.logic,
            branch_scope={branch} if branch is not None else None,
        )


class DoorSpec(BaseModel):
    id: int
    x: int
    y: int
    default_closed: bool = True
    affects_all_branches: Optional[bool] = None
    orientation: Orientation = Orientation.VERTICAL

    model_config = _SPEC_CONFIG

    def build(self, branch: Optional[int] = None) -> Door:
        affects_all = self.affects_all_branches
        if affects_all is None:
            affects_all = branch is None
        return Door(
            position=Position(self.x, self.y),
            id=self.id,
            default_closed=self.default_closed,
            affects_all_branches=affects_all,
            orientation=self.orientation,
            branch_scope={branch} if branch is not None else None,
        )


class ColorsSpec(BaseModel):
    boxes: Dict[int, ColorTag] = Field(default_factory=dict)
    targets_per_branch: Dict[int, Dict[int, ColorTag]] = Field(default_factory=dict)

    model_config = _SPEC_CONFIG


class ParsedLayout(BaseModel):
    walls: List[Position] = Field(default_factory=list)
    player_start: Optional[Position] = None
    boxes: List[SokobanBox] = Field(default_factory=list)
    targets: List[Target] = Field(default_factory=list)


class PuzzleDefinition(BaseModel):
    """
    Declarative puzzle record consumed by ``GameState.load_puzzle``.

    Layout characters: '#' wall, 'P' player start, '$' box, '.' target,
    'p'/'D' plate and door markers (informational only), ' ' floor.
    Boxes and targets receive incrementing ids in reading order.
    """

    id: Optional[str] = None
    name: str = ""
    description: str = ""
    hint: Optional[str] = None
    category: Optional[str] = None
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    layout: List[str]
    bifurcation_layer: int = Field(default=1, ge=1, le=3)
    colors: ColorsSpec = Field(default_factory=ColorsSpec)
    pressure_plates: List[PlateSpec] = Field(default_factory=list)
    doors: List[DoorSpec] = Field(default_factory=list)
    pressure_plates_per_branch: Dict[int, List[PlateSpec]] = Field(default_factory=dict)
    doors_per_branch: Dict[int, List[DoorSpec]] = Field(default_factory=dict)
    walls_per_branch: Optional[Dict[int, List[PointSpec]]] = None

    model_config = _SPEC_CONFIG

    @property
    def branch_count(self) -> int:
        return 2 ** (self.bifurcation_layer - 1)

    @property
    def bounds(self) -> Bounds:
        return Bounds(self.width, self.height)

    def parse_layout(self) -> ParsedLayout:
        parsed = ParsedLayout()
        for y, row in enumerate(self.layout):
            for x, char in enumerate(row):
                pos = Position(x, y)
                if char == WALL:
                    parsed.walls.append(pos)
                elif char == PLAYER:
                    parsed.player_start = pos
                elif char == BOX:
                    parsed.boxes.append(SokobanBox(position=pos, id=len(parsed.boxes)))
                elif char == TARGET:
                    parsed.targets.append(Target(position=pos, id=len(parsed.targets)))
        return parsed

    def build_plates(self) -> List[PressurePlate]:
        plates = [spec.build() for spec in self.pressure_plates]
        for branch, specs in sorted(self.pressure_plates_per_branch.items()):
            plates.extend(spec.build(branch) for spec in specs)
        return plates

    def build_doors(self) -> List[Door]:
        doors = [spec.build() for spec in self.doors]
        for branch, specs in sorted(self.doors_per_branch.items()):
            doors.extend(spec.build(branch) for spec in specs)
        return doors


__all__ = [
    "PointSpec",
    "PlateSpec",
    "DoorSpec",
    "ColorsSpec",
    "ParsedLayout",
    "PuzzleDefinition",
]
