"""
Pressure plates and doors.

Plates and doors carry per-branch state that is recomputed from branch
contents on every update cycle; nothing else writes it.

- PressurePlate: weight-threshold trigger, optionally a cross-branch logic gate
- Door: opens when any connected plate is effectively active
- PressurePlateManager: owns every plate and door, runs the update cycle
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Set, TYPE_CHECKING

from pydantic import BaseModel, Field

from .types import EntityKind, Logic, Orientation, Position, Weight

if TYPE_CHECKING:
    from .branch import BranchState

logger = logging.getLogger(__name__)


class PressurePlate(BaseModel):
    """
    A pressure-sensitive trigger.

    Attributes:
        position: Grid cell of the plate
        id: Plate identifier (informational; doors link by door id)
        required_weight: Activation threshold (player=1, box=2)
        affects_all_branches: Combine branch activations through ``logic``
        connected_doors: Ids of the doors this plate feeds
        logic: Gate applied across branches when ``affects_all_branches``
        branch_scope: Branches the plate exists in, or None for every branch
        active_in_branch: Recomputed activation per branch index
        current_weight_per_branch: Recomputed weight per branch index
    """

    position: Position
    id: int
    required_weight: int = Field(default=int(Weight.MEDIUM), ge=0)
    affects_all_branches: bool = True
    connected_doors: List[int] = Field(default_factory=list)
    logic: str = Logic.OR.value
    branch_scope: Optional[Set[int]] = None
    active_in_branch: Dict[int, bool] = Field(default_factory=dict)
    current_weight_per_branch: Dict[int, int] = Field(default_factory=dict)

    def exists_in(self, branch: int) -> bool:
        return self.branch_scope is None or branch in self.branch_scope

    def check_activation(self, branch: int, entities: Iterable[EntityKind]) -> bool:
        """Record the weight resting on the plate in ``branch`` and whether it trips."""
        total = sum(EntityKind(entity).weight for entity in entities)
        self.current_weight_per_branch[branch] = total
        self.active_in_branch[branch] = total >= self.required_weight
        return self.active_in_branch[branch]

    def is_effectively_active(self, branch: int) -> bool:
        """Activation as seen by doors in ``branch``, applying the cross-branch gate."""
        local = self.active_in_branch.get(branch, False)
        if not self.affects_all_branches:
            return local

        states = list(self.active_in_branch.values())
        if self.logic == Logic.OR.value:
            return any(states)
        if self.logic == Logic.AND.value:
            return all(states)
        if self.logic == Logic.XOR.value:
            return sum(1 for s in states if s) == 1
        return local

    def clone(self) -> "PressurePlate":
        return self.model_copy(deep=True)


class Door(BaseModel):
    """
    A door whose openness is derived from its connected plates.

    A shared door (``affects_all_branches``) is a barrier across branches: it
    blocks everywhere until it is open in every branch that has a value for it.
    """

    position: Position
    id: int
    default_closed: bool = True
    affects_all_branches: bool = True
    orientation: Orientation = Orientation.VERTICAL
    branch_scope: Optional[Set[int]] = None
    open_in_branch: Dict[int, bool] = Field(default_factory=dict)

    def exists_in(self, branch: int) -> bool:
        return self.branch_scope is None or branch in self.branch_scope

    def update_state(self, branch: int, connected_plates: Sequence[PressurePlate]) -> None:
        if not connected_plates:
            self.open_in_branch[branch] = not self.default_closed
            return
        self.open_in_branch[branch] = any(p.is_effectively_active(branch) for p in connected_plates)

    def is_blocking(self, branch: int) -> bool:
        if self.affects_all_branches:
            return not all(self.open_in_branch.values())
        return not self.open_in_branch.get(branch, False)

    def clone(self) -> "Door":
        return self.model_copy(deep=True)


class PressurePlateManager:
    """Owns every plate and door of the loaded puzzle and runs their update cycle.

    The manager keeps no reference to the game state: branch contents are
    handed in on each update.
    """

    def __init__(self, plates: Optional[List[PressurePlate]] = None, doors: Optional[List[Door]] = None):
        self.plates: List[PressurePlate] = list(plates or [])
        self.doors: List[Door] = list(doors or [])

    def add_plate(self, plate: PressurePlate) -> None:
        self.plates.append(plate)

    def add_door(self, door: Door) -> None:
        self.doors.append(door)

    def plate_at(self, pos: Position, branch: Optional[int] = None) -> Optional[PressurePlate]:
        return next(
            (p for p in self.plates if p.position == pos and (branch is None or p.exists_in(branch))),
            None,
        )

    def door_at(self, pos: Position, branch: Optional[int] = None) -> Optional[Door]:
        return next(
            (d for d in self.doors if d.position == pos and (branch is None or d.exists_in(branch))),
            None,
        )

    def connected_plates(self, door: Door, branch: Optional[int] = None) -> List[PressurePlate]:
        return [
            p for p in self.plates if door.id in p.connected_doors and (branch is None or p.exists_in(branch))
        ]

    def _activate_plates(self, branch_index: int, branch: "BranchState") -> None:
        for plate in self.plates:
            if not plate.exists_in(branch_index):
                continue
            entities: List[EntityKind] = []
            if branch.player.position == plate.position:
                entities.append(EntityKind.PLAYER)
            entities.extend(EntityKind.BOX for box in branch.boxes if box.position == plate.position)
            plate.check_activation(branch_index, entities)

    def _derive_doors(self, branch_index: int) -> None:
        for door in self.doors:
            if not door.exists_in(branch_index):
                continue
            door.update_state(branch_index, self.connected_plates(door, branch_index))

    def update_branch(self, branch_index: int, branch: "BranchState") -> None:
        """Recompute plates, then doors, for a single branch."""
        self._activate_plates(branch_index, branch)
        self._derive_doors(branch_index)

    def update_all(self, branches: Sequence["BranchState"]) -> None:
        """
        Recompute every plate and door.

        Runs in two phases so that cross-branch logic gates always read this
        cycle's activations: all plates in all branches first, then all doors,
        each phase in ascending branch order.
        """
        for index, branch in enumerate(branches):
            self._activate_plates(index, branch)
        for index in range(len(branches)):
            self._derive_doors(index)
        logger.debug(
            "Updated %d plate(s) and %d door(s) across %d branch(es)",
            len(self.plates),
            len(self.doors),
            len(branches),
        )

    def is_door_blocking(self, branch_index: int, pos: Position) -> bool:
        door = self.door_at(pos, branch_index)
        return door.is_blocking(branch_index) if door is not None else False

    def clone(self) -> "PressurePlateManager":
        return PressurePlateManager(
            plates=[p.clone() for p in self.plates],
            doors=[d.clone() for d in self.doors],
        )

    def reset(self) -> None:
        self.plates = []
        self.doors = []


__all__ = ["PressurePlate", "Door", "PressurePlateManager"]
