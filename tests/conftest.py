"""
Shared fixtures for engine, loader and CLI tests.
"""

import copy
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from bifurcation.core.config import EngineConfig
from bifurcation.core.puzzle import PuzzleDefinition
from bifurcation.core.registries import PuzzleRegistry
from bifurcation.core.state import GameState
from bifurcation.io.loaders import load_puzzles
from bifurcation.repositories import PuzzleRepository

KB_PUZZLES = Path(__file__).resolve().parents[1] / "kb" / "puzzles"

L1_P1 = {
    "id": "L1-P1",
    "name": "Pressure 1: First Plate",
    "width": 8,
    "height": 5,
    "bifurcationLayer": 1,
    "layout": [
        "########",
        "# P    #",
        "# p D $#",
        "#     .#",
        "########",
    ],
    "pressurePlates": [
        {"id": 0, "x": 2, "y": 2, "requiredWeight": 1, "connectedDoors": [0], "affectsAllBranches": True},
    ],
    "doors": [
        {"id": 0, "x": 4, "y": 2, "defaultClosed": True, "orientation": "vertical"},
    ],
}


def build_definition(layout: List[str], *, layer: int = 1, **extra) -> PuzzleDefinition:
    return PuzzleDefinition(
        id=extra.pop("id", "test"),
        width=max(len(row) for row in layout),
        height=len(layout),
        layout=layout,
        bifurcation_layer=layer,
        **extra,
    )


@pytest.fixture
def make_state() -> Callable[..., GameState]:
    """Factory: build and load a GameState from an inline layout."""

    def _make(layout: List[str], *, layer: int = 1, config: Optional[EngineConfig] = None, **extra) -> GameState:
        state = GameState(config)
        state.load_puzzle(build_definition(layout, layer=layer, **extra))
        return state

    return _make


@pytest.fixture
def l1_p1_state() -> GameState:
    state = GameState()
    state.load_puzzle(L1_P1)
    return state


@pytest.fixture(scope="module")
def kb_path() -> str:
    return str(KB_PUZZLES)


@pytest.fixture(scope="module")
def puzzle_registry(kb_path) -> PuzzleRegistry:
    """Load the bundled puzzles once for all tests in the module."""
    registry = PuzzleRegistry()
    load_puzzles(kb_path, registry)
    return registry


@pytest.fixture
def repository(puzzle_registry) -> PuzzleRepository:
    return PuzzleRepository(puzzle_registry)


@pytest.fixture
def l1_p1_definition() -> dict:
    """The first pressure-plate puzzle as a raw camelCase mapping."""
    return copy.deepcopy(L1_P1)
