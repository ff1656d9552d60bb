"""Formatting helpers for CLI presentation."""

from __future__ import annotations

from typing import Iterable, List

from rich.table import Table

from bifurcation.core.puzzle import PuzzleDefinition
from bifurcation.core.state import GameState
from bifurcation.core.types import ColorTag, Orientation, Position

# Board glyphs
WALL = "#"
FLOOR = " "
PLAYER = "@"
PLAYER_ON_TARGET = "+"
BOX = "$"
BOX_ON_TARGET = "*"
TARGET = "."
INACTIVE_TARGET = "x"
PLATE = "_"
DOOR_OPEN = "'"
DOOR_CLOSED = {Orientation.VERTICAL: "|", Orientation.HORIZONTAL: "="}

_COLOR_STYLES = {
    ColorTag.RED: "red",
    ColorTag.BLUE: "blue",
    ColorTag.GREEN: "green",
    ColorTag.YELLOW: "yellow",
    ColorTag.NEUTRAL: "white",
    ColorTag.INACTIVE: "dim",
}


def render_branch(state: GameState, branch: int) -> List[str]:
    """Plain-text rows for one branch, top to bottom."""
    current = state.branches[branch]
    rows: List[str] = []
    for y in range(state.height):
        row = []
        for x in range(state.width):
            pos = Position(x, y)
            target = state.get_target_at(pos)
            box = current.box_at(pos)
            if state.is_wall(pos):
                glyph = WALL
            elif current.player.position == pos:
                glyph = PLAYER_ON_TARGET if target else PLAYER
            elif box is not None:
                glyph = BOX_ON_TARGET if state.is_box_on_correct_target(branch, box) else BOX
            elif target is not None:
                inactive = state.target_color(branch, target) is ColorTag.INACTIVE
                glyph = INACTIVE_TARGET if inactive else TARGET
            else:
                door = state.plates.door_at(pos, branch)
                if door is not None:
                    glyph = DOOR_CLOSED[door.orientation] if door.is_blocking(branch) else DOOR_OPEN
                elif state.plates.plate_at(pos, branch) is not None:
                    glyph = PLATE
                else:
                    glyph = FLOOR
            row.append(glyph)
        rows.append("".join(row))
    return rows


def build_board_table(state: GameState) -> Table:
    """Render every branch side by side; the active branch is marked."""
    table = Table(title=f"Moves: {state.moves}  Pushes: {state.pushes}", show_lines=False)
    for index in range(state.branch_count):
        marker = " (active)" if index == state.active_branch else ""
        table.add_column(f"Branch {index}{marker}", no_wrap=True)
    boards = [render_branch(state, index) for index in range(state.branch_count)]
    for row in zip(*boards):
        table.add_row(*row)
    return table


def build_status_table(state: GameState) -> Table:
    table = Table(title="Branch Status")
    table.add_column("Branch")
    table.add_column("Player")
    table.add_column("Boxes placed")
    table.add_column("Deadlocked")
    table.add_column("Heuristic")

    for index, branch in enumerate(state.branches):
        placed = sum(1 for box in branch.boxes if state.is_box_on_correct_target(index, box))
        deadlocked = ", ".join(str(box.id) for box in state.deadlocked_boxes(index)) or "-"
        table.add_row(
            str(index),
            f"({branch.player.position.x}, {branch.player.position.y})",
            f"{placed}/{len(branch.boxes)}",
            deadlocked,
            str(state.heuristic(index)),
        )
    return table


def build_puzzle_table(puzzles: Iterable[PuzzleDefinition], title: str = "Puzzles") -> Table:
    table = Table(title=title)
    table.add_column("Id")
    table.add_column("Name")
    table.add_column("Layer")
    table.add_column("Branches")
    table.add_column("Size")
    table.add_column("Category")

    for puzzle in puzzles:
        table.add_row(
            puzzle.id or "-",
            puzzle.name,
            str(puzzle.bifurcation_layer),
            str(puzzle.branch_count),
            f"{puzzle.width}x{puzzle.height}",
            puzzle.category or "-",
        )
    return table


def build_colors_table(state: GameState) -> Table:
    """Box colors, then target colors per branch, as styled cells."""
    table = Table(title="Colors")
    table.add_column("Item")
    for index in range(state.branch_count):
        table.add_column(f"Branch {index}")

    for box_id, color in sorted(state.box_colors.items()):
        style = _COLOR_STYLES[color]
        table.add_row(f"box {box_id}", *([f"[{style}]{color.value}[/{style}]"] * state.branch_count))
    for target in state.targets:
        cells = []
        for index in range(state.branch_count):
            color = state.target_color(index, target)
            style = _COLOR_STYLES[color]
            cells.append(f"[{style}]{color.value}[/{style}]")
        table.add_row(f"target {target.id}", *cells)
    return table


__all__ = [
    "render_branch",
    "build_board_table",
    "build_status_table",
    "build_puzzle_table",
    "build_colors_table",
]
