"""
Bifurcation CLI: validate the puzzle knowledge base, inspect puzzles, and replay moves.

- No interactive prompts; moves are given as a key sequence
- Every branch is rendered side by side as text
"""

from __future__ import annotations

import re
from typing import List, Optional

import typer
from rich.console import Console

from bifurcation.cli.formatters import (
    build_board_table,
    build_colors_table,
    build_puzzle_table,
    build_status_table,
)
from bifurcation.cli.load_helpers import load_or_exit
from bifurcation.cli.paths import config_path, kb_puzzles_path
from bifurcation.core.config import EngineConfig
from bifurcation.core.errors import UnsupportedFeatureError
from bifurcation.core.registries import PuzzleRegistry
from bifurcation.core.state import GameState
from bifurcation.io.loaders import load_config, load_puzzles
from bifurcation.repositories import PuzzleRepository
from bifurcation.services import GameSession
from bifurcation.utils.logging import configure_logging

app = typer.Typer(help="Bifurcation CLI: validate puzzles, inspect them, and replay move sequences.")
console = Console()


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)"),
) -> None:
    if log_level:
        configure_logging(log_level)


def _load_repository(path: str | None, *, verbose_load: bool = False) -> PuzzleRepository:
    registry = PuzzleRegistry()
    load_or_exit(load_puzzles, kb_puzzles_path(path), registry, console=console, verbose_errors=verbose_load)
    return PuzzleRepository(registry)


def _load_config(path: str | None, *, verbose_load: bool = False) -> EngineConfig:
    resolved = config_path(path)
    if resolved is None:
        return EngineConfig()
    config = load_or_exit(load_config, resolved, console=console, verbose_errors=verbose_load)
    configure_logging(config.log_level)
    return config


def _split_moves(moves: List[str]) -> List[str]:
    keys: List[str] = []
    for chunk in moves:
        keys.extend(token for token in re.split(r"[,\s]+", chunk) if token)
    return keys


@app.command()
def validate(
    path: str | None = typer.Argument(None, help="Path to kb/puzzles folder or a puzzle file"),
    verbose: bool = typer.Option(False, "--verbose-load", help="Display full validation trace on loader errors"),
) -> None:
    """Validate the puzzle knowledge base by loading every puzzle into a fresh game."""
    repo = _load_repository(path, verbose_load=verbose)
    puzzles = repo.list_all()
    console.print(f"[green]OK[/green] Loaded {len(puzzles)} puzzle(s)")

    errors: List[str] = []
    for puzzle in puzzles:
        state = GameState()
        try:
            state.load_puzzle(puzzle)
        except UnsupportedFeatureError as exc:
            errors.append(str(exc))
            continue
        if state.is_solved():
            errors.append(f"Puzzle '{puzzle.id}' is already solved at load")
        short = state.unsolvable_branches()
        if short:
            errors.append(f"Puzzle '{puzzle.id}' has more active targets than boxes in branch(es) {short}")
        if any(not row or len(row) > puzzle.width for row in puzzle.layout) or len(puzzle.layout) > puzzle.height:
            errors.append(f"Puzzle '{puzzle.id}' layout does not fit {puzzle.width}x{puzzle.height}")

    if errors:
        console.print("[red]Validation errors detected:[/red]")
        for error in errors:
            console.print(f" - {error}")
        raise typer.Exit(code=1)

    console.print("[green]All validations passed[/green]")


@app.command("list")
def list_puzzles(
    layer: Optional[int] = typer.Option(None, "--layer", help="Only puzzles of this bifurcation layer"),
    category: Optional[str] = typer.Option(None, "--category", help="Only puzzles of this category"),
    path: str | None = typer.Option(None, help="Path to kb/puzzles folder"),
) -> None:
    """List available puzzles."""
    repo = _load_repository(path)
    puzzles = repo.list_all() if layer is None else repo.list_by_layer(layer)
    if category is not None:
        in_category = {p.id for p in repo.list_by_category(category)}
        puzzles = [p for p in puzzles if p.id in in_category]
    if not puzzles:
        console.print("[yellow]No puzzles found[/yellow]")
        return
    console.print(build_puzzle_table(puzzles))


@app.command()
def show(
    puzzle_id: str = typer.Argument(..., help="Puzzle id, e.g. L1-P1"),
    path: str | None = typer.Option(None, help="Path to kb/puzzles folder"),
    config: str | None = typer.Option(None, "--config", help="Engine config YAML"),
) -> None:
    """Show a puzzle's description and starting boards."""
    repo = _load_repository(path)
    session = GameSession(repo, _load_config(config))
    try:
        puzzle = session.load(puzzle_id)
    except KeyError:
        console.print(f"[red]Puzzle not found[/red]: {puzzle_id}")
        raise typer.Exit(code=2)
    except UnsupportedFeatureError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[bold]{puzzle.id}[/bold]: {puzzle.name}")
    if puzzle.description:
        console.print(puzzle.description)
    console.print(f"Layer {puzzle.bifurcation_layer} ({puzzle.branch_count} branch(es)), {puzzle.width}x{puzzle.height}")
    console.print(build_board_table(session.state))
    if session.state.box_colors or session.state.targets:
        console.print(build_colors_table(session.state))
    hint = session.hint()
    if hint:
        console.print(f"[dim]Hint: {hint}[/dim]")
    following = repo.next_after(puzzle.id)
    if following is not None:
        console.print(f"Next: {following.id}")


@app.command()
def play(
    puzzle_id: str = typer.Argument(..., help="Puzzle id, e.g. L1-P1"),
    moves: Optional[List[str]] = typer.Option(None, "--moves", "-m", help="Keys to replay (w/a/s/d, arrows, z, r, tab, 1-4)"),
    path: str | None = typer.Option(None, help="Path to kb/puzzles folder"),
    config: str | None = typer.Option(None, "--config", help="Engine config YAML"),
    steps: bool = typer.Option(False, "--steps", help="Print every key and its result"),
) -> None:
    """Replay a key sequence on a puzzle and print the resulting boards."""
    repo = _load_repository(path)
    session = GameSession(repo, _load_config(config))
    try:
        session.load(puzzle_id)
    except KeyError:
        console.print(f"[red]Puzzle not found[/red]: {puzzle_id}")
        raise typer.Exit(code=2)
    except UnsupportedFeatureError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    results = session.play(_split_moves(moves or []))
    if steps:
        for index, result in enumerate(results, start=1):
            if result.outcome is not None:
                status = result.outcome.status
                colour = "green" if result.outcome.ok else "red"
                detail = f"[{colour}]{status}[/{colour}] ({result.outcome.reason})"
            else:
                detail = "done" if result.changed else "no-op"
            console.print(f"{index:>3}. {result.key}: {result.action} {detail}")
            if result.message:
                console.print(f"     {result.message}")

    state = session.state
    console.print(build_board_table(state))
    console.print(build_status_table(state))
    for message in session.messages:
        console.print(f"[bold green]{message}[/bold green]")
    solved = "[green]yes[/green]" if state.is_solved() else "[red]no[/red]"
    console.print(f"Solved: {solved}  Moves: {state.moves}  Pushes: {state.pushes}")


__all__ = ["app"]
