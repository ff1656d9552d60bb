from __future__ import annotations

import glob
import logging
import os
from typing import Any, Dict, List

import yaml
from pydantic import ValidationError

from bifurcation.core.puzzle import PuzzleDefinition
from bifurcation.core.registries import PuzzleRegistry
from bifurcation.io.loaders.errors import LoaderError

logger = logging.getLogger(__name__)


def _read_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise LoaderError(path, "Malformed YAML", cause=exc) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise LoaderError(path, "Expected a mapping at the top level")
    return data


def _validate_entry(path: str, entry: Any, index: int | None) -> PuzzleDefinition:
    if not isinstance(entry, dict):
        raise LoaderError.for_entry(path, "Expected a puzzle mapping", entry, index)
    try:
        return PuzzleDefinition.model_validate(entry)
    except ValidationError as exc:
        raise LoaderError.for_entry(path, "Invalid puzzle definition", entry, index, cause=exc) from exc


def load_puzzle_file(path: str) -> List[PuzzleDefinition]:
    """Read every puzzle defined in one YAML file.

    A file either holds a single puzzle mapping or a ``puzzles:`` list. A single
    puzzle without an ``id`` takes the file name (without extension) as its id.
    """
    data = _read_yaml(path)
    if "puzzles" in data:
        entries = data["puzzles"] or []
        if not isinstance(entries, list):
            raise LoaderError(path, "Expected a list under 'puzzles'")
        puzzles = []
        for index, entry in enumerate(entries):
            puzzle = _validate_entry(path, entry, index)
            if not puzzle.id:
                raise LoaderError(path, "Puzzle is missing an id", index=index)
            puzzles.append(puzzle)
        return puzzles

    if not data:
        return []
    puzzle = _validate_entry(path, data, None)
    if not puzzle.id:
        puzzle.id = os.path.splitext(os.path.basename(path))[0]
    return [puzzle]


def load_puzzles(path: str, registry: PuzzleRegistry) -> None:
    """Load puzzles from YAML files in a directory tree (or a single file).

    Expected format:
    puzzles:
      - id: L1-P1
        name: First Steps
        width: 8
        height: 5
        layout: [...]
    """
    if not os.path.exists(path):
        return
    if os.path.isfile(path):
        files = [path]
    else:
        files = sorted(glob.glob(os.path.join(path, "**", "*.yaml"), recursive=True))
    for fp in files:
        for puzzle in load_puzzle_file(fp):
            try:
                registry.register(puzzle.id, puzzle)
            except ValueError as exc:
                raise LoaderError(fp, "Failed to register puzzle", puzzle_id=puzzle.id, cause=exc) from exc
        logger.debug("Loaded puzzles from %s", fp)
    logger.info("Registered %d puzzle(s) from %s", len(registry), path)
