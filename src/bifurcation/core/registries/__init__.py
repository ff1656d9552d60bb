from .puzzle_registry import PuzzleRegistry
from .registry_base import NameRegistry

__all__ = ["NameRegistry", "PuzzleRegistry"]
