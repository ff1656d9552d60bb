from .config_loader import load_config
from .errors import LoaderError
from .puzzle_loader import load_puzzle_file, load_puzzles

__all__ = ["load_puzzles", "load_puzzle_file", "load_config", "LoaderError"]
