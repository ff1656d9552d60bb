"""Rule engine for bifurcation Sokoban puzzles."""

__version__ = "0.1.0"
