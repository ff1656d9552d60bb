from __future__ import annotations

"""Domain errors raised while loading puzzles into the engine."""


class UnsupportedFeatureError(NotImplementedError):
    """A puzzle declares a feature the engine does not implement."""

    def __init__(self, feature: str, puzzle_id: str | None = None):
        self.feature = feature
        self.puzzle_id = puzzle_id
        where = f" in puzzle '{puzzle_id}'" if puzzle_id else ""
        super().__init__(f"Unsupported puzzle feature '{feature}'{where}")


__all__ = ["UnsupportedFeatureError"]
