from __future__ import annotations

"""Errors raised while reading puzzle packs and engine config files."""

import os
from typing import Any, Dict, Iterable, Sequence

from pydantic import ValidationError

MAX_REPORTED_ERRORS = 3


class LoaderError(RuntimeError):
    """
    A puzzle pack or config file that could not be loaded.

    Besides the file, a failure inside a ``puzzles:`` list names the entry:
    by its id when it has one, otherwise by its position in the list.
    """

    def __init__(
        self,
        file_path: str,
        message: str,
        *,
        puzzle_id: str | None = None,
        index: int | None = None,
        cause: Exception | None = None,
    ):
        self.file_path = file_path
        self.message = message
        self.puzzle_id = puzzle_id
        self.index = index
        self.cause = cause
        super().__init__(str(self))

    @classmethod
    def for_entry(
        cls, file_path: str, message: str, entry: Any, index: int | None, *, cause: Exception | None = None
    ) -> "LoaderError":
        """Build an error for one raw puzzle mapping, picking up its id if present."""
        puzzle_id = entry.get("id") if isinstance(entry, dict) else None
        return cls(file_path, message, puzzle_id=puzzle_id, index=index, cause=cause)

    @property
    def location(self) -> str:
        try:
            where = os.path.relpath(self.file_path)
        except ValueError:  # pragma: no cover - different drive on Windows
            where = self.file_path
        if self.puzzle_id:
            return f"{where}, puzzle '{self.puzzle_id}'"
        if self.index is not None:
            return f"{where}, puzzle #{self.index}"
        return where

    def __str__(self) -> str:
        text = f"{self.message} ({self.location})"
        if isinstance(self.cause, ValidationError):
            return f"{text}: {_describe(self.cause.errors())}"
        if self.cause:
            return f"{text}: {self.cause}"
        return text


def _field_path(loc: Sequence[Any]) -> str:
    # ('pressure_plates', 0, 'x') -> pressure_plates[0].x
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path or "<puzzle>"


def _describe(errors: Iterable[Dict[str, Any]]) -> str:
    errors = list(errors)
    parts = [f"{_field_path(e.get('loc', ()))}: {e.get('msg', 'invalid')}" for e in errors[:MAX_REPORTED_ERRORS]]
    if len(errors) > MAX_REPORTED_ERRORS:
        parts.append(f"... ({len(errors) - MAX_REPORTED_ERRORS} more)")
    return "; ".join(parts)


__all__ = ["LoaderError"]
