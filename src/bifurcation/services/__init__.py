"""Service Layer: Business logic and orchestration."""

from __future__ import annotations

from .game_session import GameSession, KeyResult

__all__ = [
    "GameSession",
    "KeyResult",
]
