from __future__ import annotations

"""Engine configuration."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .history import DEFAULT_MAX_HISTORY


class EngineConfig(BaseModel):
    """
    Tunables for a GameState.

    Attributes:
        max_history: Undo snapshots kept before the oldest is dropped
        unsupported_features: 'error' raises on declared-but-unimplemented
            puzzle features, 'warn' logs and ignores them
        allow_pull: Enable the pull command
        log_level: Level used by ``configure_logging`` in the CLI
    """

    max_history: int = Field(default=DEFAULT_MAX_HISTORY, ge=1)
    unsupported_features: Literal["error", "warn"] = "error"
    allow_pull: bool = False
    log_level: str = "WARNING"

    model_config = ConfigDict(extra="forbid")

    @field_validator("log_level")
    @classmethod
    def _valid_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v!r}")
        return level


__all__ = ["EngineConfig"]
