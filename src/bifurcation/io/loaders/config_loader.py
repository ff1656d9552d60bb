from __future__ import annotations

import os

import yaml
from pydantic import ValidationError

from bifurcation.core.config import EngineConfig
from bifurcation.io.loaders.errors import LoaderError


def load_config(path: str | None) -> EngineConfig:
    """Read an EngineConfig from YAML; a missing path yields the defaults.

    Expected format:
    engine:
      max_history: 50
      unsupported_features: error
      allow_pull: false
      log_level: WARNING
    """
    if not path or not os.path.exists(path):
        return EngineConfig()
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise LoaderError(path, "Malformed YAML", cause=exc) from exc
    if not isinstance(data, dict):
        raise LoaderError(path, "Expected a mapping at the top level")
    section = data.get("engine", data)
    try:
        return EngineConfig.model_validate(section or {})
    except ValidationError as exc:
        raise LoaderError(path, "Invalid engine configuration", cause=exc) from exc
