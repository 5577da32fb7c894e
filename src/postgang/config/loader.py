from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from postgang.config.schema import PostgangConfig, validate_config


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must be a mapping: {path}")
    return data


def load_config(config_path: Path | None = None) -> PostgangConfig:
    if config_path is None:
        return PostgangConfig()
    return validate_config(_load_yaml(config_path.expanduser().resolve()))


def load_from_env() -> PostgangConfig:
    config_path = os.getenv("POSTGANG_CONFIG_PATH")
    return load_config(Path(config_path) if config_path else None)
