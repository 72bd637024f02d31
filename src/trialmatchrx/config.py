"""CLI configuration: built-in defaults <- YAML file <- environment.

Score weights are deliberately absent; they live in scoring/weights.py.
"""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

load_dotenv()

ENV_LOG_LEVEL = "TRIALMATCHRX_LOG_LEVEL"
ENV_RUNS_DIR = "TRIALMATCHRX_RUNS_DIR"

DEFAULT_CONFIG: dict[str, Any] = {
    "ranking": {"top_n": None, "min_score": 0},
    "output": {"runs_dir": "runs", "save": False},
    "logging": {"level": "WARNING"},
}


def _merge(base: dict, override: dict) -> dict:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Path | str | None = None) -> dict[str, Any]:
    """Load config, layering a YAML file and env vars over the defaults."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path:
        with open(path) as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"{path}: config must be a mapping")
        config = _merge(config, loaded)

    if os.environ.get(ENV_LOG_LEVEL):
        config["logging"]["level"] = os.environ[ENV_LOG_LEVEL]
    if os.environ.get(ENV_RUNS_DIR):
        config["output"]["runs_dir"] = os.environ[ENV_RUNS_DIR]
    return config
