"""Loaders: trial/patient JSON or YAML files -> scoring input models."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog
import yaml

from trialmatchrx.models.schema import PatientProfile, TrialData

logger = structlog.get_logger()


def _read_document(path: Path | str) -> Any:
    p = Path(path)
    with open(p) as f:
        if p.suffix.lower() in (".yaml", ".yml"):
            return yaml.safe_load(f)
        return json.load(f)


def load_trials(path: Path | str) -> list[TrialData]:
    """Load trial records from a list, or from ``{"trials": [...]}``."""
    data = _read_document(path)
    if isinstance(data, dict):
        data = data.get("trials")
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of trials or a 'trials' key")

    trials = [TrialData.model_validate(record) for record in data]
    logger.info("trials_loaded", path=str(path), count=len(trials))
    return trials


def load_patient(path: Path | str) -> PatientProfile:
    """Load one patient profile, bare or under a ``patient`` key."""
    data = _read_document(path)
    if isinstance(data, dict) and isinstance(data.get("patient"), dict):
        data = data["patient"]
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a patient profile mapping")
    return PatientProfile.model_validate(data)
