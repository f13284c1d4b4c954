"""Load and validate analysis configuration from YAML."""

from __future__ import annotations

from pathlib import Path

import yaml

from .schema import AnalysisConfig


def load_config(path: Path | str) -> AnalysisConfig:
    """Read a YAML file and return a validated AnalysisConfig.

    Relative input and output paths are resolved against the file's directory.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)
    if raw is None:
        raw = {}
    cfg = AnalysisConfig.model_validate(raw)

    base = path.parent
    inputs = cfg.inputs
    for name in ("examples", "counter_examples", "corpus"):
        value = getattr(inputs, name)
        if value is not None and not value.is_absolute():
            setattr(inputs, name, base / value)
    if not cfg.output_dir.is_absolute():
        cfg.output_dir = base / cfg.output_dir
    return cfg
