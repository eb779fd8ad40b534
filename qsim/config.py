# qsim/config.py
import json
import os
from dataclasses import dataclass, fields
from typing import Optional

import yaml

SUPPORTED_FORMATS = ("yaml", "yml", "json")


@dataclass
class SimConfig:
    backend: str = "sparse"
    seed: Optional[int] = None
    num_threads: Optional[int] = None
    check_norm: bool = False
    norm_tol: float = 1e-6
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, data: dict) -> "SimConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        cfg = cls(**data)
        if cfg.backend not in ("sparse", "numba"):
            raise ValueError(f"Unknown backend: {cfg.backend}")
        return cfg


def load_config(path: str) -> SimConfig:
    """Read a SimConfig from a YAML or JSON file."""
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Config file not found: {path}")
    ext = path.rsplit(".", 1)[-1].lower()
    if ext not in SUPPORTED_FORMATS:
        raise ValueError(f"Supported config formats: {SUPPORTED_FORMATS}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) if ext in ("yaml", "yml") else json.load(f)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Config must be a mapping")
    return SimConfig.from_dict(data)
