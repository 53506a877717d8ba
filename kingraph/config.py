"""Simple configuration loader for kingraph.

Behavior:
- Load defaults.
- If environment variable `KINGRAPH_CONFIG` is set, load that JSON file and merge.
- Environment variables override file values (variables: KINGRAPH_TEMPLATES_DIR,
  KINGRAPH_LOG_LEVEL, KINGRAPH_MAX_PERSONS, KINGRAPH_FULL_CYCLE_CHECK).
"""
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
import os
import json
import logging
from typing import Optional

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


@dataclass
class Config:
    templates_dir: Path = field(default_factory=lambda: DEFAULT_TEMPLATES_DIR)
    log_level: str = "INFO"
    # web sessions refuse to grow past this many persons
    max_persons: int = 500
    full_cycle_check: bool = True


def _load_json_file(path: Path) -> Optional[dict]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError):
        logging.warning("kingraph: could not read config file %s", path)
        return None


def _as_bool(v) -> bool:
    if isinstance(v, bool):
        return v
    return str(v).strip().lower() in ("1", "true", "yes", "on")


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from (1) defaults, (2) JSON file, (3) env vars.

    :param config_path: optional path to a JSON config file. If not provided
                        will use environment variable `KINGRAPH_CONFIG` if set.
    """
    cfg = Config()

    # 1) config file
    cp = config_path or os.environ.get("KINGRAPH_CONFIG")
    if cp:
        data = _load_json_file(Path(cp))
        if isinstance(data, dict):
            if data.get("templates_dir"):
                cfg.templates_dir = Path(data["templates_dir"])
            if data.get("log_level"):
                cfg.log_level = str(data["log_level"]).upper()
            if "max_persons" in data:
                cfg.max_persons = int(data["max_persons"])
            if "full_cycle_check" in data:
                cfg.full_cycle_check = _as_bool(data["full_cycle_check"])

    # 2) environment variables apply only when no explicit config_path was
    # passed; an explicit file is authoritative.
    if config_path is None:
        if os.environ.get("KINGRAPH_TEMPLATES_DIR"):
            cfg.templates_dir = Path(os.environ["KINGRAPH_TEMPLATES_DIR"])
        if os.environ.get("KINGRAPH_LOG_LEVEL"):
            cfg.log_level = os.environ["KINGRAPH_LOG_LEVEL"].upper()
        if os.environ.get("KINGRAPH_MAX_PERSONS"):
            cfg.max_persons = int(os.environ["KINGRAPH_MAX_PERSONS"])
        if os.environ.get("KINGRAPH_FULL_CYCLE_CHECK"):
            cfg.full_cycle_check = _as_bool(os.environ["KINGRAPH_FULL_CYCLE_CHECK"])

    return cfg
