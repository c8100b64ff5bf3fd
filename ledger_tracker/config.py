# ledger_tracker/config.py
from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Dict

import yaml

DEFAULT_CONFIG: Dict[str, object] = {
    "storage": {
        "backend": "json",
        "path": "./data",
    },
    "loaders": {
        "csv": "ledger_tracker.loaders.csv_loader.CSVLoader",
    },
    "output_modules": {
        "csv": "ledger_tracker.outputs.csv_output.CSVOutput",
        "html": "ledger_tracker.outputs.html_output.HTMLOutput",
    },
    "categories": {
        "income": {
            "Salary": ["salary", "payroll"],
            "Freelance": ["invoice", "freelance"],
            "Investments": ["dividend", "interest"],
            "Sales": ["sale"],
        },
        "expense": {
            "Food": ["grocery", "restaurant", "market"],
            "Transport": ["fuel", "uber", "bus", "metro"],
            "Housing": ["rent", "mortgage"],
            "Health": ["pharmacy", "clinic"],
            "Education": ["course", "tuition"],
            "Leisure": ["cinema", "streaming"],
            "Shopping": ["store", "amazon"],
        },
    },
    "output_dir": "./data",
    "notifier": "echo",
    "log_level": "WARNING",
}

LOG_LEVEL_ENV = "POCKETLEDGER_LOG_LEVEL"

logger = logging.getLogger(__name__)


def _merge_defaults(current: Dict[str, object], defaults: Dict[str, object]) -> Dict[str, object]:
    """Merge missing default keys into the current config recursively."""
    merged = dict(current)
    for key, value in defaults.items():
        if key not in merged:
            merged[key] = copy.deepcopy(value)
        elif isinstance(value, dict) and isinstance(merged[key], dict):
            merged[key] = _merge_defaults(merged[key], value)
    return merged


def load_config(path: str | Path | None = None) -> Dict[str, object]:
    """Read a YAML config file, falling back to defaults for missing keys."""
    if path is None or not Path(path).exists():
        return _merge_defaults({}, DEFAULT_CONFIG)
    with Path(path).open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping.")
    return _merge_defaults(data, DEFAULT_CONFIG)


def configure_logging(config: Dict[str, object]) -> None:
    requested = (os.getenv(LOG_LEVEL_ENV) or str(config.get("log_level", "WARNING"))).upper()
    # getLevelName maps known names to ints and echoes unknown ones back
    level = requested if isinstance(logging.getLevelName(requested), int) else "WARNING"
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if level != requested:
        logger.warning("Unknown log level '%s'; using WARNING.", requested)
