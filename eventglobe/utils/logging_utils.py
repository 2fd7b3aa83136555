"""Logging setup for the GDELT Event Globe.

Handlers and formats live in ``config/logging.yaml``. ViewerConfig supplies
the level of the ``eventglobe`` loggers and an optional log file; without a
log file the file handlers are left out entirely. Cycle loggers tag every
message with the cycle id so timer-driven and manual refreshes stay apart
in the output.
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, MutableMapping, Optional, Tuple

import yaml

PACKAGE_LOGGER = "eventglobe"

_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "logging.yaml"
_FALLBACK_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _read_logging_yaml(path: Path) -> Optional[Dict[str, Any]]:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            return yaml.safe_load(handle)
    except FileNotFoundError:
        return None


def _route_file_handlers(cfg: Dict[str, Any], log_file: Optional[str]) -> None:
    handlers = cfg.get("handlers", {})
    file_handlers = [name for name, h in handlers.items() if h.get("class") == "logging.FileHandler"]
    if log_file:
        for name in file_handlers:
            handlers[name]["filename"] = log_file
        return

    for name in file_handlers:
        del handlers[name]
    targets = list(cfg.get("loggers", {}).values())
    if "root" in cfg:
        targets.append(cfg["root"])
    for target in targets:
        target["handlers"] = [h for h in target.get("handlers", []) if h not in file_handlers]


def configure_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    config_path: Optional[str] = None,
) -> None:
    """Apply the YAML logging configuration with the viewer's level and file.

    Only the ``eventglobe`` logger takes ``log_level``; urllib3 and the root
    logger keep the quieter levels from the YAML. A missing YAML file falls
    back to ``basicConfig`` at the requested level.

    Args:
        log_level: Level name for the eventglobe loggers, e.g. "DEBUG".
        log_file: Path for the file handler; None keeps logging on the console.
        config_path: Alternative logging YAML.
    """
    level = log_level.upper()
    cfg = _read_logging_yaml(Path(config_path) if config_path else _CONFIG_PATH)
    if not cfg:
        logging.basicConfig(level=getattr(logging, level, logging.INFO), format=_FALLBACK_FORMAT)
        logging.getLogger(PACKAGE_LOGGER).setLevel(level)
        return

    _route_file_handlers(cfg, log_file)
    cfg.setdefault("loggers", {}).setdefault(PACKAGE_LOGGER, {})["level"] = level
    logging.config.dictConfig(cfg)


def get_logger(name: str) -> logging.Logger:
    """Logger for a component, e.g. ``get_logger("scheduler")`` → eventglobe.scheduler."""
    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


class RunContextAdapter(logging.LoggerAdapter):
    """Prefixes messages with ``[cycle_id]``.

    ``get_run_logger("pipeline", "20240101120500").info("Parsed %d events", 3)``
    logs ``[20240101120500] Parsed 3 events`` on eventglobe.pipeline.
    """

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> Tuple[str, MutableMapping[str, Any]]:
        return f"[{self.extra.get('cycle_id', '-')}] {msg}", kwargs


def get_run_logger(name: str, cycle_id: str) -> RunContextAdapter:
    return RunContextAdapter(get_logger(name), {"cycle_id": cycle_id})
