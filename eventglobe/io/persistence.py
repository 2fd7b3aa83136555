"""Local files for the GDELT Event Globe.

Two kinds of file touch the disk: reference documents read at the start of a
cycle, and snapshot payloads written for the globe front end. Payloads are
strict JSON (no NaN or Infinity tokens, which browsers reject) and are
swapped into place atomically so a poller never sees a half-written file.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

CYCLE_DIR_FORMAT = "%Y%m%d%H%M%S"


def read_reference_file(path: str | Path) -> Optional[Any]:
    """Parse a local reference document, or None when it is absent or not JSON."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.warning("Reference file not found: %s", path)
        return None
    except OSError as exc:
        logger.warning("Cannot read reference file %s: %s", path, exc)
        return None

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Reference file %s is not valid JSON (line %d): %s", path, exc.lineno, exc.msg)
        return None


def cycle_directory(output_root: str | Path, stamp: datetime) -> Path:
    """Create ``<output_root>/<YYYYMMDDHHMMSS>`` for one exported file."""
    directory = Path(output_root) / stamp.strftime(CYCLE_DIR_FORMAT)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def write_snapshot_payload(payload: Dict[str, Any], path: str | Path) -> Path:
    """Write a globe payload as strict UTF-8 JSON, replacing any previous file.

    Raises:
        ValueError: If the payload still holds a NaN or infinite float.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(payload, ensure_ascii=False, indent=2, allow_nan=False)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        os.replace(tmp_name, path)
    except OSError:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.debug("Wrote snapshot payload %s (%d chars)", path, len(text))
    return path
