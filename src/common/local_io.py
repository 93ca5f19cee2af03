"""Local file I/O utilities."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from common.serialization import serialize_dataclass

logger = logging.getLogger(__name__)


def save_bytes_local(content: bytes, path: str | Path) -> Path:
    """Write raw bytes to a local file, creating parent directories."""
    filepath = Path(path)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    filepath.write_bytes(content)
    logger.info("Saved %d bytes to %s", len(content), filepath)
    return filepath


def save_json_local(record: Any, path: str | Path) -> Path:
    """
    Save a dataclass record as an indented JSON document.

    Args:
        record: Dataclass object to save
        path: Destination file path

    Returns:
        Path to the written file
    """
    filepath = Path(path)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    serialized = serialize_dataclass(record)
    with filepath.open("w") as f:
        json.dump(serialized, f, default=str, ensure_ascii=False, indent=2)
        f.write("\n")

    logger.info("Saved report to %s", filepath)
    return filepath
