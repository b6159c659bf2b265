"""Helpers shared by the JSON-file-backed repositories.

Writes go to a temporary file in the same directory and are then renamed
over the target, so readers never observe a half-written document.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def ensure_file(path: Path, empty: Any) -> None:
    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        write_json(path, empty)


def read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def write_json(path: Path, data: Any) -> None:
    with tempfile.NamedTemporaryFile(
        "w", dir=path.parent, prefix=f".{path.name}.", delete=False, encoding="utf-8"
    ) as tmp:
        json.dump(data, tmp, indent=2)
        tmp.write("\n")
        tmp_path = tmp.name
    try:
        os.replace(tmp_path, path)
    except OSError:
        logger.error("Failed to replace %s", path)
        os.remove(tmp_path)
        raise
