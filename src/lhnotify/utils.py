from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .constants import Limits


def safe_read_text(path: Path, max_bytes: int = Limits.MAX_RESULT_FILE_SIZE) -> str:
    data = path.read_bytes()
    if len(data) > max_bytes:
        raise ValueError(f"File too large: {path} ({len(data)} bytes)")
    return data.decode("utf-8", errors="replace")


def read_json(path: Path) -> tuple[str, Any]:
    """Return the raw text of a JSON file together with its parsed value."""
    text = safe_read_text(path)
    return text, json.loads(text)
