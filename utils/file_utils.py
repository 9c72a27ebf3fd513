"""Safe JSON loading helpers."""

import json
from pathlib import Path


def load_json(path: str | Path) -> dict:
    """Return the parsed JSON object at ``path``, or ``{}`` when missing or invalid."""
    p = Path(path)
    if not p.exists():
        return {}
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}
