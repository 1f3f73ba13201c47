"""Built-in sample settings and the merge used for overrides."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

DEFAULTS_DIR = Path(__file__).parent / "defaults"


def load_defaults(name: str = "sample") -> dict[str, Any]:
    """Read ``defaults/<name>.yaml`` shipped with the package."""
    path = DEFAULTS_DIR / f"{name}.yaml"
    try:
        text = path.read_text()
    except FileNotFoundError:
        msg = f"No built-in defaults named '{name}' ({path})"
        raise FileNotFoundError(msg) from None
    return yaml.safe_load(text) or {}


def merge_configs(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Overlay *overrides* on *base*; nested mappings merge key by key.

    Neither argument is modified.
    """
    merged = dict(base)
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = merge_configs(current, value)
        merged[key] = value
    return merged
