"""
EqReduce — Local JSON storage for solver settings.

Data is persisted in ``<project>/data/eqreduce.json``.
"""

import json
import os
from typing import Optional

_DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "data")
_DATA_FILE = os.path.join(_DATA_DIR, "eqreduce.json")

# ── Default settings (every key is always present) ──────────────────────
DEFAULT_SETTINGS = {
    "max_steps": 10000,            # reduction steps allowed per solve
    "prefer_low_degree": True,     # isolate linear occurrences first
    "complex_roots": True,         # keep roots that are not real
    "verify": True,                # re-check substitutions on success
    "partial_ok": False,           # stuck systems return what was solved
    "compute_mode": "symbolic",    # "symbolic" or "numerical"
    "numeric_samples": 5,
    "numeric_tolerance": 1e-9,
}

_COMPUTE_MODES = ("symbolic", "numerical")


def _ensure_dir() -> None:
    os.makedirs(_DATA_DIR, exist_ok=True)


def _load_db() -> dict:
    _ensure_dir()
    if os.path.exists(_DATA_FILE):
        try:
            with open(_DATA_FILE, "r", encoding="utf-8") as f:
                data = json.load(f)
            if isinstance(data, dict):
                data.setdefault("settings", {})
                return data
        except (json.JSONDecodeError, OSError):
            pass
    return {"settings": dict(DEFAULT_SETTINGS)}


def _save_db(db: dict) -> None:
    _ensure_dir()
    with open(_DATA_FILE, "w", encoding="utf-8") as f:
        json.dump(db, f, indent=2, ensure_ascii=False)


def merge_settings(overrides: Optional[dict] = None) -> dict:
    """Return DEFAULT_SETTINGS updated with *overrides*, validated."""
    merged = dict(DEFAULT_SETTINGS)
    if overrides:
        unknown = set(overrides) - set(DEFAULT_SETTINGS)
        if unknown:
            raise ValueError(f"Unknown setting(s): {', '.join(sorted(unknown))}")
        merged.update(overrides)
    if merged["compute_mode"] not in _COMPUTE_MODES:
        raise ValueError(
            f"compute_mode must be one of {', '.join(_COMPUTE_MODES)}, "
            f"got '{merged['compute_mode']}'."
        )
    if int(merged["max_steps"]) < 1:
        raise ValueError("max_steps must be at least 1.")
    return merged


# ── Settings ─────────────────────────────────────────────────────────────

def get_settings() -> dict:
    """Return the stored settings merged over the defaults.

    Keys the file does not know about (or no longer knows about) fall back
    to their default values.
    """
    stored = _load_db().get("settings", {})
    merged = dict(DEFAULT_SETTINGS)
    merged.update({k: v for k, v in stored.items() if k in DEFAULT_SETTINGS})
    return merged


def save_settings(settings: dict) -> None:
    """Validate and persist *settings*."""
    db = _load_db()
    db["settings"] = merge_settings(settings)
    _save_db(db)


def reset_settings() -> None:
    """Restore the default settings on disk."""
    db = _load_db()
    db["settings"] = dict(DEFAULT_SETTINGS)
    _save_db(db)
