"""
YAML → EngineTuning loader.

Loads tuning overrides from tuning.yaml (bundled with the package) and
optionally merges user overrides from ~/.pushup-autoscale/tuning.yaml.

Usage:
    from pushup_autoscale.core.engine.config_loader import load_tuning
    tuning = load_tuning()
    next_session = recommend_next_session(user, template, history, tuning)

A missing file means "use the defaults from config.py".  A user file
with parse errors or unknown keys triggers a warning and is ignored
(no crash).
"""

from __future__ import annotations

import dataclasses
import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..config import DEFAULT_TUNING, EngineTuning

USER_CONFIG_DIRNAME = ".pushup-autoscale"

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML mapping; return {} and warn on parse errors."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"pushup-autoscale: ignoring {path} ({exc})", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def get_user_config_dir() -> Path:
    """Return ~/.pushup-autoscale (may not exist)."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    return home / USER_CONFIG_DIRNAME


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled tuning.yaml, or None if not found."""
    # config_loader.py lives at src/pushup_autoscale/core/engine/
    candidate = Path(__file__).parent.parent.parent / "tuning.yaml"
    return candidate if candidate.exists() else None


def get_user_yaml_path() -> Path | None:
    """Return ~/.pushup-autoscale/tuning.yaml if it exists, else None."""
    p = get_user_config_dir() / "tuning.yaml"
    return p if p.exists() else None


def _coerce_tuning_value(key: str, value: Any, default: int | float) -> int | float:
    """Convert a YAML value to the default's numeric type without truncating."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid value for tuning key '{key}': {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid value for tuning key '{key}': {value!r}") from exc
    if isinstance(default, int):
        if not number.is_integer():
            raise ValueError(f"Tuning key '{key}' needs a whole number, got {value!r}")
        return int(number)
    return number


def tuning_from_dict(data: dict[str, Any], base: EngineTuning = DEFAULT_TUNING) -> EngineTuning:
    """
    Build an EngineTuning from a flat mapping of overrides.

    Unknown keys are reported with a warning and skipped.  Values are
    converted to the type of the default they replace; booleans and
    fractional values for whole-number keys are rejected.

    Raises:
        ValueError: If a value cannot be coerced or fails validation
    """
    known = {f.name: f for f in dataclasses.fields(EngineTuning)}
    overrides: dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            warnings.warn(f"pushup-autoscale: unknown tuning key '{key}' ignored", stacklevel=2)
            continue
        overrides[key] = _coerce_tuning_value(key, value, getattr(base, key))
    return dataclasses.replace(base, **overrides)


def load_tuning(extra_path: Path | None = None) -> EngineTuning:
    """
    Load and merge tuning from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/pushup_autoscale/tuning.yaml
    2. User override at ~/.pushup-autoscale/tuning.yaml
    3. extra_path, when given (e.g. the CLI --tuning option)

    Each file holds a ``tuning:`` mapping of EngineTuning field names.

    Returns:
        EngineTuning (DEFAULT_TUNING values where nothing is overridden)
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        config = deep_merge(config, load_yaml_file(bundled))

    user = get_user_yaml_path()
    if user is not None:
        user_cfg = load_yaml_file(user)
        if user_cfg:
            config = deep_merge(config, user_cfg)

    if extra_path is not None:
        if not extra_path.exists():
            raise FileNotFoundError(f"Tuning file not found: {extra_path}")
        config = deep_merge(config, load_yaml_file(extra_path))

    section = config.get("tuning") or {}
    if not isinstance(section, dict):
        warnings.warn("pushup-autoscale: 'tuning' must be a mapping; using defaults", stacklevel=2)
        return DEFAULT_TUNING
    return tuning_from_dict(section)
