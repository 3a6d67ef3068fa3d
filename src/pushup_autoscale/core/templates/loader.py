"""
YAML → PlanTemplate loader.

Loads day templates from per-division YAML files in the bundled
``src/pushup_autoscale/templates/`` directory.  Each file (e.g.
rookie.yaml) holds a ``division`` name and a ``templates`` list.

User overrides: place matching files in ``~/.pushup-autoscale/templates/``.
Entries are matched by template_id and deep-merged over the bundled
entry, so only changed keys need to be listed; entries with a new
template_id are appended.  A user file for a division that is not
bundled is skipped with a warning.

Usage (internal, called by registry.py):
    from .loader import load_templates_from_yaml
    catalog = load_templates_from_yaml()   # {division: [PlanTemplate, ...]}
"""

from __future__ import annotations

import warnings
from pathlib import Path

from ..engine.config_loader import deep_merge, get_user_config_dir, load_yaml_file
from ..models import DIVISIONS, PlanTemplate

_REQUIRED_TEMPLATE_FIELDS: frozenset[str] = frozenset(
    {
        "template_id",
        "day_label",
        "intensity",
        "variation",
        "sets",
        "target_reps",
        "rest_seconds",
    }
)


def template_from_dict(d: dict) -> PlanTemplate:
    """Convert a raw dict (from YAML) to a PlanTemplate.

    Raises ValueError if any required field is absent or invalid.
    """
    missing = _REQUIRED_TEMPLATE_FIELDS - set(d)
    if missing:
        raise ValueError(f"PlanTemplate missing fields: {sorted(missing)}")

    tempo = d.get("tempo")
    return PlanTemplate(
        template_id=str(d["template_id"]),
        day_label=str(d["day_label"]),
        intensity=str(d["intensity"]),  # type: ignore[arg-type]
        variation=str(d["variation"]),
        sets=int(d["sets"]),
        target_reps=int(d["target_reps"]),
        rest_seconds=int(d["rest_seconds"]),
        tempo=str(tempo) if tempo is not None else None,
        allow_variation_swap=bool(d.get("allow_variation_swap", True)),
    )


def _merge_template_lists(base: list[dict], override: list[dict]) -> list[dict]:
    """Merge override entries into base by template_id."""
    merged = [dict(t) for t in base]
    index = {t.get("template_id"): i for i, t in enumerate(merged)}
    for entry in override:
        if not isinstance(entry, dict):
            continue
        tid = entry.get("template_id")
        if tid in index:
            merged[index[tid]] = deep_merge(merged[index[tid]], entry)
        else:
            index[tid] = len(merged)
            merged.append(dict(entry))
    return merged


def _get_bundled_templates_dir() -> Path | None:
    """Return path to the bundled templates/ data directory, or None if not found."""
    # loader.py lives at src/pushup_autoscale/core/templates/loader.py
    # three levels up → src/pushup_autoscale/
    candidate = Path(__file__).parent.parent.parent / "templates"
    return candidate if candidate.is_dir() else None


def _get_user_templates_dir() -> Path | None:
    """Return ~/.pushup-autoscale/templates/ if it exists, else None."""
    p = get_user_config_dir() / "templates"
    return p if p.is_dir() else None


def _parse_division_file(raw: dict, source: Path) -> list[PlanTemplate]:
    templates: list[PlanTemplate] = []
    for entry in raw.get("templates") or []:
        try:
            templates.append(template_from_dict(entry))
        except (TypeError, ValueError) as exc:
            warnings.warn(
                f"pushup-autoscale: skipping template in {source.name}: {exc}",
                stacklevel=3,
            )
    return templates


def load_templates_from_yaml() -> dict[str, list[PlanTemplate]]:
    """Return {division: [PlanTemplate, ...]} loaded from per-division YAML files.

    Divisions are returned in Rookie/Warrior/Elite order; a division with
    no file is absent from the result.
    """
    bundled_dir = _get_bundled_templates_dir()
    user_dir = _get_user_templates_dir()

    raw_by_division: dict[str, tuple[list[dict], Path]] = {}

    if bundled_dir is not None:
        for p in sorted(bundled_dir.glob("*.yaml")):
            raw = load_yaml_file(p)
            division = raw.get("division")
            if division not in DIVISIONS:
                warnings.warn(
                    f"pushup-autoscale: skipping {p.name}: unknown division {division!r}",
                    stacklevel=2,
                )
                continue
            raw_by_division[division] = (list(raw.get("templates") or []), p)

    if user_dir is not None:
        for p in sorted(user_dir.glob("*.yaml")):
            raw = load_yaml_file(p)
            division = raw.get("division")
            if division not in raw_by_division:
                warnings.warn(
                    f"pushup-autoscale: skipping user templates {p.name}: "
                    f"no bundled division {division!r}",
                    stacklevel=2,
                )
                continue
            base, _ = raw_by_division[division]
            merged = _merge_template_lists(base, list(raw.get("templates") or []))
            raw_by_division[division] = (merged, p)

    result: dict[str, list[PlanTemplate]] = {}
    for division in DIVISIONS:
        if division not in raw_by_division:
            continue
        entries, source = raw_by_division[division]
        result[division] = _parse_division_file({"templates": entries}, source)
    return result
