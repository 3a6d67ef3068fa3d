"""
Template registry.

All bundled day templates are loaded here at import time, grouped by
division.  If no template can be loaded, a RuntimeError is raised since the
catalog cannot work without them.
"""

from ..models import PlanTemplate
from .loader import load_templates_from_yaml

# Goal -> day_label of the template that suits it (Mixed takes the first).
GOAL_DAY_LABELS: dict[str, str] = {
    "Strength": "Strength Focus",
    "Endurance": "Endurance Focus",
    "Hypertrophy": "Volume Day",
}

# Fallback position when a division has no template with the goal's label.
_GOAL_FALLBACK_INDEX: dict[str, int] = {
    "Strength": 0,
    "Endurance": 1,
    "Hypertrophy": 2,
}


def _build_catalog() -> dict[str, list[PlanTemplate]]:
    loaded = load_templates_from_yaml()
    if not loaded:
        raise RuntimeError(
            "pushup-autoscale: no plan templates could be loaded from YAML. "
            "Check that src/pushup_autoscale/templates/*.yaml files are present and valid."
        )
    return loaded


TEMPLATE_CATALOG: dict[str, list[PlanTemplate]] = _build_catalog()


def get_templates_for_division(division: str) -> list[PlanTemplate]:
    """Templates for the division; unknown divisions get the Rookie list."""
    if division in TEMPLATE_CATALOG:
        return list(TEMPLATE_CATALOG[division])
    return list(TEMPLATE_CATALOG.get("Rookie", []))


def get_all_templates() -> list[PlanTemplate]:
    """Every template, Rookie first."""
    return [t for templates in TEMPLATE_CATALOG.values() for t in templates]


def get_template_by_id(template_id: str) -> PlanTemplate | None:
    """Look up a template by id; None if it is not in the catalog."""
    for template in get_all_templates():
        if template.template_id == template_id:
            return template
    return None


def get_recommended_template(division: str, goal: str) -> PlanTemplate:
    """
    Pick the template that matches the user's goal.

    Strength -> "Strength Focus", Endurance -> "Endurance Focus",
    Hypertrophy -> "Volume Day", Mixed -> the division's first template.

    Raises:
        ValueError: If the division has no templates at all
    """
    templates = get_templates_for_division(division)
    if not templates:
        raise ValueError(f"No templates available for division '{division}'")

    label = GOAL_DAY_LABELS.get(goal)
    if label is None:
        return templates[0]

    for template in templates:
        if template.day_label == label:
            return template

    idx = _GOAL_FALLBACK_INDEX[goal]
    return templates[idx] if idx < len(templates) else templates[0]
