"""
Day-template catalog for pushup-autoscale.

Templates are the static "today" prescriptions that the engine adapts.
The product resolves one per call; these helpers are how it does so.
"""

from .registry import (
    TEMPLATE_CATALOG,
    get_all_templates,
    get_recommended_template,
    get_template_by_id,
    get_templates_for_division,
)

__all__ = [
    "TEMPLATE_CATALOG",
    "get_all_templates",
    "get_recommended_template",
    "get_template_by_id",
    "get_templates_for_division",
]
