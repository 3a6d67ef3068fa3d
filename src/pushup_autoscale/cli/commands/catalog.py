"""Catalog commands: templates and ladder."""

import json
from typing import Annotated, Optional

import typer

from ...core.config import VARIATION_LADDER, VARIATION_MULT
from ...core.models import DIVISIONS
from ...core.templates import get_all_templates, get_templates_for_division
from ...io.serializers import template_to_dict
from .. import views
from ..app import JsonOption, app


@app.command()
def templates(
    division: Annotated[
        Optional[str],
        typer.Option("--division", "-d", help="Rookie, Warrior, or Elite (default: all)"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    List the day-template catalog.
    """
    if division is not None and division not in DIVISIONS:
        views.print_error(f"Unknown division: {division}. Valid: {', '.join(DIVISIONS)}")
        raise typer.Exit(1)

    items = get_templates_for_division(division) if division else get_all_templates()

    if json_out:
        print(json.dumps([template_to_dict(t) for t in items], indent=2))
        return

    views.console.print(views.format_templates_table(items, division))


@app.command()
def ladder(json_out: JsonOption = False) -> None:
    """
    Show the variation difficulty ladder.
    """
    if json_out:
        print(json.dumps(
            [{"variation": v, "multiplier": VARIATION_MULT.get(v, 1.0)} for v in VARIATION_LADDER],
            indent=2,
        ))
        return

    views.console.print(views.format_ladder_table())
