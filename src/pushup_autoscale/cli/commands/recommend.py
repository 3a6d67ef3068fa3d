"""Recommendation command: next-session prescription from a request file."""

import warnings
from pathlib import Path
from typing import Annotated

import typer

from ...core.config import RECENT_HISTORY_COUNT
from ...core.engine.config_loader import load_tuning
from ...core.history import recent_session_logs
from ...core.models import PlanTemplate, UserState
from ...core.planner import recommend_next_session
from ...core.templates import get_recommended_template, get_template_by_id
from ...io.serializers import ValidationError, load_request, next_session_to_json
from .. import views
from ..app import JsonOption, TuningOption, app


def _resolve_template(
    user: UserState,
    template: PlanTemplate | None,
    template_id: str | None,
) -> PlanTemplate:
    """Inline template wins, then a catalog id, then the goal's recommended template."""
    if template is not None:
        return template
    if template_id is not None:
        found = get_template_by_id(template_id)
        if found is None:
            raise ValidationError(f"Unknown template_id: {template_id}")
        return found
    return get_recommended_template(user.division, user.goal)


@app.command()
def recommend(
    request_path: Annotated[
        Path,
        typer.Argument(help="JSON request file with user, template/template_id, and history"),
    ],
    history_limit: Annotated[
        int,
        typer.Option("--history-limit", "-n", help="Most recent sessions (with sets) to use"),
    ] = RECENT_HISTORY_COUNT,
    tuning_path: TuningOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Compute the next session's prescription.
    """
    try:
        request = load_request(request_path)
        user: UserState = request["user"]
        template = _resolve_template(user, request["template"], request["template_id"])
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            tuning = load_tuning(tuning_path)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    history = recent_session_logs(request["history"], history_limit)
    next_session = recommend_next_session(user, template, history, tuning)

    if json_out:
        print(next_session_to_json(next_session))
        return

    for w in caught:
        views.print_warning(str(w.message))
    if not history:
        views.print_info("No logged sessions with set data; using neutral defaults.")
    views.print_next_session(next_session, template)
