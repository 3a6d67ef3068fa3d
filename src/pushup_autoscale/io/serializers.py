"""
JSON serialization for engine inputs and outputs.

Handles conversion between dataclasses and JSON-compatible dicts.  The
surrounding product sends camelCase keys (targetReps, painReported, …);
snake_case keys are accepted too.
"""

import json
import re
from datetime import datetime
from pathlib import Path
from typing import Any

from ..core.models import (
    DIVISIONS,
    GOALS,
    INTENSITIES,
    InjuryFlags,
    NextSession,
    PlanTemplate,
    SessionLog,
    SetLog,
    UserState,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def _get(data: dict[str, Any], snake: str, default: Any = None) -> Any:
    """Read a key in snake_case or its camelCase spelling."""
    if snake in data:
        return data[snake]
    head, *rest = snake.split("_")
    camel = head + "".join(part.capitalize() for part in rest)
    return data.get(camel, default)


def _require(data: dict[str, Any], snake: str, context: str) -> Any:
    value = _get(data, snake)
    if value is None:
        raise ValidationError(f"{context}: missing required field '{snake}'")
    return value


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be a number, got {value!r}") from e


def _as_float(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be a number, got {value!r}") from e


def validate_date(date_str: str) -> str:
    """
    Validate date string is ISO format.

    Args:
        date_str: Date string to validate

    Returns:
        The YYYY-MM-DD string

    Raises:
        ValidationError: If date format is invalid
    """
    if not isinstance(date_str, str) or not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date_str}") from e

    return date_str


def validate_choice(value: Any, choices: tuple[str, ...], name: str) -> str:
    """
    Validate that a value is one of the allowed strings.

    Raises:
        ValidationError: If value is not in choices
    """
    if value not in choices:
        raise ValidationError(f"Invalid {name}: {value!r}. Must be one of {choices}")
    return value


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def dict_to_injury_flags(data: dict[str, Any] | None) -> InjuryFlags | None:
    """Convert dict to InjuryFlags; None stays None."""
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValidationError("injury_flags must be an object")
    return InjuryFlags(
        wrist_pain=bool(_get(data, "wrist_pain", False)),
        shoulder_pain=bool(_get(data, "shoulder_pain", False)),
        elbow_pain=bool(_get(data, "elbow_pain", False)),
        other_pain=bool(_get(data, "other_pain", False)),
    )


def dict_to_user_state(data: dict[str, Any]) -> UserState:
    """
    Convert dict to UserState.

    Raises:
        ValidationError: If data is invalid
    """
    division = validate_choice(_require(data, "division", "user"), DIVISIONS, "division")
    goal = validate_choice(_require(data, "goal", "user"), GOALS, "goal")
    baseline_max = _as_int(_require(data, "baseline_max", "user"), "baseline_max")
    if baseline_max <= 0:
        raise ValidationError(f"baseline_max must be positive, got {baseline_max}")

    readiness = _get(data, "readiness")
    level = _get(data, "level")

    return UserState(
        user_id=str(_get(data, "user_id", "")),
        division=division,  # type: ignore[arg-type]
        goal=goal,  # type: ignore[arg-type]
        baseline_max=baseline_max,
        readiness=_as_float(readiness, "readiness") if readiness is not None else None,
        injury_flags=dict_to_injury_flags(_get(data, "injury_flags")),
        level=_as_int(level, "level") if level is not None else None,
    )


def dict_to_template(data: dict[str, Any]) -> PlanTemplate:
    """
    Convert dict to PlanTemplate.

    Raises:
        ValidationError: If data is invalid
    """
    intensity = validate_choice(
        _require(data, "intensity", "template"), INTENSITIES, "intensity"
    )
    sets = _as_int(_require(data, "sets", "template"), "sets")
    target_reps = _as_int(_require(data, "target_reps", "template"), "target_reps")
    rest_seconds = _as_int(_require(data, "rest_seconds", "template"), "rest_seconds")
    for value, name in ((sets, "sets"), (target_reps, "target_reps"), (rest_seconds, "rest_seconds")):
        validate_non_negative(value, name)

    tempo = _get(data, "tempo")
    swap = _get(data, "allow_variation_swap")

    return PlanTemplate(
        template_id=str(_get(data, "template_id", "")),
        day_label=str(_get(data, "day_label", "")),
        intensity=intensity,  # type: ignore[arg-type]
        variation=str(_require(data, "variation", "template")),
        sets=sets,
        target_reps=target_reps,
        rest_seconds=rest_seconds,
        tempo=str(tempo) if tempo else None,
        allow_variation_swap=swap is not False,
    )


def dict_to_set_log(data: dict[str, Any]) -> SetLog:
    """
    Convert dict to SetLog.

    Raises:
        ValidationError: If data is invalid
    """
    target = _as_int(_require(data, "target_reps", "set"), "target_reps")
    actual = _as_int(_require(data, "actual_reps", "set"), "actual_reps")
    validate_non_negative(target, "target_reps")
    validate_non_negative(actual, "actual_reps")
    rir = _get(data, "rir")

    return SetLog(
        target_reps=target,
        actual_reps=actual,
        rir=_as_float(rir, "rir") if rir is not None else None,
        failed=bool(_get(data, "failed", False)),
    )


def dict_to_session_log(data: dict[str, Any]) -> SessionLog:
    """
    Convert dict to SessionLog.

    Raises:
        ValidationError: If data is invalid
    """
    date = validate_date(_require(data, "date", "session"))
    sets_raw = _get(data, "sets", [])
    if not isinstance(sets_raw, list):
        raise ValidationError("session sets must be a list")

    rest = _get(data, "rest_seconds")
    duration = _get(data, "time_seconds")
    template_id = _get(data, "template_id")

    return SessionLog(
        date=date,
        session_id=str(_get(data, "session_id", date)),
        variation=str(_get(data, "variation", "Standard")),
        sets=tuple(dict_to_set_log(s) for s in sets_raw),
        template_id=str(template_id) if template_id is not None else None,
        rest_seconds=_as_int(rest, "rest_seconds") if rest is not None else None,
        time_seconds=_as_int(duration, "time_seconds") if duration is not None else None,
        pain_reported=bool(_get(data, "pain_reported", False)),
        notes=_get(data, "notes"),
    )


def template_to_dict(template: PlanTemplate) -> dict[str, Any]:
    """Convert PlanTemplate to JSON-compatible dict."""
    return {
        "template_id": template.template_id,
        "day_label": template.day_label,
        "intensity": template.intensity,
        "variation": template.variation,
        "sets": template.sets,
        "target_reps": template.target_reps,
        "rest_seconds": template.rest_seconds,
        "tempo": template.tempo,
        "allow_variation_swap": template.allow_variation_swap,
    }


def next_session_to_dict(session: NextSession) -> dict[str, Any]:
    """
    Convert NextSession to JSON-compatible dict.

    Args:
        session: Engine output

    Returns:
        Dict representation
    """
    return {
        "template_id": session.template_id,
        "variation": session.variation,
        "sets": session.sets,
        "target_reps": list(session.target_reps),
        "rest_seconds": session.rest_seconds,
        "tempo": session.tempo,
        "coaching_notes": list(session.coaching_notes),
        "reward": {
            "base_reward_per_rep": session.reward.base_reward_per_rep,
            "estimated_reward": session.reward.estimated_reward,
            "multipliers": dict(session.reward.multipliers),
        },
        "debug": {
            "status": session.debug.status.value,
            "plateau": session.debug.plateau,
            "avg_rir": session.debug.avg_rir,
            "completion_rate": session.debug.completion_rate,
            "fail_rate": session.debug.fail_rate,
            "readiness": session.debug.readiness,
        },
    }


def next_session_to_json(session: NextSession) -> str:
    """Serialize NextSession to indented JSON."""
    return json.dumps(next_session_to_dict(session), indent=2)


def load_request(path: str | Path) -> dict[str, Any]:
    """
    Read a recommendation request file.

    The file is a JSON object::

        {"user": {...}, "template": {...} | "template_id": "...", "history": [...]}

    Returns:
        {"user": UserState, "template": PlanTemplate | None,
         "template_id": str | None, "history": list[SessionLog]}

    Raises:
        FileNotFoundError: If the file does not exist
        ValidationError: If the JSON or any record is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Request file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValidationError("Request must be a JSON object")
    if not isinstance(data.get("user"), dict):
        raise ValidationError("Request is missing the 'user' object")

    template_raw = data.get("template")
    history_raw = data.get("history", _get(data, "recent_history", []))
    if not isinstance(history_raw, list):
        raise ValidationError("'history' must be a list of sessions")

    template_id = _get(data, "template_id")
    return {
        "user": dict_to_user_state(data["user"]),
        "template": dict_to_template(template_raw) if isinstance(template_raw, dict) else None,
        "template_id": str(template_id) if template_id is not None else None,
        "history": [dict_to_session_log(s) for s in history_raw],
    }
