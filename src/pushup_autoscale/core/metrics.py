"""
Pure metric computation functions.

Reduces noisy set/session logs to the scalar signals the progression
classifier works from.  All functions are pure and typed for testability.
"""

import math
from typing import Sequence

from .config import RIR_BELOW_TARGET, RIR_FROM_GAP, RIR_MAX, RIR_MIN
from .models import PerformanceSummary, PlanTemplate, SessionLog, SetLog


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (8.5 -> 9)."""
    return math.floor(value + 0.5)


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    return sum(values) / len(values) if values else 0.0


def infer_rir(set_log: SetLog) -> float:
    """
    Reps-in-reserve for one set.

    A reported RIR is clamped to [0, 10].  Otherwise it is inferred from
    the gap between actual and target reps:

        gap >= 6 -> 4,  >= 4 -> 3,  >= 2 -> 2,  >= 0 -> 1,  < 0 -> 0

    Args:
        set_log: Completed set

    Returns:
        RIR estimate
    """
    if set_log.rir is not None:
        return clamp(set_log.rir, RIR_MIN, RIR_MAX)

    gap = set_log.actual_reps - set_log.target_reps
    for min_gap, rir in RIR_FROM_GAP:
        if gap >= min_gap:
            return rir
    return RIR_BELOW_TARGET


def flatten_sets(sessions: Sequence[SessionLog]) -> list[SetLog]:
    """All sets of all sessions, in order."""
    return [s for session in sessions for s in session.sets]


def average_rir(sets: Sequence[SetLog]) -> float | None:
    """Mean inferred RIR, or None when there are no sets."""
    if not sets:
        return None
    return mean([infer_rir(s) for s in sets])


def summarize_recent_performance(
    recent: Sequence[SessionLog],
    template: PlanTemplate | None = None,
) -> PerformanceSummary:
    """
    Summarize comparable sessions into classifier inputs.

    completion_rate = (sets - failed sets) / planned sets, where planned
    sets is the template's set count when given, else the logged set count.
    fail_rate = failed sets / logged sets.  Both clamped to [0, 1].

    An empty history is neutral (no evidence against the athlete):
    avg_rir=None, completion_rate=1, fail_rate=0.

    Args:
        recent: Sessions already filtered to the current template
        template: Today's template (for planned set count)

    Returns:
        PerformanceSummary
    """
    if not recent:
        return PerformanceSummary(
            avg_rir=None,
            completion_rate=1.0,
            fail_rate=0.0,
            total_target=0,
            total_actual=0,
        )

    all_sets = flatten_sets(recent)
    planned_sets = template.sets if template is not None else len(all_sets)

    failed = sum(1 for s in all_sets if s.is_failed)
    completed = len(all_sets) - failed

    completion_rate = clamp(completed / planned_sets, 0.0, 1.0) if planned_sets > 0 else 1.0
    fail_rate = clamp(failed / len(all_sets), 0.0, 1.0) if all_sets else 0.0

    return PerformanceSummary(
        avg_rir=average_rir(all_sets),
        completion_rate=completion_rate,
        fail_rate=fail_rate,
        total_target=sum(s.target_reps for s in all_sets),
        total_actual=sum(s.actual_reps for s in all_sets),
    )
