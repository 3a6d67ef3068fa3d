"""
Adaptation rules: pain check, plateau detection, and progression status.

Implements the logic for deciding whether the next session should
promote, hold, or regress based on recent performance and recovery.
"""

from typing import Sequence

from .config import DEFAULT_TUNING, NULL_RIR_FALLBACK, EngineTuning
from .metrics import flatten_sets, infer_rir, mean
from .models import (
    PerformanceSummary,
    ProgressionStatus,
    SessionLog,
    UserState,
)


def has_pain(user: UserState, last_session: SessionLog | None = None) -> bool:
    """
    Check for any pain evidence.

    Pain = any injury flag on the user OR pain reported in the most
    recent session.

    Args:
        user: Current user state
        last_session: Most recent logged session (any template)

    Returns:
        True if pain is present
    """
    flagged = user.injury_flags is not None and user.injury_flags.any()
    reported = last_session is not None and last_session.pain_reported
    return flagged or reported


def detect_plateau(
    history: Sequence[SessionLog],
    k: int = DEFAULT_TUNING.plateau_sessions,
    max_avg_rir: float = DEFAULT_TUNING.plateau_avg_rir_max,
) -> bool:
    """
    Detect if the athlete is stuck.

    Plateau = (last session's total reps <= best of the previous k-1)
              AND (mean RIR over the window <= max_avg_rir)
              AND (no set in the window flagged as failed)

    Stagnation while failing sets is regression territory, and stagnation
    with reps left in reserve is not yet a plateau.  History is NOT
    filtered by template.

    Args:
        history: Full chronological history
        k: Window size in sessions
        max_avg_rir: Highest mean RIR still counted as working near failure

    Returns:
        True if plateau detected
    """
    if k < 2 or len(history) < k:
        return False

    window = list(history)[-k:]
    totals = [s.total_actual_reps for s in window]
    no_improvement = totals[-1] <= max(totals[:-1])

    sets = flatten_sets(window)
    avg_rir = mean([infer_rir(s) for s in sets]) if sets else NULL_RIR_FALLBACK

    no_failures = all(not s.failed for s in sets)

    return no_improvement and avg_rir <= max_avg_rir and no_failures


def classify_progression(
    summary: PerformanceSummary,
    readiness: float,
    pain: bool,
    tuning: EngineTuning = DEFAULT_TUNING,
) -> ProgressionStatus:
    """
    Classify the next step as PROMOTE, HOLD, or REGRESS.

    First match wins:
    1. Pain -> REGRESS
    2. fail_rate >= regress_fail_rate -> REGRESS
    3. completion_rate < regress_completion_rate -> REGRESS
    4. avg_rir (None -> 1) >= promote_avg_rir AND completion_rate >=
       promote_completion_rate AND readiness >= promote_readiness -> PROMOTE
    5. otherwise HOLD

    Args:
        summary: Summary of comparable sessions
        readiness: Clamped readiness in [0, 1]
        pain: Output of has_pain()
        tuning: Threshold set

    Returns:
        ProgressionStatus
    """
    if pain:
        return ProgressionStatus.REGRESS

    if summary.fail_rate >= tuning.regress_fail_rate:
        return ProgressionStatus.REGRESS

    if summary.completion_rate < tuning.regress_completion_rate:
        return ProgressionStatus.REGRESS

    avg_rir = summary.avg_rir if summary.avg_rir is not None else NULL_RIR_FALLBACK
    if (
        avg_rir >= tuning.promote_avg_rir
        and summary.completion_rate >= tuning.promote_completion_rate
        and readiness >= tuning.promote_readiness
    ):
        return ProgressionStatus.PROMOTE

    return ProgressionStatus.HOLD
