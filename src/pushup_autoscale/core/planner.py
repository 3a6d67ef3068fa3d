"""
Next-session prescription for pushup-autoscale.

Turns today's template plus recent history into a concrete prescription:

    summary + plateau -> status -> status adjustment -> goal shaping
    -> safety clamp -> reward

The computation is a pure function of its arguments; no state is kept
between calls.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Sequence

from .adaptation import classify_progression, detect_plateau, has_pain
from .config import (
    DEFAULT_TUNING,
    EXTRA_SET_MAX_SETS,
    EXTRA_SET_READINESS,
    GOAL_SHAPES,
    HARDER_VARIATION_RATIO,
    MICRO_PROGRESSION_AVG_RIR,
    MICRO_PROGRESSION_READINESS,
    NULL_RIR_FALLBACK,
    PLATEAU_REST_BONUS,
    PLATEAU_TEMPO,
    PROMOTE_REST_CUT,
    REGRESS_DROP_SET_FROM,
    REGRESS_REST_BONUS,
    REGRESS_REST_RANGE,
    REGRESS_TEMPO,
    REST_RANGE,
    EngineTuning,
)
from .metrics import clamp, round_half_up, summarize_recent_performance
from .models import (
    DecisionDebug,
    NextSession,
    PerformanceSummary,
    PlanTemplate,
    ProgressionStatus,
    SessionLog,
    UserState,
)
from .rewards import estimate_reward
from .variations import easier_variation, harder_variation, normalize_variation_name

logger = logging.getLogger(__name__)


@dataclass
class _WorkingPlan:
    """Mutable copy of the template that the adjustment steps edit in place."""

    variation: str
    sets: int
    target_reps: list[int]
    rest_seconds: int
    tempo: str | None
    notes: list[str] = field(default_factory=list)

    @classmethod
    def from_template(cls, template: PlanTemplate) -> "_WorkingPlan":
        return cls(
            variation=normalize_variation_name(template.variation),
            sets=template.sets,
            target_reps=[template.target_reps] * template.sets,
            rest_seconds=template.rest_seconds,
            tempo=template.tempo,
        )


@dataclass(frozen=True)
class _Context:
    """Read-only inputs shared by the status adjustments."""

    template: PlanTemplate
    summary: PerformanceSummary
    readiness: float
    tuning: EngineTuning

    @property
    def avg_rir(self) -> float:
        if self.summary.avg_rir is None:
            return NULL_RIR_FALLBACK
        return self.summary.avg_rir


def comparable_sessions(
    history: Sequence[SessionLog],
    template: PlanTemplate,
    window: int = DEFAULT_TUNING.comparable_window,
) -> list[SessionLog]:
    """
    Sessions that share today's template, most recent `window` of them.

    An empty template id makes every session comparable.
    """
    if template.template_id:
        matching = [s for s in history if s.template_id == template.template_id]
    else:
        matching = list(history)
    return matching[-window:]


def apply_plateau_override(
    plan: _WorkingPlan,
    status: ProgressionStatus,
    plateau: bool,
) -> ProgressionStatus:
    """
    Swap blind progression for a stimulus change when the athlete has stalled.

    Adds a tempo (if none) and 10 s of rest, and downgrades PROMOTE to
    HOLD.  REGRESS is left alone.

    Returns:
        The effective status for the adjustment step
    """
    if not plateau or status is ProgressionStatus.REGRESS:
        return status

    plan.notes.append(
        "Plateau detected: adding tempo focus and slightly more rest (stimulus change)."
    )
    if not plan.tempo:
        plan.tempo = PLATEAU_TEMPO
    plan.rest_seconds = int(clamp(plan.rest_seconds + PLATEAU_REST_BONUS, *REST_RANGE))
    return ProgressionStatus.HOLD


def _apply_regress(plan: _WorkingPlan, ctx: _Context) -> None:
    """Deload reps, drop a set from long sessions, step down the ladder."""
    plan.notes.append("Regression triggered: deloading volume + simplifying variation.")
    plan.target_reps = [
        max(1, math.floor(r * ctx.tuning.deload_factor)) for r in plan.target_reps
    ]

    if plan.sets >= REGRESS_DROP_SET_FROM:
        plan.sets -= 1
        plan.target_reps = plan.target_reps[: plan.sets]

    if ctx.template.allow_variation_swap:
        plan.variation = easier_variation(plan.variation)
        plan.notes.append(f"Easier variation: {plan.variation}")

    plan.rest_seconds = int(
        clamp(plan.rest_seconds + REGRESS_REST_BONUS, *REGRESS_REST_RANGE)
    )
    if not plan.tempo:
        plan.tempo = REGRESS_TEMPO


def _apply_hold(plan: _WorkingPlan, ctx: _Context) -> None:
    """Keep the template; +1 rep per set when the athlete is fresh."""
    plan.notes.append("Hold: keep progression steady. Prioritize strict form.")
    if (
        ctx.readiness >= MICRO_PROGRESSION_READINESS
        and ctx.avg_rir >= MICRO_PROGRESSION_AVG_RIR
        and ctx.template.intensity != "boss"
    ):
        plan.target_reps = [r + 1 for r in plan.target_reps]
        plan.notes.append("Micro-progression: +1 rep per set (high readiness).")


def promotion_step(readiness: float, tuning: EngineTuning = DEFAULT_TUNING) -> float:
    """
    Fractional rep increase for a PROMOTE.

    step = weekly_volume_step * (0.8 + 0.4 * readiness), capped at
    max_weekly_increase.
    """
    raw = tuning.weekly_volume_step * (0.8 + 0.4 * readiness)
    return clamp(raw, 0.0, tuning.max_weekly_increase)


def _apply_promote(plan: _WorkingPlan, ctx: _Context) -> None:
    """Add reps, possibly a set and a harder variation; trim rest."""
    template = ctx.template
    plan.notes.append("Promote: increasing workload within caps.")

    step = promotion_step(ctx.readiness, ctx.tuning)
    add_reps = max(1, math.floor(template.target_reps * step))
    plan.target_reps = [r + add_reps for r in plan.target_reps]

    if (
        plan.sets < EXTRA_SET_MAX_SETS
        and ctx.readiness >= EXTRA_SET_READINESS
        and template.intensity != "boss"
    ):
        last = plan.target_reps[-1] if plan.target_reps else template.target_reps + add_reps
        plan.sets += 1
        plan.target_reps.append(last)
        plan.notes.append("Added 1 set (volume progression).")

    summary = ctx.summary
    if template.allow_variation_swap and summary.total_target > 0:
        over_by = summary.total_actual / max(1, summary.total_target)
        if over_by >= HARDER_VARIATION_RATIO:
            plan.variation = harder_variation(plan.variation)
            plan.notes.append(f"Harder variation: {plan.variation}")

    if template.intensity != "boss" and not plan.tempo:
        plan.rest_seconds = int(clamp(plan.rest_seconds - PROMOTE_REST_CUT, *REST_RANGE))


_STATUS_ADJUSTERS: dict[ProgressionStatus, Callable[[_WorkingPlan, _Context], None]] = {
    ProgressionStatus.REGRESS: _apply_regress,
    ProgressionStatus.HOLD: _apply_hold,
    ProgressionStatus.PROMOTE: _apply_promote,
}

if set(_STATUS_ADJUSTERS) != set(ProgressionStatus):
    raise RuntimeError("pushup-autoscale: every ProgressionStatus needs a plan adjuster")


def adjust_plan(plan: _WorkingPlan, status: ProgressionStatus, ctx: _Context) -> None:
    """Apply the adjustment for the (effective) status."""
    _STATUS_ADJUSTERS[status](plan, ctx)


def shape_for_goal(plan: _WorkingPlan, goal: str) -> None:
    """
    Goal-specific finishing pass.

    Strength: reps x0.85 in [3, 20], rest +15 in [45, 240]
    Endurance: reps x1.05 in [5, 40], rest -5 in [20, 180]
    Hypertrophy: reps in [6, 25], rest in [45, 120]
    Mixed: unchanged
    """
    shape = GOAL_SHAPES.get(goal)
    if shape is None:
        return

    plan.target_reps = [
        int(clamp(round_half_up(r * shape.rep_scale), shape.reps_min, shape.reps_max))
        for r in plan.target_reps
    ]
    plan.rest_seconds = int(
        clamp(plan.rest_seconds + shape.rest_delta, shape.rest_min, shape.rest_max)
    )
    plan.notes.append(shape.note)


def safety_cap(baseline_max: int, tuning: EngineTuning = DEFAULT_TUNING) -> int:
    """Per-set rep ceiling: max(8, floor(baseline_max * 0.85))."""
    return max(tuning.safety_cap_floor, math.floor(baseline_max * tuning.safety_cap_fraction))


def apply_safety_clamp(
    target_reps: Sequence[int],
    baseline_max: int,
    tuning: EngineTuning = DEFAULT_TUNING,
) -> list[int]:
    """Clamp every per-set target into [1, safety_cap(baseline_max)]."""
    cap = safety_cap(baseline_max, tuning)
    return [int(clamp(r, 1, cap)) for r in target_reps]


def recommend_next_session(
    user: UserState,
    template: PlanTemplate,
    recent_history: Sequence[SessionLog],
    tuning: EngineTuning = DEFAULT_TUNING,
) -> NextSession:
    """
    Compute the next session's prescription.

    Args:
        user: Current user state
        template: Today's template (not modified)
        recent_history: Chronological session logs; never sorted or modified
        tuning: Threshold set (defaults to the built-in constants)

    Returns:
        NextSession with coaching notes, reward estimate, and the evidence
        behind the decision in `debug`
    """
    readiness_raw = user.readiness if user.readiness is not None else tuning.readiness_default
    readiness = clamp(readiness_raw, 0.0, 1.0)

    last = recent_history[-1] if recent_history else None
    pain = has_pain(user, last)

    comparable = comparable_sessions(recent_history, template, tuning.comparable_window)
    summary = summarize_recent_performance(comparable, template)
    plateau = detect_plateau(
        recent_history, tuning.plateau_sessions, tuning.plateau_avg_rir_max
    )

    status = classify_progression(summary, readiness, pain, tuning)

    plan = _WorkingPlan.from_template(template)
    status = apply_plateau_override(plan, status, plateau)

    ctx = _Context(template=template, summary=summary, readiness=readiness, tuning=tuning)
    adjust_plan(plan, status, ctx)
    shape_for_goal(plan, user.goal)
    plan.target_reps = apply_safety_clamp(plan.target_reps, user.baseline_max, tuning)

    logger.debug(
        "user=%s template=%s status=%s plateau=%s pain=%s completion=%.2f fail=%.2f",
        user.user_id,
        template.template_id,
        status.value,
        plateau,
        pain,
        summary.completion_rate,
        summary.fail_rate,
    )

    reward = estimate_reward(
        plan.target_reps, user.division, plan.variation, template.intensity, tuning
    )

    return NextSession(
        template_id=template.template_id,
        variation=plan.variation,
        sets=plan.sets,
        target_reps=tuple(plan.target_reps),
        rest_seconds=plan.rest_seconds,
        tempo=plan.tempo,
        coaching_notes=tuple(plan.notes),
        reward=reward,
        debug=DecisionDebug(
            status=status,
            plateau=plateau,
            avg_rir=summary.avg_rir,
            completion_rate=summary.completion_rate,
            fail_rate=summary.fail_rate,
            readiness=readiness,
        ),
    )
