"""
Configuration constants for the adaptive push-up programming engine.

All adjustable parameters are centralized here for easy tuning.  The
module constants are the defaults; EngineTuning bundles them into one
immutable object that is passed into the engine (see
core/engine/config_loader.py for YAML overrides).
"""

from dataclasses import dataclass
from typing import Final

# =============================================================================
# PROGRESSION STEP
# =============================================================================

WEEKLY_VOLUME_STEP: Final[float] = 0.07  # Base rep increase fraction on PROMOTE
MAX_WEEKLY_INCREASE: Final[float] = 0.15  # Hard ceiling on the step
DELOAD_FACTOR: Final[float] = 0.80  # Rep multiplier on REGRESS

# =============================================================================
# CLASSIFIER THRESHOLDS
# =============================================================================

PROMOTE_AVG_RIR: Final[float] = 3.0  # Average reps-in-reserve needed to promote
PROMOTE_COMPLETION_RATE: Final[float] = 0.95
PROMOTE_READINESS: Final[float] = 0.65
REGRESS_FAIL_RATE: Final[float] = 0.25  # Fail rate at or above this regresses
REGRESS_COMPLETION_RATE: Final[float] = 0.85  # Completion below this regresses

# Used in place of a missing average RIR (no sets logged)
NULL_RIR_FALLBACK: Final[float] = 1.0

# =============================================================================
# PLATEAU DETECTION
# =============================================================================

PLATEAU_SESSIONS: Final[int] = 3  # Window size k
PLATEAU_AVG_RIR_MAX: Final[float] = 1.1  # Working close to failure

# =============================================================================
# READINESS AND HISTORY WINDOW
# =============================================================================

READINESS_DEFAULT: Final[float] = 0.7
COMPARABLE_WINDOW: Final[int] = 6  # Same-template sessions fed to the summarizer
RECENT_HISTORY_COUNT: Final[int] = 10  # Sessions kept by recent_session_logs()

# =============================================================================
# HOLD / PROMOTE GATES
# =============================================================================

MICRO_PROGRESSION_READINESS: Final[float] = 0.8
MICRO_PROGRESSION_AVG_RIR: Final[float] = 2.0
EXTRA_SET_READINESS: Final[float] = 0.75
EXTRA_SET_MAX_SETS: Final[int] = 6  # Extra set only while sets < this
HARDER_VARIATION_RATIO: Final[float] = 1.15  # actual / target volume
REGRESS_DROP_SET_FROM: Final[int] = 5  # Drop a set on REGRESS at this many sets

# =============================================================================
# TEMPO AND REST
# =============================================================================

PLATEAU_TEMPO: Final[str] = "3-0-1"
REGRESS_TEMPO: Final[str] = "2-0-1"

PLATEAU_REST_BONUS: Final[int] = 10
REGRESS_REST_BONUS: Final[int] = 15
PROMOTE_REST_CUT: Final[int] = 5

REST_RANGE: Final[tuple[int, int]] = (30, 180)  # Plateau and PROMOTE adjustments
REGRESS_REST_RANGE: Final[tuple[int, int]] = (45, 210)

# =============================================================================
# SAFETY CAP
# =============================================================================

SAFETY_CAP_FRACTION: Final[float] = 0.85  # Of baseline max reps
SAFETY_CAP_FLOOR: Final[int] = 8

# =============================================================================
# REWARD
# =============================================================================

BASE_REWARD_PER_REP: Final[int] = 1
STREAK_MULTIPLIER: Final[float] = 1.0  # Streak economy lives outside the engine

# =============================================================================
# VARIATIONS
# =============================================================================

# Easiest to hardest.  Regression/progression move one step along this list.
VARIATION_LADDER: Final[tuple[str, ...]] = (
    "Knee",
    "Incline",
    "Standard",
    "Wide",
    "HandRelease",
    "Tempo",
    "Diamond",
    "Decline",
    "Spiderman",
    "Explosive",
    "Archer",
    "PseudoPlanche",
)

VARIATION_ALIASES: Final[dict[str, str]] = {
    "Hand-Release": "HandRelease",
    "Hand Release": "HandRelease",
    "Pseudo-Planche": "PseudoPlanche",
    "Pseudo Planche": "PseudoPlanche",
}

# Pike and Hindu are rewarded but sit off the ladder.
VARIATION_MULT: Final[dict[str, float]] = {
    "Knee": 0.75,
    "Incline": 0.85,
    "Standard": 1.0,
    "Wide": 1.05,
    "HandRelease": 1.08,
    "Tempo": 1.10,
    "Diamond": 1.15,
    "Decline": 1.20,
    "Spiderman": 1.25,
    "Explosive": 1.28,
    "Pike": 1.30,
    "Archer": 1.35,
    "Hindu": 1.35,
    "PseudoPlanche": 1.50,
}

DIVISION_MULT: Final[dict[str, float]] = {
    "Rookie": 1.0,
    "Warrior": 1.25,
    "Elite": 1.5,
}

INTENSITY_MULT: Final[dict[str, float]] = {
    "easy": 0.9,
    "medium": 1.0,
    "hard": 1.1,
    "boss": 1.25,
}

# =============================================================================
# RIR INFERENCE
# =============================================================================

# (minimum actual - target gap, inferred RIR), evaluated top-down.
RIR_FROM_GAP: Final[tuple[tuple[int, float], ...]] = (
    (6, 4.0),
    (4, 3.0),
    (2, 2.0),
    (0, 1.0),
)
RIR_BELOW_TARGET: Final[float] = 0.0
RIR_MIN: Final[float] = 0.0
RIR_MAX: Final[float] = 10.0


# =============================================================================
# GOAL SHAPING
# =============================================================================

@dataclass(frozen=True)
class GoalShape:
    """Final rep and rest adjustment for one training goal."""

    rep_scale: float  # Multiplier applied to every set (then rounded)
    reps_min: int
    reps_max: int
    rest_delta: int  # Seconds added before clamping
    rest_min: int
    rest_max: int
    note: str


GOAL_SHAPES: Final[dict[str, GoalShape]] = {
    "Strength": GoalShape(
        rep_scale=0.85,
        reps_min=3,
        reps_max=20,
        rest_delta=15,
        rest_min=45,
        rest_max=240,
        note="Strength focus: fewer reps, more rest.",
    ),
    "Endurance": GoalShape(
        rep_scale=1.05,
        reps_min=5,
        reps_max=40,
        rest_delta=-5,
        rest_min=20,
        rest_max=180,
        note="Endurance focus: slightly higher reps, slightly lower rest.",
    ),
    "Hypertrophy": GoalShape(
        rep_scale=1.0,
        reps_min=6,
        reps_max=25,
        rest_delta=0,
        rest_min=45,
        rest_max=120,
        note="Hypertrophy focus: moderate reps & rest window.",
    ),
    # Mixed: no shaping
}


@dataclass(frozen=True)
class EngineTuning:
    """
    Tunable thresholds for one engine invocation.

    Never mutated; use dataclasses.replace() to derive a variant.
    """

    weekly_volume_step: float = WEEKLY_VOLUME_STEP
    max_weekly_increase: float = MAX_WEEKLY_INCREASE
    deload_factor: float = DELOAD_FACTOR
    promote_avg_rir: float = PROMOTE_AVG_RIR
    promote_completion_rate: float = PROMOTE_COMPLETION_RATE
    promote_readiness: float = PROMOTE_READINESS
    regress_fail_rate: float = REGRESS_FAIL_RATE
    regress_completion_rate: float = REGRESS_COMPLETION_RATE
    plateau_sessions: int = PLATEAU_SESSIONS
    plateau_avg_rir_max: float = PLATEAU_AVG_RIR_MAX
    readiness_default: float = READINESS_DEFAULT
    base_reward_per_rep: int = BASE_REWARD_PER_REP
    comparable_window: int = COMPARABLE_WINDOW
    safety_cap_fraction: float = SAFETY_CAP_FRACTION
    safety_cap_floor: int = SAFETY_CAP_FLOOR

    def __post_init__(self) -> None:
        """Validate tuning values."""
        if self.plateau_sessions < 2:
            raise ValueError("plateau_sessions must be at least 2")
        if self.comparable_window < 1:
            raise ValueError("comparable_window must be positive")
        if not 0 < self.deload_factor <= 1:
            raise ValueError("deload_factor must be in (0, 1]")
        if self.max_weekly_increase < 0 or self.weekly_volume_step < 0:
            raise ValueError("volume step values must be non-negative")
        if self.safety_cap_floor < 1:
            raise ValueError("safety_cap_floor must be at least 1")


DEFAULT_TUNING: Final[EngineTuning] = EngineTuning()
