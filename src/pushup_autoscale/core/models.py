"""
Data models for pushup-autoscale.

Inputs (UserState, PlanTemplate, SessionLog, SetLog) are built by the
surrounding product for every call; NextSession is the engine's output.
Variation names are plain strings; normalisation is handled in
core/variations.py rather than at the model level.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

Division = Literal["Rookie", "Warrior", "Elite"]
Goal = Literal["Endurance", "Strength", "Hypertrophy", "Mixed"]
Intensity = Literal["easy", "medium", "hard", "boss"]

DIVISIONS: tuple[str, ...] = ("Rookie", "Warrior", "Elite")
GOALS: tuple[str, ...] = ("Endurance", "Strength", "Hypertrophy", "Mixed")
INTENSITIES: tuple[str, ...] = ("easy", "medium", "hard", "boss")


class ProgressionStatus(str, Enum):
    """Verdict of the progression classifier."""

    PROMOTE = "PROMOTE"
    HOLD = "HOLD"
    REGRESS = "REGRESS"


def _validate_date(date_str: str) -> None:
    """Validate date string is ISO format YYYY-MM-DD."""
    import re

    if not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValueError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    from datetime import datetime

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValueError(f"Invalid date: {date_str}") from e


@dataclass(frozen=True)
class InjuryFlags:
    """Self-reported pain flags from the product's intake form."""

    wrist_pain: bool = False
    shoulder_pain: bool = False
    elbow_pain: bool = False
    other_pain: bool = False

    def any(self) -> bool:
        """Return True if any flag is raised."""
        return self.wrist_pain or self.shoulder_pain or self.elbow_pain or self.other_pain


@dataclass(frozen=True)
class UserState:
    """
    Snapshot of the trainee at the time of the request.

    readiness is optional (0..1); the engine clamps it and falls back to
    the tuned default when absent.
    """

    user_id: str
    division: Division
    goal: Goal
    baseline_max: int
    readiness: float | None = None
    injury_flags: InjuryFlags | None = None
    level: int | None = None

    def __post_init__(self) -> None:
        """Validate user data."""
        if self.baseline_max <= 0:
            raise ValueError("baseline_max must be positive")
        if self.division not in DIVISIONS:
            raise ValueError(f"Invalid division: {self.division}")
        if self.goal not in GOALS:
            raise ValueError(f"Invalid goal: {self.goal}")


@dataclass(frozen=True)
class PlanTemplate:
    """
    Static prescription for today, before adaptation.

    Uniform target reps across all sets.  The engine never mutates it.
    """

    template_id: str
    day_label: str
    intensity: Intensity
    variation: str
    sets: int
    target_reps: int
    rest_seconds: int
    tempo: str | None = None
    allow_variation_swap: bool = True

    def __post_init__(self) -> None:
        """Validate template data."""
        if self.intensity not in INTENSITIES:
            raise ValueError(f"Invalid intensity: {self.intensity}")
        if self.sets < 0:
            raise ValueError("sets must be non-negative")
        if self.target_reps < 0:
            raise ValueError("target_reps must be non-negative")
        if self.rest_seconds < 0:
            raise ValueError("rest_seconds must be non-negative")

    @property
    def total_reps(self) -> int:
        """Planned reps across all sets."""
        return self.sets * self.target_reps


@dataclass(frozen=True)
class SetLog:
    """
    A single completed set.

    rir is the athlete's reps-in-reserve estimate (0-10, higher means more
    left in the tank).  When absent it is inferred from actual vs target.
    """

    target_reps: int
    actual_reps: int
    rir: float | None = None
    failed: bool = False

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.target_reps < 0:
            raise ValueError("target_reps must be non-negative")
        if self.actual_reps < 0:
            raise ValueError("actual_reps must be non-negative")

    @property
    def is_failed(self) -> bool:
        """Failed flag set, or the target was missed."""
        return self.failed or self.actual_reps < self.target_reps


@dataclass(frozen=True)
class SessionLog:
    """
    A completed training session.

    template_id links the session to the template it was prescribed from;
    sessions without one only count as comparable for id-less templates.
    """

    date: str  # ISO format: YYYY-MM-DD
    session_id: str
    variation: str
    sets: tuple[SetLog, ...] = ()
    template_id: str | None = None
    rest_seconds: int | None = None
    time_seconds: int | None = None
    pain_reported: bool = False
    notes: str | None = None

    def __post_init__(self) -> None:
        """Validate session data."""
        _validate_date(self.date)
        # Accept any sequence but store a tuple so the log stays hashable.
        object.__setattr__(self, "sets", tuple(self.sets))

    @property
    def total_actual_reps(self) -> int:
        """Sum of actual reps across all sets."""
        return sum(s.actual_reps for s in self.sets)


@dataclass(frozen=True)
class PerformanceSummary:
    """Scalar signals reduced from comparable history."""

    avg_rir: float | None
    completion_rate: float
    fail_rate: float
    total_target: int
    total_actual: int


@dataclass(frozen=True)
class RewardEstimate:
    """Estimated reward for the prescribed session plus its breakdown."""

    base_reward_per_rep: int
    estimated_reward: int
    multipliers: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class DecisionDebug:
    """Evidence behind the prescription, exposed for UIs and tests."""

    status: ProgressionStatus
    plateau: bool
    avg_rir: float | None
    completion_rate: float
    fail_rate: float
    readiness: float


@dataclass(frozen=True)
class NextSession:
    """
    The computed prescription for the next session.

    len(target_reps) always equals sets.
    """

    template_id: str
    variation: str
    sets: int
    target_reps: tuple[int, ...]
    rest_seconds: int
    tempo: str | None
    coaching_notes: tuple[str, ...]
    reward: RewardEstimate
    debug: DecisionDebug

    @property
    def total_reps(self) -> int:
        """Sum of target reps for all sets."""
        return sum(self.target_reps)
