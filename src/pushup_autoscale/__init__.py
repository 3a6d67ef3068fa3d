"""
pushup-autoscale: adaptive next-session programming for push-up training.

    from pushup_autoscale import recommend_next_session
    next_session = recommend_next_session(user, template, recent_history)
"""

from .core.config import DEFAULT_TUNING, EngineTuning
from .core.models import (
    InjuryFlags,
    NextSession,
    PlanTemplate,
    ProgressionStatus,
    SessionLog,
    SetLog,
    UserState,
)
from .core.planner import recommend_next_session

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_TUNING",
    "EngineTuning",
    "InjuryFlags",
    "NextSession",
    "PlanTemplate",
    "ProgressionStatus",
    "SessionLog",
    "SetLog",
    "UserState",
    "recommend_next_session",
]
