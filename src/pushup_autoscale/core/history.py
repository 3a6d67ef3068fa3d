"""History-window helpers used by callers to prepare engine input."""

from typing import Sequence

from .config import RECENT_HISTORY_COUNT
from .models import SessionLog


def recent_session_logs(
    sessions: Sequence[SessionLog],
    count: int = RECENT_HISTORY_COUNT,
) -> list[SessionLog]:
    """
    Last `count` sessions that carry set data, in original order.

    Sessions logged without per-set detail tell the engine nothing and
    are skipped.
    """
    with_sets = [s for s in sessions if s.sets]
    if count <= 0:
        return []
    return with_sets[-count:]


def template_history(sessions: Sequence[SessionLog], template_id: str) -> list[SessionLog]:
    """Sessions prescribed from the given template that carry set data."""
    return [s for s in sessions if s.template_id == template_id and s.sets]
