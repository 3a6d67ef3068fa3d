"""
Reward estimation for a prescribed session.

reward = round(total reps * base per rep * division * variation
               * intensity * streak)
"""

from typing import Sequence

from .config import (
    DEFAULT_TUNING,
    DIVISION_MULT,
    INTENSITY_MULT,
    STREAK_MULTIPLIER,
    VARIATION_MULT,
    EngineTuning,
)
from .metrics import round_half_up
from .models import RewardEstimate
from .variations import normalize_variation_name


def get_multipliers(division: str, variation: str, intensity: str) -> dict[str, float]:
    """
    Look up reward multipliers.

    Unknown variations score 1.0.  The streak multiplier is fixed here;
    streak bonuses are applied by the product's economy layer.

    Args:
        division: Rookie / Warrior / Elite
        variation: Resolved variation name (aliases allowed)
        intensity: easy / medium / hard / boss

    Returns:
        Dict with keys division, variation, intensity, streak
    """
    return {
        "division": DIVISION_MULT[division],
        "variation": VARIATION_MULT.get(normalize_variation_name(variation), 1.0),
        "intensity": INTENSITY_MULT[intensity],
        "streak": STREAK_MULTIPLIER,
    }


def estimate_reward(
    target_reps: Sequence[int],
    division: str,
    variation: str,
    intensity: str,
    tuning: EngineTuning = DEFAULT_TUNING,
) -> RewardEstimate:
    """
    Estimate the reward for completing the prescription.

    Args:
        target_reps: Final per-set targets
        division: User division
        variation: Resolved variation
        intensity: Template intensity
        tuning: Supplies base_reward_per_rep

    Returns:
        RewardEstimate with the multiplier breakdown
    """
    multipliers = get_multipliers(division, variation, intensity)
    total = sum(target_reps) * tuning.base_reward_per_rep
    for factor in multipliers.values():
        total *= factor

    return RewardEstimate(
        base_reward_per_rep=tuning.base_reward_per_rep,
        estimated_reward=round_half_up(total),
        multipliers=multipliers,
    )
