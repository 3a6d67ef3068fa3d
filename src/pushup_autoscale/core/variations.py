"""
Exercise-variation difficulty ladder.

The ladder is a fixed, ordered tuple (easiest first); moving a variation
up or down is index arithmetic clamped to the ladder's ends.
"""

from .config import VARIATION_ALIASES, VARIATION_LADDER


def normalize_variation_name(variation: str) -> str:
    """Map spelling aliases ("Hand-Release", "Pseudo Planche") to ladder names."""
    return VARIATION_ALIASES.get(variation, variation)


def ladder_index(variation: str) -> int | None:
    """Position of the variation on the ladder, or None when it is off-ladder."""
    name = normalize_variation_name(variation)
    if name not in VARIATION_LADDER:
        return None
    return VARIATION_LADDER.index(name)


def easier_variation(variation: str) -> str:
    """
    One step down the ladder.

    The easiest entry stays put; an off-ladder variation drops to the
    easiest entry.
    """
    idx = ladder_index(variation)
    if idx is None or idx == 0:
        return VARIATION_LADDER[0]
    return VARIATION_LADDER[idx - 1]


def harder_variation(variation: str) -> str:
    """
    One step up the ladder.

    The hardest entry stays put; an off-ladder variation is returned
    unchanged (normalised).
    """
    idx = ladder_index(variation)
    if idx is None:
        return normalize_variation_name(variation)
    return VARIATION_LADDER[min(idx + 1, len(VARIATION_LADDER) - 1)]
