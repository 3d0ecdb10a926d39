"""Re-spread display scores into a natural tiered distribution."""
import numpy as np
import pandas as pd
from typing import Dict, Mapping
import logging

logger = logging.getLogger(__name__)

# Share of the catalog in the loved and liked tiers; the rest is meh
LOVED_SHARE = 0.20
LIKED_SHARE = 0.40
SINGLE_ITEM_SCORE = 85


def _tier_scores(count: int, top: float, span: float, exponent: float) -> np.ndarray:
    """Scores for one tier, from its top down by span along a power curve."""
    positions = np.arange(count) / max(1, count - 1)
    return top - np.power(positions, exponent) * span


def redistribute_scores(scores: Mapping[str, int]) -> Dict[str, int]:
    """
    Recalculate display scores while preserving their relative order.

    The top 20% land in a "loved" tier (99 down to 85, slower curve at the
    top), the next 40% in a "liked" tier (84 down to 55, linear) and the rest
    in a "meh" tier (54 down to 1, steeper at the bottom).

    Args:
        scores: Item id -> current display score

    Returns:
        Item id -> redistributed score in [1, 99]
    """
    if not scores:
        return {}

    # Stable sort keeps the caller's order among equal scores
    ordered = sorted(scores, key=lambda item_id: -scores[item_id])
    count = len(ordered)

    if count == 1:
        return {ordered[0]: SINGLE_ITEM_SCORE}

    loved_count = max(1, int(count * LOVED_SHARE))
    liked_count = max(1, int(count * LIKED_SHARE))
    meh_count = max(0, count - loved_count - liked_count)

    curve = np.concatenate([
        _tier_scores(loved_count, 99.0, 14.0, 0.7),
        _tier_scores(liked_count, 84.0, 29.0, 1.0),
        _tier_scores(meh_count, 54.0, 53.0, 1.5),
    ])[:count]

    result = {
        item_id: int(np.clip(int(value), 1, 99))
        for item_id, value in zip(ordered, curve)
    }

    logger.info(
        f"Redistributed {count} scores: range {min(scores.values())}-{max(scores.values())} "
        f"-> {min(result.values())}-{max(result.values())}"
    )
    return result


def summarize_distribution(scores: Mapping[str, int]) -> Dict[str, int]:
    """
    Count items per display tier.

    Args:
        scores: Item id -> display score

    Returns:
        Dict with loved (85-99), liked (55-84) and meh (below 55) counts
    """
    series = pd.Series(list(scores.values()), dtype=float)
    tiers = pd.cut(
        series,
        bins=[-np.inf, 55, 85, np.inf],
        labels=['meh', 'liked', 'loved'],
        right=False
    )
    counts = tiers.value_counts()

    return {
        'loved': int(counts.get('loved', 0)),
        'liked': int(counts.get('liked', 0)),
        'meh': int(counts.get('meh', 0))
    }
