"""Lightweight Elo updates tuned for 0-100 display scores.

Useful for nudging two display scores right after a single comparison,
before the next full strength refit.
"""
import math
from typing import Dict, Mapping, Tuple
import logging

from movieranker_ranking_engine.models import Comparison

logger = logging.getLogger(__name__)


class EloRater:
    """Map display scores to an internal ~1000-2000 Elo scale and update them."""

    def __init__(self, k_factor: float = 24.0):
        """
        Initialize Elo rater.

        Args:
            k_factor: How fast ratings move; 16-40 is reasonable
        """
        self.k_factor = k_factor

    def to_internal(self, display: int) -> float:
        """Map display 0..100 linearly onto 1000..2000."""
        clamped = max(0, min(100, display))
        return 1000.0 + clamped * 10.0

    def to_display(self, rating: float) -> int:
        """Map an internal rating back onto display 0..100."""
        value = (rating - 1000.0) / 10.0
        # Halves round up
        return int(math.floor(max(0.0, min(100.0, value)) + 0.5))

    def expected_score(self, rating: float, opponent: float) -> float:
        return 1.0 / (1.0 + 10.0 ** ((opponent - rating) / 400.0))

    def update(
        self,
        winner: float,
        loser: float,
        is_tie: bool = False
    ) -> Tuple[float, float]:
        """
        Update internal ratings after one outcome.

        Args:
            winner: Winner's internal rating
            loser: Loser's internal rating
            is_tie: Score the outcome 0.5 / 0.5 instead of 1 / 0

        Returns:
            (new_winner, new_loser) internal ratings
        """
        expected_winner = self.expected_score(winner, loser)
        expected_loser = 1.0 - expected_winner
        actual_winner = 0.5 if is_tie else 1.0

        new_winner = winner + self.k_factor * (actual_winner - expected_winner)
        new_loser = loser + self.k_factor * ((1.0 - actual_winner) - expected_loser)
        return new_winner, new_loser

    def apply_comparison(
        self,
        scores: Mapping[str, int],
        comparison: Comparison
    ) -> Dict[str, int]:
        """
        Return a copy of display scores adjusted by one comparison.

        Items missing from scores are left out of the update. The
        comparison weight scales the K factor.

        Args:
            scores: Item id -> display score
            comparison: Outcome to apply

        Returns:
            New item id -> display score mapping
        """
        updated = dict(scores)
        if comparison.winner_id not in scores or comparison.loser_id not in scores:
            logger.warning(f"Skipping Elo update for unscored pair in {comparison!r}")
            return updated
        if comparison.winner_id == comparison.loser_id:
            return updated

        rater = EloRater(self.k_factor * comparison.weight)
        new_winner, new_loser = rater.update(
            self.to_internal(scores[comparison.winner_id]),
            self.to_internal(scores[comparison.loser_id]),
            is_tie=comparison.is_tie
        )
        updated[comparison.winner_id] = self.to_display(new_winner)
        updated[comparison.loser_id] = self.to_display(new_loser)
        return updated
