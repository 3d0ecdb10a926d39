"""Suggest the next pair of items to compare."""
import numpy as np
from typing import Dict, Iterable, List, Mapping, Optional, Tuple
import logging

from movieranker_ranking_engine.models import PairHistory, pair_key

logger = logging.getLogger(__name__)

DEFAULT_STRENGTH = 1.0
SELF_PAIR_RETRIES = 10


class PairSelector:
    """
    Pick an informative, not over-asked pair by randomized search.

    Pairs of near-equal strength are closest to a coin flip under the BTL
    model and so carry the most information; the freshness term keeps the
    same pair from being asked again and again.
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        closeness_weight: float = 0.70,
        freshness_weight: float = 0.30
    ):
        """
        Initialize pair selector.

        Args:
            rng: Random source; pass np.random.default_rng(seed) for
                 reproducible suggestions
            closeness_weight: Weight for strength closeness
            freshness_weight: Weight for how rarely the pair was shown
        """
        self.rng = rng if rng is not None else np.random.default_rng()
        self.closeness_weight = closeness_weight
        self.freshness_weight = freshness_weight

    def build_pair_counts(self, history: Iterable[PairHistory]) -> Dict[Tuple[str, str], int]:
        """
        Sum prior comparison counts per unordered pair.

        Args:
            history: Pair presentation history

        Returns:
            Dict of unordered pair key -> total count
        """
        counts: Dict[Tuple[str, str], int] = {}
        for entry in history:
            counts[entry.key] = counts.get(entry.key, 0) + entry.comparison_count
        return counts

    def score_pair(
        self,
        item_a: str,
        item_b: str,
        current_strengths: Mapping[str, float],
        pair_counts: Mapping[Tuple[str, str], int]
    ) -> float:
        """
        Composite score for presenting a pair; higher is better.

        Args:
            item_a: First item id
            item_b: Second item id
            current_strengths: Item id -> fitted strength (missing = 1.0)
            pair_counts: Unordered pair key -> prior comparison count

        Returns:
            Weighted blend of closeness and freshness
        """
        strength_a = current_strengths.get(item_a, DEFAULT_STRENGTH)
        strength_b = current_strengths.get(item_b, DEFAULT_STRENGTH)
        closeness = 1.0 / (1.0 + abs(strength_a - strength_b))
        freshness = 1.0 / (1.0 + pair_counts.get(pair_key(item_a, item_b), 0))
        return self.closeness_weight * closeness + self.freshness_weight * freshness

    def _draw(self, pool: List[str]) -> str:
        return pool[int(self.rng.integers(len(pool)))]

    def next_pair(
        self,
        item_ids: Iterable[str],
        current_strengths: Mapping[str, float],
        history: Iterable[PairHistory] = (),
        blocklist: Iterable[str] = (),
        max_tries: int = 200
    ) -> Optional[Tuple[str, str]]:
        """
        Suggest the next pair to present.

        Args:
            item_ids: All candidate ids
            current_strengths: Item id -> fitted strength
            history: Prior pair presentations
            blocklist: Ids to avoid for now (just shown, etc.)
            max_tries: Sampling attempts before settling on the best seen

        Returns:
            (item_a, item_b) tuple, or None if fewer than two ids are eligible
        """
        blocked = set(blocklist)
        # dict.fromkeys de-duplicates while keeping input order
        pool = [item_id for item_id in dict.fromkeys(item_ids) if item_id not in blocked]
        if len(pool) < 2:
            logger.debug(f"Only {len(pool)} eligible items, no pair to suggest")
            return None

        pair_counts = self.build_pair_counts(history)

        best: Optional[Tuple[str, str]] = None
        best_score = -np.inf

        tries = min(max_tries, len(pool) * 10)
        for _ in range(tries):
            item_a = self._draw(pool)
            item_b = self._draw(pool)
            retries = 0
            while item_b == item_a and retries < SELF_PAIR_RETRIES:
                item_b = self._draw(pool)
                retries += 1
            if item_a == item_b:
                continue

            composite = self.score_pair(item_a, item_b, current_strengths, pair_counts)
            # Strictly greater: first-seen wins ties
            if composite > best_score:
                best_score = composite
                best = (item_a, item_b)

        if best is not None:
            logger.debug(f"Suggested pair {best} with composite {best_score:.3f} after {tries} samples")
        return best
