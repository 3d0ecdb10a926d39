"""Fit Bradley-Terry-Luce strengths from pairwise comparisons.

Each item i has a positive latent strength s_i and the odds of i beating j
are s_i / s_j. Strengths are estimated with the MM (minorize-maximize)
update

    s_i <- W_i / sum_j n_ij / (s_i + s_j)

where W_i is the total weighted wins of i and n_ij the weighted number of
matches between i and j. Updates are synchronous: every item in an
iteration reads the previous iteration's strengths.

Reference:
    Hunter, D. R. (2004). MM algorithms for generalized Bradley-Terry models.
    The Annals of Statistics, 32(1), 384-406.
"""
import numpy as np
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
import logging

from movieranker_ranking_engine.config import (
    get_fit_max_iterations,
    get_fit_tolerance,
    get_normalize_geometric_mean,
    get_prior_strength,
)
from movieranker_ranking_engine.models import Comparison, Strength

logger = logging.getLogger(__name__)

# Floor applied after each update so later divisions never see zero
MIN_STRENGTH = 1e-12

# Below this spread all strengths are treated as equal when scaling
EQUAL_SPREAD_EPSILON = 1e-9


@dataclass(frozen=True)
class FitConfig:
    """Iteration and smoothing settings for StrengthFitter."""

    max_iterations: int = 200
    tolerance: float = 1e-6
    prior_strength: float = 1.0
    normalize_geometric_mean: bool = True

    def __post_init__(self):
        if self.max_iterations < 0:
            raise ValueError(f"max_iterations must be >= 0, got {self.max_iterations}")
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {self.tolerance}")
        if self.prior_strength < 0:
            raise ValueError(f"prior_strength must be >= 0, got {self.prior_strength}")

    @classmethod
    def from_config(cls) -> "FitConfig":
        """Build a FitConfig from environment / local.settings.json."""
        return cls(
            max_iterations=get_fit_max_iterations(),
            tolerance=get_fit_tolerance(),
            prior_strength=get_prior_strength(),
            normalize_geometric_mean=get_normalize_geometric_mean(),
        )


def min_max_scale(values: np.ndarray) -> np.ndarray:
    """
    Min-max scale values onto [0, 100].

    Args:
        values: 1-D array of strengths

    Returns:
        Scaled array; every entry is 50.0 when the spread is negligible
    """
    if values.size == 0:
        return values.astype(float)

    low = float(values.min())
    spread = float(values.max()) - low
    if spread < EQUAL_SPREAD_EPSILON:
        return np.full(values.shape, 50.0)
    return 100.0 * (values - low) / spread


class StrengthFitter:
    """Fit BTL strengths for a set of items.

    The fitter holds only its configuration; every call to ``fit`` builds
    its own matrices, so one instance can serve many independent users.
    """

    def __init__(self, config: Optional[FitConfig] = None):
        """
        Initialize strength fitter.

        Args:
            config: Iteration and prior settings (defaults to FitConfig())
        """
        self.config = config or FitConfig()

    def build_index(self, items: Iterable[str]) -> Dict[str, int]:
        """
        Map item ids to matrix positions.

        Args:
            items: Item ids in caller order

        Returns:
            Dict of id -> index, first occurrence wins for duplicates
        """
        index: Dict[str, int] = {}
        for item_id in items:
            if item_id in index:
                logger.warning(f"Duplicate item id {item_id!r} ignored")
                continue
            index[item_id] = len(index)
        return index

    def build_matrices(
        self,
        index: Dict[str, int],
        comparisons: Iterable[Comparison]
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Build weighted win and match matrices, including the prior.

        Args:
            index: Item id -> matrix position
            comparisons: Pairwise outcomes

        Returns:
            (wins, matches) tuple where wins[i, j] is the weighted wins of
            i over j and matches[i, j] the symmetric weighted match count
        """
        n = len(index)
        wins = np.zeros((n, n))
        matches = np.zeros((n, n))

        skipped = 0
        for comparison in comparisons:
            wi = index.get(comparison.winner_id)
            li = index.get(comparison.loser_id)
            if wi is None or li is None or wi == li:
                skipped += 1
                continue

            weight = max(0.0, comparison.weight)
            if comparison.is_tie:
                wins[wi, li] += 0.5 * weight
                wins[li, wi] += 0.5 * weight
            else:
                wins[wi, li] += weight
            matches[wi, li] += weight
            matches[li, wi] += weight

        if skipped:
            logger.debug(f"Skipped {skipped} comparisons with unknown or identical ids")

        # Virtual ties between every pair keep the graph connected
        prior = self.config.prior_strength
        if prior > 0 and n > 1:
            off_diagonal = ~np.eye(n, dtype=bool)
            wins[off_diagonal] += 0.5 * prior
            matches[off_diagonal] += prior

        return wins, matches

    def _mm_step(
        self,
        strengths: np.ndarray,
        wins: np.ndarray,
        matches: np.ndarray
    ) -> np.ndarray:
        """One synchronous MM update."""
        win_totals = wins.sum(axis=1)
        pair_sums = strengths[:, None] + strengths[None, :]
        ratios = np.divide(
            matches,
            pair_sums,
            out=np.zeros_like(matches),
            where=matches > 0
        )
        denominators = ratios.sum(axis=1)

        has_matches = denominators > 0
        safe_denominators = np.where(has_matches, denominators, 1.0)
        updated = np.maximum(win_totals / safe_denominators, MIN_STRENGTH)

        # Items without any match mass keep their previous strength
        return np.where(has_matches, updated, strengths)

    def _normalize(self, strengths: np.ndarray) -> np.ndarray:
        """Rescale so the geometric mean of the strengths is exactly 1."""
        return strengths * np.exp(-np.mean(np.log(strengths)))

    def fit(
        self,
        items: Sequence[str],
        comparisons: Iterable[Comparison]
    ) -> List[Strength]:
        """
        Fit strengths for items from pairwise comparisons.

        Args:
            items: Universe of item ids to score
            comparisons: Pairwise outcomes; ids not in items are ignored

        Returns:
            One Strength per item, sorted by strength descending
        """
        index = self.build_index(items)
        ids = list(index)
        n = len(ids)
        if n == 0:
            return []

        wins, matches = self.build_matrices(index, comparisons)

        strengths = np.ones(n)
        iterations = 0
        delta = np.inf

        while iterations < self.config.max_iterations and delta > self.config.tolerance:
            updated = self._mm_step(strengths, wins, matches)
            if self.config.normalize_geometric_mean:
                updated = self._normalize(updated)

            delta = float(np.max(np.abs(updated - strengths)))
            strengths = updated
            iterations += 1

        if iterations and delta > self.config.tolerance:
            logger.warning(
                f"Strength fit stopped at max_iterations={self.config.max_iterations} "
                f"with delta={delta:.2e}"
            )
        logger.info(f"Fitted {n} items in {iterations} iterations")

        scaled = min_max_scale(strengths)
        results = [
            Strength(item_id=ids[i], strength=float(strengths[i]), scaled_0_to_100=float(scaled[i]))
            for i in range(n)
        ]
        # sorted() is stable, so equal strengths keep input order
        return sorted(results, key=lambda s: -s.strength)


def fit_strengths(
    items: Sequence[str],
    comparisons: Iterable[Comparison],
    config: Optional[FitConfig] = None
) -> List[Strength]:
    """Fit strengths with a one-off StrengthFitter."""
    return StrengthFitter(config).fit(items, comparisons)
