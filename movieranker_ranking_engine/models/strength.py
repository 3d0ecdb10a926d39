"""Fitted strengths and display scores."""
import math
from dataclasses import dataclass
from typing import Iterable, List


@dataclass(frozen=True)
class Strength:
    """Fitted latent strength for one item.

    ``scaled_0_to_100`` is a display-only min-max rescaling of ``strength``
    over the fitted set; rank or rate with ``strength``.
    """

    item_id: str
    strength: float
    scaled_0_to_100: float

    def __repr__(self):
        return (
            f"<Strength(item_id={self.item_id}, strength={self.strength:.4f}, "
            f"scaled={self.scaled_0_to_100:.1f})>"
        )


@dataclass(frozen=True)
class ScoredItem:
    """An item with its integer 0-100 display score."""

    item_id: str
    score: int


def to_sorted_scores(strengths: Iterable[Strength]) -> List[ScoredItem]:
    """
    Convert fitter output into a descending display-score list.

    Args:
        strengths: Fitted strengths (any order)

    Returns:
        ScoredItems sorted by score descending, stable on input order
    """
    scored = [
        ScoredItem(item_id=s.item_id, score=int(math.floor(s.scaled_0_to_100 + 0.5)))
        for s in strengths
    ]
    return sorted(scored, key=lambda item: -item.score)
