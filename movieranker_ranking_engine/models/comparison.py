"""Pairwise outcomes and pair presentation history."""
from dataclasses import dataclass
from typing import Tuple


def pair_key(item_a: str, item_b: str) -> Tuple[str, str]:
    """Order-independent key for an unordered pair of ids."""
    return (item_a, item_b) if item_a <= item_b else (item_b, item_a)


@dataclass(frozen=True)
class Comparison:
    """One pairwise outcome.

    Weight encodes intensity (1.0 = slight preference, 2.0 = strong).
    A tie splits the weight evenly between both sides, so the winner/loser
    order does not matter when ``is_tie`` is set.
    """

    winner_id: str
    loser_id: str
    weight: float = 1.0
    is_tie: bool = False

    def __post_init__(self):
        # Negative weights are clamped, not rejected
        object.__setattr__(self, "weight", max(0.0, float(self.weight)))

    def __repr__(self):
        verb = "ties" if self.is_tie else "beats"
        return f"<Comparison({self.winner_id} {verb} {self.loser_id}, weight={self.weight:.2f})>"


@dataclass(frozen=True)
class PairHistory:
    """How many times an unordered pair has already been presented."""

    item_a: str
    item_b: str
    comparison_count: int = 0

    @property
    def key(self) -> Tuple[str, str]:
        return pair_key(self.item_a, self.item_b)
