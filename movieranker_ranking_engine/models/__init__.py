"""Engine data model"""

from movieranker_ranking_engine.models.comparison import Comparison, PairHistory, pair_key
from movieranker_ranking_engine.models.content_features import ContentFeatures
from movieranker_ranking_engine.models.strength import ScoredItem, Strength, to_sorted_scores

__all__ = [
    "Comparison",
    "ContentFeatures",
    "PairHistory",
    "ScoredItem",
    "Strength",
    "pair_key",
    "to_sorted_scores",
]
