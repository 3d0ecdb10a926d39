"""Pairwise ranking and score prediction for a personal media catalog."""

from movieranker_ranking_engine.ml import FitConfig, StrengthFitter, fit_strengths
from movieranker_ranking_engine.models import (
    Comparison,
    ContentFeatures,
    PairHistory,
    ScoredItem,
    Strength,
    to_sorted_scores,
)
from movieranker_ranking_engine.services import (
    AttributePrediction,
    AttributePredictionEngine,
    Judgment,
    PairSelector,
    PredictionBlender,
    RankInserter,
    RankInsertionSession,
    Sentiment,
)

__all__ = [
    "AttributePrediction",
    "AttributePredictionEngine",
    "Comparison",
    "ContentFeatures",
    "FitConfig",
    "Judgment",
    "PairHistory",
    "PairSelector",
    "PredictionBlender",
    "RankInserter",
    "RankInsertionSession",
    "ScoredItem",
    "Sentiment",
    "Strength",
    "StrengthFitter",
    "fit_strengths",
    "to_sorted_scores",
]
