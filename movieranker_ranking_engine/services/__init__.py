"""Service classes"""

from .attribute_predictor import AttributePrediction, AttributePredictionEngine
from .pair_selector import PairSelector
from .prediction_blender import PredictionBlender
from .rank_inserter import (
    InvalidTransitionError,
    Judgment,
    RankInserter,
    RankInsertionSession,
    SessionStage,
    Sentiment,
)
from .taste_model import GenreTasteModel

__all__ = [
    "AttributePrediction",
    "AttributePredictionEngine",
    "GenreTasteModel",
    "InvalidTransitionError",
    "Judgment",
    "PairSelector",
    "PredictionBlender",
    "RankInserter",
    "RankInsertionSession",
    "SessionStage",
    "Sentiment",
]
