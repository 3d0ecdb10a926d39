"""Fitting, similarity and score-shaping components"""

from .elo import EloRater
from .feature_extractor import ContentFeatureExtractor
from .score_distribution import redistribute_scores, summarize_distribution
from .similarity_computer import SimilarityComputer
from .strength_fitter import FitConfig, StrengthFitter, fit_strengths

__all__ = [
    "ContentFeatureExtractor",
    "EloRater",
    "FitConfig",
    "SimilarityComputer",
    "StrengthFitter",
    "fit_strengths",
    "redistribute_scores",
    "summarize_distribution",
]
