"""Attribute-based score prediction.

Averages the user's display scores per genre, genre pair, director and actor,
then blends the averages that match a candidate. Each matched attribute is
weighted by how often the user has rated it and by how telling its kind is.
"""
from dataclasses import dataclass
from itertools import combinations
from typing import Dict, List, Mapping, Tuple
import logging

import numpy as np
import pandas as pd

from movieranker_ranking_engine.models import ContentFeatures

logger = logging.getLogger(__name__)

# Per-kind multipliers on top of sample-size confidence
SIGNAL_WEIGHTS = {
    'genre': 2.0,
    'combo': 3.0,
    'director': 2.5,
    'actor': 1.5,
}

# Attribute confidence saturates at this many rated items
FULL_CONFIDENCE_SAMPLES = 10.0
MAX_CONFIDENCE = 0.95
MIN_SCORE = 5.0
MAX_SCORE = 99.0
NEUTRAL_SCORE = 50.0
MAX_REASONS = 3


@dataclass(frozen=True)
class AttributePrediction:
    """Predicted display score with a confidence and the strongest reasons."""

    score: float
    confidence: float
    reasons: Tuple[str, ...] = ()

    def __repr__(self):
        return (
            f"<AttributePrediction(score={self.score:.1f}, "
            f"confidence={self.confidence:.2f}, reasons={list(self.reasons)})>"
        )


def attribute_keys(features: ContentFeatures) -> List[Tuple[str, str]]:
    """
    List the (kind, value) attributes of one item in a stable order.

    Genre pairs are keyed "A + B" with the two genres sorted.
    """
    genres = sorted(features.genres)
    keys = [('genre', genre) for genre in genres]
    keys.extend(('combo', f"{first} + {second}") for first, second in combinations(genres, 2))
    keys.extend(('director', director) for director in sorted(features.directors))
    keys.extend(('actor', actor) for actor in sorted(features.cast))
    return keys


def _reason(kind: str, value: str) -> str:
    labels = {'genre': 'Genre', 'combo': 'Genres', 'director': 'Director', 'actor': 'Actor'}
    return f"{labels[kind]}: {value}"


class AttributePredictionEngine:
    """Predict a display score from per-attribute averages of the user's scores."""

    def __init__(self):
        self.attribute_averages: Dict[Tuple[str, str], float] = {}
        self.attribute_confidence: Dict[Tuple[str, str], float] = {}
        self.global_average: float | None = None

    def train(
        self,
        scores: Mapping[str, int],
        features: Mapping[str, ContentFeatures]
    ) -> Dict[Tuple[str, str], float]:
        """
        Learn the average display score and confidence per attribute.

        Args:
            scores: Item id -> display score for rated items
            features: Item id -> content features; rated items without
                features still count towards the global average

        Returns:
            (kind, value) -> average score
        """
        self.attribute_averages = {}
        self.attribute_confidence = {}
        self.global_average = float(np.mean(list(scores.values()))) if scores else None

        rows = [
            {'kind': kind, 'value': value, 'score': float(score)}
            for item_id, score in scores.items()
            if item_id in features
            for kind, value in attribute_keys(features[item_id])
        ]
        if not rows:
            logger.info("No rated items with attributes, prediction engine has no signals")
            return {}

        grouped = pd.DataFrame(rows).groupby(['kind', 'value'])['score'].agg(['mean', 'count'])
        grouped['confidence'] = np.minimum(grouped['count'] / FULL_CONFIDENCE_SAMPLES, 1.0)

        self.attribute_averages = grouped['mean'].to_dict()
        self.attribute_confidence = grouped['confidence'].to_dict()

        logger.info(
            f"Trained attribute prediction engine on {len(scores)} scores, "
            f"{len(self.attribute_averages)} attributes"
        )
        return self.attribute_averages

    def predict(self, features: ContentFeatures) -> AttributePrediction:
        """
        Predict a display score for a candidate.

        Args:
            features: Candidate content features

        Returns:
            AttributePrediction with score clamped to [5, 99], confidence in
            [0, 0.95] and up to three reasons, strongest first
        """
        if self.global_average is None:
            return AttributePrediction(
                score=NEUTRAL_SCORE,
                confidence=0.1,
                reasons=("Rank items to start",)
            )

        signals = []
        for key in attribute_keys(features):
            if key not in self.attribute_averages:
                continue
            weight = self.attribute_confidence[key] * SIGNAL_WEIGHTS[key[0]]
            signals.append((self.attribute_averages[key], weight, _reason(*key)))

        total_weight = sum(weight for _, weight, _ in signals)
        if total_weight > 0:
            score = sum(value * weight for value, weight, _ in signals) / total_weight
            # Stable sort keeps genre, pair, director, actor order among equal weights
            strongest = sorted(signals, key=lambda signal: -signal[1])[:MAX_REASONS]
            reasons = tuple(reason for _, _, reason in strongest)
        else:
            score = self.global_average
            reasons = ("Based on your overall taste",)

        logger.debug(f"Attribute prediction from {len(signals)} signals: {score:.1f}")

        return AttributePrediction(
            score=float(np.clip(score, MIN_SCORE, MAX_SCORE)),
            confidence=min(total_weight / FULL_CONFIDENCE_SAMPLES, MAX_CONFIDENCE),
            reasons=reasons
        )

    def predict_many(self, candidates: Mapping[str, ContentFeatures]) -> Dict[str, AttributePrediction]:
        """Predict every candidate; item id -> prediction."""
        return {item_id: self.predict(item_features) for item_id, item_features in candidates.items()}
