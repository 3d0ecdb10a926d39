"""Genre-average taste model."""
import pandas as pd
from typing import Dict, Mapping
import logging

from movieranker_ranking_engine.models import ContentFeatures

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50.0


class GenreTasteModel:
    """Predict a score as the mean of the user's average score per matching genre."""

    def __init__(self):
        self.genre_weights: Dict[str, float] = {}

    def train(
        self,
        scores: Mapping[str, int],
        features: Mapping[str, ContentFeatures]
    ) -> Dict[str, float]:
        """
        Learn the average display score per genre.

        Args:
            scores: Item id -> display score for rated items
            features: Item id -> content features

        Returns:
            Genre -> average score
        """
        rows = [
            {'item_id': item_id, 'score': float(score), 'genres': sorted(features[item_id].genres)}
            for item_id, score in scores.items()
            if item_id in features and features[item_id].genres
        ]
        if not rows:
            logger.info("No rated items with genres, taste model is empty")
            self.genre_weights = {}
            return {}

        exploded = pd.DataFrame(rows).explode('genres')
        self.genre_weights = exploded.groupby('genres')['score'].mean().to_dict()

        logger.info(f"Trained taste model on {len(rows)} items, {len(self.genre_weights)} genres")
        return self.genre_weights

    def predict(self, features: ContentFeatures) -> float:
        """
        Predict a display score from genres alone.

        Args:
            features: Candidate content features

        Returns:
            Mean of known genre averages, or 50.0 when nothing matches
        """
        matches = [self.genre_weights[g] for g in features.genres if g in self.genre_weights]
        if not matches:
            return NEUTRAL_SCORE
        return sum(matches) / len(matches)
