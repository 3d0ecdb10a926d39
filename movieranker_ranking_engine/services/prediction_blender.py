"""Predict scores for uncompared items by blending strength and content similarity."""
import numpy as np
from typing import Dict, Iterable, List, Mapping, Optional, Sequence
import logging

from movieranker_ranking_engine.config import get_blend_alpha
from movieranker_ranking_engine.ml.feature_extractor import ContentFeatureExtractor
from movieranker_ranking_engine.ml.similarity_computer import SimilarityComputer
from movieranker_ranking_engine.models import ContentFeatures

logger = logging.getLogger(__name__)

DEFAULT_STRENGTH = 1.0


# noinspection PyMethodMayBeStatic
class PredictionBlender:
    """
    Blend a candidate's fitted strength with its similarity to liked anchors.

    score = alpha * btl_scaled + (1 - alpha) * 100 * avg_similarity
    """

    def __init__(
        self,
        alpha: Optional[float] = None,
        neutral_similarity: float = 0.5,
        similarity_computer: Optional[SimilarityComputer] = None,
        feature_extractor: Optional[ContentFeatureExtractor] = None
    ):
        """
        Initialize prediction blender.

        Args:
            alpha: Weight of the strength term (None = from config, default 0.7)
            neutral_similarity: Average similarity used when no anchor has features
            similarity_computer: Computes weighted Jaccard similarity
            feature_extractor: Encodes content features
        """
        self.alpha = self._check_alpha(get_blend_alpha() if alpha is None else alpha)
        self.neutral_similarity = neutral_similarity
        self.similarity_computer = similarity_computer or SimilarityComputer()
        self.feature_extractor = feature_extractor or ContentFeatureExtractor()

    def _check_alpha(self, alpha: float) -> float:
        if not 0.0 <= alpha <= 1.0:
            raise ValueError(f"alpha must be in [0, 1], got {alpha}")
        return alpha

    def scale_strength(self, candidate_id: str, strengths: Mapping[str, float]) -> float:
        """
        Min-max scale a candidate's strength against all known strengths.

        Args:
            candidate_id: Item to scale
            strengths: Item id -> fitted strength

        Returns:
            Value in [0, 100]; 50.0 when no strengths are known or all are equal
        """
        strength = strengths.get(candidate_id, DEFAULT_STRENGTH)
        if not strengths:
            return 50.0

        values = np.fromiter(strengths.values(), dtype=float)
        low, high = float(values.min()), float(values.max())
        if high <= low:
            return 50.0

        scaled = 100.0 * (strength - low) / (high - low)
        return float(np.clip(scaled, 0.0, 100.0))

    def compute_anchor_similarities(
        self,
        candidates: List[ContentFeatures],
        anchors: List[ContentFeatures]
    ) -> np.ndarray:
        """
        Weighted Jaccard similarity of each candidate to each anchor.

        Args:
            candidates: Candidate features
            anchors: Anchor features

        Returns:
            Similarity matrix (n_candidates x n_anchors)
        """
        features = self.feature_extractor.extract_all_features(candidates + anchors)
        split = len(candidates)
        left = {facet: matrix[:split] for facet, matrix in features.items()}
        right = {facet: matrix[split:] for facet, matrix in features.items()}

        similarities = self.similarity_computer.compute_all_similarities(left, right)
        return similarities['hybrid_similarity']

    def average_similarity(
        self,
        candidate: ContentFeatures,
        anchors: Sequence[ContentFeatures]
    ) -> float:
        """
        Average similarity of a candidate to the anchors that have features.

        Args:
            candidate: Candidate features
            anchors: Features of liked anchors

        Returns:
            Average similarity in [0, 1], or the neutral value without anchors
        """
        if not anchors:
            return self.neutral_similarity
        similarity = self.compute_anchor_similarities([candidate], list(anchors))
        return float(similarity[0].mean())

    def _anchor_features(
        self,
        features: Mapping[str, ContentFeatures],
        liked_anchors: Iterable[str]
    ) -> List[ContentFeatures]:
        return [features[anchor] for anchor in liked_anchors if anchor in features]

    def _blend(self, btl_scaled: float, avg_similarity: float, alpha: float) -> float:
        blended = alpha * btl_scaled + (1.0 - alpha) * (100.0 * avg_similarity)
        return float(np.clip(blended, 0.0, 100.0))

    def predict(
        self,
        candidate_id: str,
        strengths: Mapping[str, float],
        features: Mapping[str, ContentFeatures],
        liked_anchors: Iterable[str],
        alpha: Optional[float] = None
    ) -> float:
        """
        Predict how much the user will like a candidate.

        Args:
            candidate_id: Item to score
            strengths: Item id -> fitted strength
            features: Item id -> content features
            liked_anchors: Ids the user loves, used for similarity
            alpha: Override the blend weight for this call

        Returns:
            Predicted score in [0, 100]
        """
        alpha = self.alpha if alpha is None else self._check_alpha(alpha)
        btl_scaled = self.scale_strength(candidate_id, strengths)

        candidate = features.get(candidate_id)
        if candidate is None:
            return btl_scaled

        avg_similarity = self.average_similarity(
            candidate,
            self._anchor_features(features, liked_anchors)
        )
        return self._blend(btl_scaled, avg_similarity, alpha)

    def predict_many(
        self,
        candidate_ids: Iterable[str],
        strengths: Mapping[str, float],
        features: Mapping[str, ContentFeatures],
        liked_anchors: Iterable[str],
        alpha: Optional[float] = None
    ) -> Dict[str, float]:
        """
        Predict scores for several candidates at once.

        Similarities for all candidates with features are computed in one
        pass over a shared vocabulary.

        Args:
            candidate_ids: Items to score
            strengths: Item id -> fitted strength
            features: Item id -> content features
            liked_anchors: Ids the user loves
            alpha: Override the blend weight for this call

        Returns:
            Dict of candidate id -> predicted score
        """
        alpha = self.alpha if alpha is None else self._check_alpha(alpha)
        candidate_ids = list(candidate_ids)
        anchors = self._anchor_features(features, liked_anchors)

        with_features = [c for c in candidate_ids if c in features]
        averages: Dict[str, float] = {}
        if with_features and anchors:
            similarity = self.compute_anchor_similarities(
                [features[c] for c in with_features],
                anchors
            )
            averages = dict(zip(with_features, similarity.mean(axis=1).tolist()))

        predictions = {}
        for candidate_id in candidate_ids:
            btl_scaled = self.scale_strength(candidate_id, strengths)
            if candidate_id not in features:
                predictions[candidate_id] = btl_scaled
                continue
            avg_similarity = averages.get(candidate_id, self.neutral_similarity)
            predictions[candidate_id] = self._blend(btl_scaled, avg_similarity, alpha)

        logger.info(
            f"Predicted {len(predictions)} candidates "
            f"({len(with_features)} with features, {len(anchors)} anchors)"
        )
        return predictions
