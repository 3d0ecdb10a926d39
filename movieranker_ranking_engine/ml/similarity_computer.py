"""Compute content similarity between catalog items."""
import numpy as np
from typing import Dict
from scipy.sparse import issparse
import logging

logger = logging.getLogger(__name__)


def _to_dense(matrix) -> np.ndarray:
    return matrix.toarray() if issparse(matrix) else np.asarray(matrix)


class SimilarityComputer:
    """Compute weighted Jaccard similarity from facet feature matrices."""

    def __init__(
        self,
        genre_weight: float = 0.5,
        director_weight: float = 0.3,
        cast_weight: float = 0.2
    ):
        """
        Initialize similarity computer.

        Args:
            genre_weight: Weight for genre similarity
            director_weight: Weight for director similarity
            cast_weight: Weight for cast similarity
        """
        self.genre_weight = genre_weight
        self.director_weight = director_weight
        self.cast_weight = cast_weight

    def compute_jaccard_similarity(self, left, right) -> np.ndarray:
        """
        Compute Jaccard similarity between two sets of binary rows.

        Two empty label sets have similarity 0, not 1.

        Args:
            left: Binary feature matrix (n_left x n_labels), may be sparse
            right: Binary feature matrix (n_right x n_labels), may be sparse

        Returns:
            Similarity matrix (n_left x n_right)
        """
        left = (_to_dense(left) > 0).astype(float)
        right = (_to_dense(right) > 0).astype(float)

        intersection = left @ right.T
        union = left.sum(axis=1)[:, None] + right.sum(axis=1)[None, :] - intersection

        return np.divide(
            intersection,
            union,
            out=np.zeros_like(intersection),
            where=union > 0
        )

    def compute_hybrid_similarity(
        self,
        genre_similarity: np.ndarray,
        director_similarity: np.ndarray,
        cast_similarity: np.ndarray
    ) -> np.ndarray:
        """
        Compute hybrid similarity as weighted combination.

        Args:
            genre_similarity: Genre similarity matrix
            director_similarity: Director similarity matrix
            cast_similarity: Cast similarity matrix

        Returns:
            Hybrid similarity matrix
        """
        # Normalize weights
        total_weight = self.genre_weight + self.director_weight + self.cast_weight
        genre_w = self.genre_weight / total_weight
        director_w = self.director_weight / total_weight
        cast_w = self.cast_weight / total_weight

        logger.debug(f"  Weights - Genre: {genre_w:.2f}, Director: {director_w:.2f}, Cast: {cast_w:.2f}")

        return (
            genre_w * genre_similarity +
            director_w * director_similarity +
            cast_w * cast_similarity
        )

    def compute_all_similarities(
        self,
        left: Dict[str, np.ndarray],
        right: Dict[str, np.ndarray]
    ) -> Dict[str, np.ndarray]:
        """
        Compute all similarity matrices between two feature dictionaries.

        Args:
            left: Facet name -> feature matrix for the first item set
            right: Facet name -> feature matrix for the second item set,
                   encoded with the same vocabularies as left

        Returns:
            Dictionary with per-facet and hybrid similarity matrices
        """
        genre_similarity = self.compute_jaccard_similarity(left['genres'], right['genres'])
        director_similarity = self.compute_jaccard_similarity(left['directors'], right['directors'])
        cast_similarity = self.compute_jaccard_similarity(left['cast'], right['cast'])

        hybrid_similarity = self.compute_hybrid_similarity(
            genre_similarity,
            director_similarity,
            cast_similarity
        )

        return {
            'genre_similarity': genre_similarity,
            'director_similarity': director_similarity,
            'cast_similarity': cast_similarity,
            'hybrid_similarity': hybrid_similarity
        }
