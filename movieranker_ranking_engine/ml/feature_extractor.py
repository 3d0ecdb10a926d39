"""Feature extraction for content similarity between catalog items."""
from typing import Dict, List, Optional, Sequence
from sklearn.preprocessing import MultiLabelBinarizer  # type: ignore
from scipy.sparse import csr_matrix
import logging

from movieranker_ranking_engine.models import ContentFeatures

logger = logging.getLogger(__name__)

FACETS = ("genres", "directors", "cast")


# noinspection PyMethodMayBeStatic
class ContentFeatureExtractor:
    """Multi-hot encode the genre, director and cast facets of items."""

    def __init__(self):
        # Encoders (fitted during transform)
        self.encoders: Dict[str, Optional[MultiLabelBinarizer]] = {facet: None for facet in FACETS}

    def fit_transform_facet(
        self,
        facet: str,
        values: Sequence[frozenset]
    ) -> csr_matrix:
        """
        Extract one facet using multi-hot encoding.

        Args:
            facet: Facet name (genres, directors or cast)
            values: One label set per item

        Returns:
            Sparse binary matrix (n_items x n_labels)
        """
        encoder = MultiLabelBinarizer(sparse_output=True)
        # Sorted lists keep the vocabulary order deterministic
        matrix = encoder.fit_transform([sorted(v) for v in values])
        self.encoders[facet] = encoder

        logger.debug(f" {facet} features: {matrix.shape}")
        return csr_matrix(matrix)

    def extract_all_features(
        self,
        rows: List[ContentFeatures]
    ) -> Dict[str, csr_matrix]:
        """
        Extract all facets for a list of items.

        All rows share one vocabulary per facet, so any two row slices of
        the result can be compared directly.

        Args:
            rows: ContentFeatures per item

        Returns:
            Dictionary of facet name -> sparse feature matrix
        """
        logger.debug(f"Extracting content features for {len(rows)} items...")

        return {
            facet: self.fit_transform_facet(facet, [getattr(row, facet) for row in rows])
            for facet in FACETS
        }
