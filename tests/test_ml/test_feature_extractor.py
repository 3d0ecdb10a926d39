"""Unit tests for movieranker_ranking_engine.ml.feature_extractor."""
import numpy as np
from scipy.sparse import issparse

from movieranker_ranking_engine.ml.feature_extractor import FACETS, ContentFeatureExtractor
from movieranker_ranking_engine.models import ContentFeatures


class TestContentFeatureExtractorInit:
    """Tests for ContentFeatureExtractor initialization."""

    def test_encoders_start_unfitted(self):
        extractor = ContentFeatureExtractor()
        assert extractor.encoders == {'genres': None, 'directors': None, 'cast': None}


class TestFitTransformFacet:
    """Tests for fit_transform_facet method."""

    def test_basic(self):
        """Test multi-hot encoding of one facet."""
        # Arrange
        extractor = ContentFeatureExtractor()
        values = [
            frozenset({'Drama', 'Crime'}),
            frozenset({'Comedy', 'Drama'}),
            frozenset({'Action'}),
        ]

        # Act
        features = extractor.fit_transform_facet('genres', values)

        # Assert
        assert issparse(features)
        assert features.shape == (3, 4)
        assert list(extractor.encoders['genres'].classes_) == ['Action', 'Comedy', 'Crime', 'Drama']
        assert features.toarray()[0].tolist() == [0, 0, 1, 1]

    def test_empty_sets(self):
        """Test rows without labels."""
        # Arrange
        extractor = ContentFeatureExtractor()

        # Act
        features = extractor.fit_transform_facet('cast', [frozenset({'A'}), frozenset()])

        # Assert
        assert features.shape == (2, 1)
        assert np.sum(features.toarray()[1]) == 0


class TestExtractAllFeatures:
    """Tests for extract_all_features method."""

    def test_all_facets_share_rows(self, sample_features):
        """Test that every facet is encoded for every row."""
        # Arrange
        extractor = ContentFeatureExtractor()
        rows = [sample_features['heat'], sample_features['collateral'], sample_features['blank']]

        # Act
        features = extractor.extract_all_features(rows)

        # Assert
        assert set(features) == set(FACETS)
        for matrix in features.values():
            assert matrix.shape[0] == 3
        assert features['directors'].shape[1] == 1
        assert np.sum(features['genres'].toarray()[2]) == 0

    def test_only_empty_rows(self):
        """Test that rows with no labels still encode."""
        extractor = ContentFeatureExtractor()

        features = extractor.extract_all_features([ContentFeatures(), ContentFeatures()])

        assert features['genres'].shape == (2, 0)
