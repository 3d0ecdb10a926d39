"""Unit tests for movieranker_ranking_engine.services.prediction_blender."""
import pytest

from movieranker_ranking_engine.models import ContentFeatures
from movieranker_ranking_engine.services.prediction_blender import PredictionBlender


class TestPredictionBlenderInit:
    """Tests for PredictionBlender initialization."""

    def test_default_alpha(self):
        """Test that alpha defaults to 0.7."""
        assert PredictionBlender().alpha == 0.7

    def test_alpha_from_config(self, monkeypatch):
        """Test reading alpha from the environment."""
        # Arrange
        monkeypatch.setenv('PREDICTION_BLEND_ALPHA', '0.4')

        # Act
        blender = PredictionBlender()

        # Assert
        assert blender.alpha == 0.4

    @pytest.mark.parametrize('alpha', [-0.1, 1.5])
    def test_rejects_alpha_outside_unit_interval(self, alpha):
        with pytest.raises(ValueError):
            PredictionBlender(alpha=alpha)


class TestScaleStrength:
    """Tests for scale_strength method."""

    def test_min_max(self, sample_strengths):
        """Test scaling against the known strength range."""
        # Arrange
        blender = PredictionBlender()

        # Act / Assert
        assert blender.scale_strength('heat', sample_strengths) == pytest.approx(100.0)
        assert blender.scale_strength('amelie', sample_strengths) == pytest.approx(0.0)
        assert blender.scale_strength('collateral', sample_strengths) == pytest.approx(60.0)

    def test_unfit_candidate_treated_as_average(self, sample_strengths):
        """Test that a missing candidate uses strength 1.0."""
        assert PredictionBlender().scale_strength('dune', sample_strengths) == pytest.approx(20.0)

    def test_all_equal(self):
        assert PredictionBlender().scale_strength('a', {'a': 2.0, 'b': 2.0}) == 50.0

    def test_no_known_strengths(self):
        assert PredictionBlender().scale_strength('a', {}) == 50.0

    def test_clamped_to_range(self):
        """Test that a default strength outside the range is clamped."""
        assert PredictionBlender().scale_strength('x', {'a': 0.2, 'b': 0.5}) == 100.0


class TestAverageSimilarity:
    """Tests for average_similarity method."""

    def test_weighted_jaccard(self, sample_features):
        """Test genre, director and cast weighting."""
        # Act
        similarity = PredictionBlender().average_similarity(
            sample_features['heat'],
            [sample_features['collateral']]
        )

        # Assert
        # genres 2/3, directors 1, cast 0
        assert similarity == pytest.approx(0.5 * 2 / 3 + 0.3 * 1.0)

    def test_no_anchors_is_neutral(self, sample_features):
        assert PredictionBlender().average_similarity(sample_features['heat'], []) == 0.5

    def test_empty_features_score_zero(self):
        """Test that missing data on both sides is not a match."""
        similarity = PredictionBlender().average_similarity(ContentFeatures(), [ContentFeatures()])
        assert similarity == 0.0


class TestPredict:
    """Tests for predict method."""

    def test_no_features_returns_btl_scaled(self, sample_strengths, sample_features):
        """Test that a candidate without features ignores alpha and anchors."""
        # Arrange
        blender = PredictionBlender()
        strengths = dict(sample_strengths, dune=2.0)

        # Act
        low_alpha = blender.predict('dune', strengths, sample_features, ['heat'], alpha=0.1)
        high_alpha = blender.predict('dune', strengths, sample_features, [], alpha=0.9)

        # Assert
        assert low_alpha == pytest.approx(60.0)
        assert high_alpha == pytest.approx(60.0)

    def test_blend(self, sample_strengths, sample_features):
        """Test blending strength with similarity to one anchor."""
        # Act
        score = PredictionBlender().predict('heat', sample_strengths, sample_features, ['collateral'])

        # Assert
        expected_similarity = 0.5 * 2 / 3 + 0.3
        assert score == pytest.approx(0.7 * 100.0 + 0.3 * 100.0 * expected_similarity)

    def test_anchors_averaged(self, sample_strengths, sample_features):
        """Test that similarity is averaged over anchors."""
        # Act
        score = PredictionBlender().predict(
            'collateral', sample_strengths, sample_features, ['heat', 'amelie']
        )

        # Assert
        expected_similarity = (0.5 * 2 / 3 + 0.3 + 0.0) / 2
        assert score == pytest.approx(0.7 * 60.0 + 0.3 * 100.0 * expected_similarity)

    def test_anchors_without_features_use_neutral(self, sample_strengths, sample_features):
        """Test the neutral midpoint when no anchor has features."""
        score = PredictionBlender().predict('heat', sample_strengths, sample_features, ['unknown'])
        assert score == pytest.approx(0.7 * 100.0 + 0.3 * 50.0)

    def test_alpha_override(self, sample_strengths, sample_features):
        """Test that alpha=1 returns the scaled strength."""
        score = PredictionBlender().predict(
            'collateral', sample_strengths, sample_features, ['heat'], alpha=1.0
        )
        assert score == pytest.approx(60.0)

    def test_score_in_range(self, sample_strengths, sample_features):
        """Test that predictions stay within [0, 100]."""
        for candidate in sample_features:
            score = PredictionBlender().predict(
                candidate, sample_strengths, sample_features, ['heat', 'ronin']
            )
            assert 0.0 <= score <= 100.0

    def test_invalid_alpha_override(self, sample_strengths, sample_features):
        with pytest.raises(ValueError):
            PredictionBlender().predict('heat', sample_strengths, sample_features, [], alpha=2.0)


class TestPredictMany:
    """Tests for predict_many method."""

    def test_matches_single_predictions(self, sample_strengths, sample_features):
        """Test that batch predictions equal one-by-one predictions."""
        # Arrange
        blender = PredictionBlender()
        candidates = ['heat', 'collateral', 'ronin', 'amelie', 'blank', 'dune']
        anchors = ['heat', 'collateral']

        # Act
        batch = blender.predict_many(candidates, sample_strengths, sample_features, anchors)

        # Assert
        assert list(batch) == candidates
        for candidate in candidates:
            single = blender.predict(candidate, sample_strengths, sample_features, anchors)
            assert batch[candidate] == pytest.approx(single)

    def test_no_anchor_features(self, sample_strengths, sample_features):
        """Test the neutral similarity in batch mode."""
        batch = PredictionBlender().predict_many(['heat'], sample_strengths, sample_features, ['unknown'])
        assert batch['heat'] == pytest.approx(0.7 * 100.0 + 0.3 * 50.0)
