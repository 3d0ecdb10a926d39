"""Shared test fixtures and configuration for pytest."""
import pytest
import numpy as np
from typing import Dict, List

from movieranker_ranking_engine.models import Comparison, ContentFeatures, PairHistory, ScoredItem


# ===== Configuration Fixtures =====

@pytest.fixture(autouse=True)
def clean_engine_env(monkeypatch):
    """Keep engine settings from the host environment out of tests."""
    for key in (
        'BTL_MAX_ITERATIONS',
        'BTL_TOLERANCE',
        'BTL_PRIOR_STRENGTH',
        'BTL_NORMALIZE_GEOMETRIC_MEAN',
        'PREDICTION_BLEND_ALPHA',
    ):
        monkeypatch.delenv(key, raising=False)


# ===== Comparison Fixtures =====

@pytest.fixture
def sample_items() -> List[str]:
    """Three catalog items."""
    return ['heat', 'ronin', 'collateral']


@pytest.fixture
def dominance_comparisons() -> List[Comparison]:
    """heat beats ronin beats collateral, directly and transitively."""
    return [
        Comparison('heat', 'ronin'),
        Comparison('heat', 'ronin'),
        Comparison('ronin', 'collateral'),
        Comparison('ronin', 'collateral'),
        Comparison('heat', 'collateral'),
        Comparison('heat', 'collateral'),
    ]


@pytest.fixture
def uniform_comparisons(sample_items) -> List[Comparison]:
    """Every item beats every other item exactly once."""
    comparisons = []
    for a in sample_items:
        for b in sample_items:
            if a != b:
                comparisons.append(Comparison(a, b))
    return comparisons


@pytest.fixture
def sample_history() -> List[PairHistory]:
    """Pair presentation history."""
    return [
        PairHistory('heat', 'ronin', 3),
        PairHistory('ronin', 'heat', 2),
        PairHistory('heat', 'collateral', 1),
    ]


# ===== Score Fixtures =====

@pytest.fixture
def sample_sorted_scores() -> List[ScoredItem]:
    """Existing descending display scores."""
    return [
        ScoredItem('heat', 90),
        ScoredItem('ronin', 70),
        ScoredItem('collateral', 50),
    ]


@pytest.fixture
def large_sorted_scores() -> List[ScoredItem]:
    """Twenty entries from 95 down to 0 in steps of 5."""
    return [ScoredItem(f'item_{i}', 95 - 5 * i) for i in range(20)]


# ===== Content Fixtures =====

@pytest.fixture
def sample_features() -> Dict[str, ContentFeatures]:
    """Content features for a handful of movies."""
    return {
        'heat': ContentFeatures(
            genres={'Crime', 'Drama', 'Thriller'},
            directors={'Michael Mann'},
            cast={'Al Pacino', 'Robert De Niro'}
        ),
        'collateral': ContentFeatures(
            genres={'Crime', 'Thriller'},
            directors={'Michael Mann'},
            cast={'Tom Cruise', 'Jamie Foxx'}
        ),
        'ronin': ContentFeatures(
            genres={'Action', 'Thriller'},
            directors={'John Frankenheimer'},
            cast={'Robert De Niro', 'Jean Reno'}
        ),
        'amelie': ContentFeatures(
            genres={'Comedy', 'Romance'},
            directors={'Jean-Pierre Jeunet'},
            cast={'Audrey Tautou'}
        ),
        'blank': ContentFeatures(),
    }


@pytest.fixture
def sample_strengths() -> Dict[str, float]:
    """Fitted strengths."""
    return {'heat': 3.0, 'ronin': 1.0, 'collateral': 2.0, 'amelie': 0.5}


# ===== Random Fixtures =====

@pytest.fixture
def seeded_rng() -> np.random.Generator:
    """Reproducible random source."""
    return np.random.default_rng(42)
