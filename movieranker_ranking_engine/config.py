"""Engine configuration"""

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def _get_config_value(key: str, default: str | None = None) -> str | None:
    """
    Get configuration value from environment or local.settings.json.

    Priority:
    1. Environment variable
    2. local.settings.json (Values.key)
    3. Default value

    Args:
        key: Configuration key name
        default: Default value if not found

    Returns:
        Configuration value or default
    """
    # Try environment variable first
    value = os.getenv(key)
    if value:
        return value

    # Try local.settings.json
    project_root = Path(__file__).resolve().parent.parent
    local_settings_path = project_root / "local.settings.json"

    if local_settings_path.exists():
        try:
            with open(local_settings_path) as f:
                settings = json.load(f)
                value = settings.get("Values", {}).get(key)
                if value:
                    return str(value)
        except (json.JSONDecodeError, KeyError):
            pass

    # Return default
    return default


def _get_float(key: str, default: float) -> float:
    """Read a float setting, falling back to the default on bad input."""
    raw = _get_config_value(key)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid value for {key}: {raw!r}, using default {default}")
        return default


def _get_int(key: str, default: int) -> int:
    """Read an int setting, falling back to the default on bad input."""
    raw = _get_config_value(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid value for {key}: {raw!r}, using default {default}")
        return default


def get_fit_max_iterations() -> int:
    """
    Get the MM iteration cap for strength fitting.

    Returns:
        Maximum iterations (default: 200)
    """
    return _get_int("BTL_MAX_ITERATIONS", 200)


def get_fit_tolerance() -> float:
    """
    Get the convergence tolerance for strength fitting.

    Returns:
        Largest per-item change that counts as converged (default: 1e-6)
    """
    return _get_float("BTL_TOLERANCE", 1e-6)


def get_prior_strength() -> float:
    """
    Get the virtual-tie prior added to every pair.

    Returns:
        Prior strength (default: 1.0)
    """
    return _get_float("BTL_PRIOR_STRENGTH", 1.0)


def get_normalize_geometric_mean() -> bool:
    """
    Check if fitted strengths should be rescaled to a geometric mean of 1.

    Returns:
        True unless explicitly disabled
    """
    value = _get_config_value("BTL_NORMALIZE_GEOMETRIC_MEAN")
    if value is None:
        return True
    return value.lower() == "true"


def get_blend_alpha() -> float:
    """
    Get the weight of the strength term in blended predictions.

    Returns:
        Alpha in [0, 1] (default: 0.7)
    """
    return _get_float("PREDICTION_BLEND_ALPHA", 0.7)
