# DataLab Engine - Pytest Configuration
# Shared fixtures and configuration for all tests

import sys
import os

import pytest

# Add parent to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


# =============================================================================
# Synthetic Data Generator Fixtures
# =============================================================================

@pytest.fixture(scope='session')
def synthetic_generator():
    """Session-scoped synthetic data generator."""
    from tests.synthetic_data_generator import SyntheticDataGenerator
    return SyntheticDataGenerator(seed=42)


@pytest.fixture
def customer_rows(synthetic_generator):
    """Customer rows with duplicates, missing cells and outliers."""
    return synthetic_generator.generate_customer_rows(n_rows=200)


@pytest.fixture
def numeric_rows(synthetic_generator):
    """Correlated numeric rows."""
    return synthetic_generator.generate_numeric_rows(n_rows=100)


@pytest.fixture
def time_series_rows(synthetic_generator):
    """Rows with an ISO date column."""
    return synthetic_generator.generate_time_series_rows(n_points=24)


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture
def engine_settings():
    """Default settings, built fresh so environment overrides do not leak."""
    from datalab.core.config import EngineSettings
    return EngineSettings()


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Drop the cached settings around each test."""
    from datalab.core.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
