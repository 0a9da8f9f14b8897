"""Shared fixtures for the mean-variance test suite."""

import numpy as np
import pandas as pd
import pytest

from mean_variance import PortfolioOptimizer, generate_sample_returns


@pytest.fixture
def two_asset_returns():
    """Four periods of returns for two assets."""
    return pd.DataFrame(
        {
            "assetA": [0.01, -0.01, 0.02, 0.00],
            "assetB": [0.02, 0.01, -0.01, 0.03],
        },
        index=pd.RangeIndex(1, 5, name="period"),
    )


@pytest.fixture
def sample_returns():
    """Synthetic 60 x 4 monthly-like returns."""
    return generate_sample_returns(n_periods=60, n_assets=4, seed=42)


@pytest.fixture
def optimizer(sample_returns):
    return PortfolioOptimizer.from_returns(sample_returns)


@pytest.fixture
def four_asset_optimizer():
    """Optimizer built from known means and covariance."""
    means = np.array([0.01, 0.015, 0.02, 0.025])
    cov = np.array([[0.04, 0.006, 0.01, 0.008],
                    [0.006, 0.05, 0.01, 0.006],
                    [0.01, 0.01, 0.06, 0.01],
                    [0.008, 0.006, 0.01, 0.05]])
    return PortfolioOptimizer(means, cov, ['AAPL', 'AXP', 'BA', 'CAT'], rf_rate=0.005)
