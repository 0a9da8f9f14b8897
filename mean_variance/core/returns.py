"""
Returns Intake for Portfolio Optimization
=========================================

This module turns caller-supplied data into the returns matrix the
optimizer works on:
- Wide price tables (one column per asset) into periodic net returns
- DataFrames, arrays or nested lists into a validated T x N array
- Column subsets by asset name (e.g. to drop collinear assets)

Rows are time periods in chronological order, columns are assets. Column
order defines asset order in every weight vector.
"""

import logging
import warnings
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from mean_variance.core.exceptions import InsufficientDataError, InvalidReturnsError

logger = logging.getLogger(__name__)


def as_returns_matrix(
    returns,
    asset_names: Optional[Sequence[str]] = None
) -> Tuple[np.ndarray, List[str]]:
    """
    Validate a returns table and convert it to a float array.

    Args:
        returns: T x N returns as a DataFrame, ndarray or nested list.
            A 1-D input is treated as a single asset.
        asset_names: Optional names; defaults to DataFrame columns or
            Asset_1, Asset_2, ...

    Returns:
        Tuple of (returns_array, asset_names)

    Raises:
        InvalidReturnsError: Wrong dimensionality, non-numeric data,
            NaN/Inf values or an asset-name count mismatch
        InsufficientDataError: Fewer than two assets or two periods
    """
    if isinstance(returns, pd.DataFrame):
        if asset_names is None:
            asset_names = [str(c) for c in returns.columns]
        values = returns.to_numpy()
    elif isinstance(returns, pd.Series):
        values = returns.to_numpy()
    else:
        values = np.asarray(returns)

    try:
        values = values.astype(float)
    except (TypeError, ValueError) as e:
        raise InvalidReturnsError(f"Returns must be numeric: {e}") from e

    if values.ndim == 1:
        values = values.reshape(-1, 1)
    if values.ndim != 2:
        raise InvalidReturnsError(
            f"Returns must be a 2D (periods x assets) table, got {values.ndim} dimensions"
        )

    n_periods, n_assets = values.shape

    if n_assets < 2:
        raise InsufficientDataError(
            f"At least two assets are required for a frontier, got {n_assets}"
        )
    if n_periods < 2:
        raise InsufficientDataError(
            f"At least two periods are required to estimate variance, got {n_periods}"
        )

    if not np.all(np.isfinite(values)):
        bad = int(np.sum(~np.isfinite(values)))
        raise InvalidReturnsError(
            f"Returns contain {bad} NaN or Inf values; drop or impute them first"
        )

    if asset_names is None:
        asset_names = [f"Asset_{i+1}" for i in range(n_assets)]
    else:
        asset_names = list(asset_names)
        if len(asset_names) != n_assets:
            raise InvalidReturnsError(
                f"Got {len(asset_names)} asset names for {n_assets} return columns"
            )

    logger.debug("Returns matrix accepted: %d periods x %d assets", n_periods, n_assets)
    return values, asset_names


def prices_to_returns(
    prices: pd.DataFrame,
    method: str = "simple",
    dropna: bool = True
) -> pd.DataFrame:
    """
    Convert a wide price table into periodic net returns.

    Args:
        prices: DataFrame indexed by date, one column of prices per asset
        method: 'simple' for P_t / P_{t-1} - 1, 'log' for ln(P_t / P_{t-1})
        dropna: Drop any period where some asset has no return

    Returns:
        DataFrame of returns (first period removed)
    """
    if not isinstance(prices, pd.DataFrame):
        prices = pd.DataFrame(prices)

    prices = prices.sort_index()

    if method == "simple":
        returns = prices.pct_change(fill_method=None)
    elif method == "log":
        returns = np.log(prices / prices.shift(1))
    else:
        raise ValueError(f"Unknown return method: {method}. Use 'simple' or 'log'")

    returns = returns.iloc[1:]
    if dropna:
        before = len(returns)
        returns = returns.replace([np.inf, -np.inf], np.nan).dropna(how="any")
        dropped = before - len(returns)
        if dropped:
            logger.info("Dropped %d periods with missing returns", dropped)

    return returns


def select_assets(
    returns: pd.DataFrame,
    selected_assets: Sequence[str]
) -> pd.DataFrame:
    """
    Extract a subset of asset columns, keeping the requested order.

    Useful for dropping duplicated or collinear series before optimizing.

    Args:
        returns: Wide returns DataFrame
        selected_assets: Names of assets to include

    Returns:
        DataFrame with only the found assets
    """
    found_names = []
    for name in selected_assets:
        if name in returns.columns:
            found_names.append(name)
        else:
            warnings.warn(f"Asset '{name}' not found in data")

    return returns.loc[:, found_names]


def generate_sample_returns(
    n_periods: int = 60,
    n_assets: int = 4,
    seed: int = 42
) -> pd.DataFrame:
    """
    Generate synthetic correlated returns for demos and testing.

    Means rise linearly from 0.5% to 2% per period and the covariance is
    a random positive definite matrix scaled to monthly-like volatility.

    Args:
        n_periods: Number of return periods (rows)
        n_assets: Number of assets (columns)
        seed: Random seed for reproducibility

    Returns:
        DataFrame of returns with ticker-like column names
    """
    rng = np.random.RandomState(seed)

    means = np.linspace(0.005, 0.02, n_assets)

    A = rng.randn(n_assets, n_assets) * 0.03
    cov_matrix = np.dot(A, A.T) + np.eye(n_assets) * 0.002
    cov_matrix = cov_matrix / np.max(cov_matrix) * 0.004

    data = rng.multivariate_normal(means, cov_matrix, size=n_periods)

    if n_assets == 4:
        asset_names = ['AAPL', 'AXP', 'BA', 'CAT']
    elif n_assets == 6:
        asset_names = ['AAPL', 'AXP', 'BA', 'CAT', 'CSCO', 'CVX']
    else:
        asset_names = [f'Stock_{i+1}' for i in range(n_assets)]

    index = pd.RangeIndex(1, n_periods + 1, name="period")
    return pd.DataFrame(data, columns=asset_names, index=index)
