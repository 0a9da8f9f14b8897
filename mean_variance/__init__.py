"""
Mean-Variance Frontier - Closed-Form Markowitz Portfolios
=========================================================

Minimum-variance portfolio, efficient portfolios and the efficient
frontier computed directly from a matrix of periodic asset returns.

Usage:
    from mean_variance import PortfolioOptimizer, generate_sample_returns

    returns = generate_sample_returns(n_periods=60, n_assets=4)
    optimizer = PortfolioOptimizer.from_returns(returns)
    weights, stats = optimizer.minimum_variance_portfolio()
    for point in optimizer.efficient_frontier():
        ...

Classes:
    PortfolioOptimizer - Closed-form mean-variance optimizer
    EfficientFrontier - Lazy, restartable frontier sweep
    OptimizerConfig - Numerical settings

Functions:
    compute_minimum_variance_portfolio - MVP from a returns matrix
    compute_efficient_portfolio - Efficient portfolio for a target return
    compute_efficient_frontier - Frontier sweep from a returns matrix
    prices_to_returns - Convert a price table to net returns
"""

from mean_variance.config import OptimizerConfig, DEFAULT_CONFIG
from mean_variance.logger import setup_logger
from mean_variance.core.exceptions import (
    MeanVarianceError,
    InsufficientDataError,
    InvalidReturnsError,
    SingularCovarianceError,
    DegenerateFrontierError,
)
from mean_variance.core.optimizer import (
    PortfolioOptimizer,
    EfficientFrontier,
    FrontierPoint,
    compute_stats_from_returns,
    compute_minimum_variance_portfolio,
    compute_efficient_portfolio,
    compute_efficient_frontier,
)
from mean_variance.core.returns import prices_to_returns, select_assets, generate_sample_returns

__version__ = "1.0.0"

__all__ = [
    "OptimizerConfig",
    "DEFAULT_CONFIG",
    "setup_logger",
    "MeanVarianceError",
    "InsufficientDataError",
    "InvalidReturnsError",
    "SingularCovarianceError",
    "DegenerateFrontierError",
    "PortfolioOptimizer",
    "EfficientFrontier",
    "FrontierPoint",
    "compute_stats_from_returns",
    "compute_minimum_variance_portfolio",
    "compute_efficient_portfolio",
    "compute_efficient_frontier",
    "prices_to_returns",
    "select_assets",
    "generate_sample_returns",
]
