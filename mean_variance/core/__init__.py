"""Core computational modules for mean-variance optimization."""

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
    FrontierConstants,
    FrontierPoint,
    compute_stats_from_returns,
    compute_minimum_variance_portfolio,
    compute_efficient_portfolio,
    compute_efficient_frontier,
)
from mean_variance.core.returns import (
    as_returns_matrix,
    prices_to_returns,
    select_assets,
    generate_sample_returns,
)

__all__ = [
    "MeanVarianceError",
    "InsufficientDataError",
    "InvalidReturnsError",
    "SingularCovarianceError",
    "DegenerateFrontierError",
    "PortfolioOptimizer",
    "EfficientFrontier",
    "FrontierConstants",
    "FrontierPoint",
    "compute_stats_from_returns",
    "compute_minimum_variance_portfolio",
    "compute_efficient_portfolio",
    "compute_efficient_frontier",
    "as_returns_matrix",
    "prices_to_returns",
    "select_assets",
    "generate_sample_returns",
]
