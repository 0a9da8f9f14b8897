"""
Portfolio Optimizer - Closed-Form Mean-Variance Analysis
========================================================

This module implements the classical Markowitz mean-variance results:
- Minimum Variance Portfolio (MVP)
- Efficient portfolio for an arbitrary target return
- Efficient frontier sweep via two-fund separation
- Tangent Portfolio (maximum Sharpe ratio)

Every result is closed-form: one inversion of the covariance matrix,
then a handful of matrix-vector products. No iterative solver is used.

Theory Background:
------------------
With mu the vector of expected returns, Sigma the covariance matrix and
1 a vector of ones, define the frontier constants

    C = 1' Sigma^-1 1
    D = 1' Sigma^-1 mu
    E = mu' Sigma^-1 mu

The MVP minimizes w' Sigma w subject to 1'w = 1 and has weights
Sigma^-1 1 / C and expected return D / C. The minimum-variance portfolio
hitting a target return m is

    lambda = 2 (m - D/C) / (E - D^2/C)
    w(m)   = w_mvp + (lambda / 2) (Sigma^-1 mu - D w_mvp)

so lambda is zero, and w(m) is the MVP, exactly when m is the MVP return.

Two-fund separation: any affine combination (1 - a) w1 + a w2 of two
frontier portfolios is itself on the frontier, so the MVP and one other
efficient portfolio characterize the whole curve.
"""

import logging
import warnings
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Tuple

import numpy as np
import pandas as pd
from scipy import linalg

from mean_variance.config import DEFAULT_CONFIG, OptimizerConfig
from mean_variance.core.exceptions import (
    DegenerateFrontierError,
    InsufficientDataError,
    SingularCovarianceError,
)
from mean_variance.core.returns import as_returns_matrix

logger = logging.getLogger(__name__)


class FrontierConstants(NamedTuple):
    """Scalar constants C = 1'S^-1 1, D = 1'S^-1 mu, E = mu'S^-1 mu."""

    C: float
    D: float
    E: float


class FrontierPoint(NamedTuple):
    """One point of the frontier sweep, annualized."""

    a: float
    annual_return: float
    annual_volatility: float


def compute_stats_from_returns(
    returns,
    asset_names: Optional[List[str]] = None
) -> Tuple[np.ndarray, np.ndarray, List[str]]:
    """
    Compute expected returns and covariance matrix from historical returns.

    Args:
        returns: 2D returns (rows = time periods, cols = assets), as a
            DataFrame, ndarray or nested list
        asset_names: Optional list of asset names

    Returns:
        Tuple of (expected_returns, cov_matrix, asset_names)

    Example:
        >>> returns = np.random.randn(60, 4) * 0.05  # 60 months, 4 assets
        >>> means, cov, names = compute_stats_from_returns(returns)
    """
    values, asset_names = as_returns_matrix(returns, asset_names)

    expected_returns = np.mean(values, axis=0)

    # Sample covariance, denominator T - 1
    cov_matrix = np.cov(values, rowvar=False, ddof=1)

    return expected_returns, cov_matrix, asset_names


def _read_only(array: np.ndarray) -> np.ndarray:
    array = np.array(array, dtype=float)
    array.setflags(write=False)
    return array


class PortfolioOptimizer:
    """
    Closed-form mean-variance optimizer over a fixed set of assets.

    The expected returns, covariance matrix and its inverse are derived
    once at construction and never mutated afterwards, so one optimizer
    can answer any number of MVP / efficient portfolio / frontier queries.

    Attributes:
        expected_returns (np.ndarray): Per-period expected return of each asset
        cov_matrix (np.ndarray): Per-period covariance matrix
        inv_cov_matrix (np.ndarray): Inverse of the covariance matrix
        asset_names (List[str]): Names of the assets, in column order
        n_assets (int): Number of assets
        rf_rate (float): Per-period risk-free rate for Sharpe ratios
        config (OptimizerConfig): Numerical settings

    Example:
        >>> returns = generate_sample_returns(60, 4)
        >>> optimizer = PortfolioOptimizer.from_returns(returns)
        >>> mvp_weights, mvp_stats = optimizer.minimum_variance_portfolio()
    """

    def __init__(
        self,
        expected_returns: np.ndarray,
        cov_matrix: np.ndarray,
        asset_names: Optional[List[str]] = None,
        rf_rate: Optional[float] = None,
        config: Optional[OptimizerConfig] = None
    ):
        """
        Initialize the Portfolio Optimizer.

        Args:
            expected_returns: Vector of expected returns for each asset
            cov_matrix: Covariance matrix of asset returns (n x n)
            asset_names: Optional list of asset names (default: Asset_1, Asset_2, ...)
            rf_rate: Per-period risk-free rate (default: config.rf_rate)
            config: Numerical settings (default: DEFAULT_CONFIG)

        Raises:
            ValueError: If dimensions don't match or inputs are not finite
            SingularCovarianceError: If the covariance matrix is not invertible
        """
        self.config = config if config is not None else DEFAULT_CONFIG
        self.rf_rate = self.config.rf_rate if rf_rate is None else float(rf_rate)

        expected_returns = np.array(expected_returns, dtype=float).flatten()
        cov_matrix = np.array(cov_matrix, dtype=float)
        self.n_assets = len(expected_returns)

        cov_matrix = self._validate_inputs(expected_returns, cov_matrix)

        self.expected_returns = _read_only(expected_returns)
        self.cov_matrix = _read_only(cov_matrix)
        self.inv_cov_matrix = _read_only(self._invert(cov_matrix))

        if asset_names is None:
            self.asset_names = [f"Asset_{i+1}" for i in range(self.n_assets)]
        else:
            self.asset_names = list(asset_names)
            if len(self.asset_names) != self.n_assets:
                raise ValueError(
                    f"Got {len(self.asset_names)} asset names for {self.n_assets} assets"
                )

        ones = np.ones(self.n_assets)
        self._inv_ones = _read_only(self.inv_cov_matrix @ ones)
        self._inv_mu = _read_only(self.inv_cov_matrix @ self.expected_returns)
        self._constants = FrontierConstants(
            C=float(ones @ self._inv_ones),
            D=float(ones @ self._inv_mu),
            E=float(self.expected_returns @ self._inv_mu),
        )
        logger.debug("Frontier constants: %s", self._constants)

    @classmethod
    def from_returns(
        cls,
        returns,
        asset_names: Optional[List[str]] = None,
        rf_rate: Optional[float] = None,
        config: Optional[OptimizerConfig] = None
    ) -> "PortfolioOptimizer":
        """
        Build an optimizer from a T x N returns matrix.

        Args:
            returns: Returns table (DataFrame columns become asset names)
            asset_names: Optional asset names overriding DataFrame columns
            rf_rate: Per-period risk-free rate
            config: Numerical settings

        Returns:
            PortfolioOptimizer over the sample mean and sample covariance
        """
        means, cov, names = compute_stats_from_returns(returns, asset_names)
        return cls(means, cov, names, rf_rate=rf_rate, config=config)

    def _validate_inputs(self, expected_returns: np.ndarray, cov_matrix: np.ndarray) -> np.ndarray:
        """Validate shapes and values; return a symmetric covariance matrix."""
        if self.n_assets < 2:
            raise InsufficientDataError(
                f"At least two assets are required for a frontier, got {self.n_assets}"
            )

        if cov_matrix.shape != (self.n_assets, self.n_assets):
            raise ValueError(
                f"Covariance matrix shape {cov_matrix.shape} doesn't match "
                f"number of assets {self.n_assets}"
            )

        if not np.all(np.isfinite(expected_returns)) or not np.all(np.isfinite(cov_matrix)):
            raise ValueError("Expected returns and covariance matrix must be finite")

        # Check if covariance matrix is symmetric
        if not np.allclose(cov_matrix, cov_matrix.T):
            warnings.warn("Covariance matrix is not symmetric. Symmetrizing...")
            cov_matrix = (cov_matrix + cov_matrix.T) / 2

        # Check if covariance matrix is positive semi-definite
        eigenvalues = np.linalg.eigvalsh(cov_matrix)
        if np.any(eigenvalues < -1e-10):
            warnings.warn("Covariance matrix has negative eigenvalues. "
                         "Results may be unreliable.")

        return cov_matrix

    def _invert(self, cov_matrix: np.ndarray) -> np.ndarray:
        """Invert Sigma, rejecting singular or badly conditioned matrices."""
        with np.errstate(divide='ignore', invalid='ignore'):
            cond = np.linalg.cond(cov_matrix)

        if not np.isfinite(cond) or cond > self.config.max_condition_number:
            raise SingularCovarianceError(
                f"Covariance matrix is singular or near-singular "
                f"(condition number {cond:.3e}). Remove duplicated or collinear "
                f"assets, or supply more periods than assets."
            )

        try:
            inverse = linalg.inv(cov_matrix)
        except linalg.LinAlgError as e:
            raise SingularCovarianceError(f"Covariance matrix is not invertible: {e}") from e

        logger.debug("Inverted %dx%d covariance matrix (condition number %.3e)",
                     self.n_assets, self.n_assets, cond)
        return inverse

    # ------------------------------------------------------------------
    # Portfolio statistics
    # ------------------------------------------------------------------

    def portfolio_return(self, weights: np.ndarray) -> float:
        """
        Calculate expected portfolio return.

        Formula: mu_p = w^T * mu = sum(w_i * mu_i)
        """
        return float(np.dot(weights, self.expected_returns))

    def portfolio_variance(self, weights: np.ndarray) -> float:
        """
        Calculate portfolio variance using the quadratic form.

        Formula: sigma_p^2 = w^T * Sigma * w
        """
        return float(np.dot(weights, np.dot(self.cov_matrix, weights)))

    def portfolio_std(self, weights: np.ndarray) -> float:
        """Portfolio standard deviation (volatility), sqrt(w^T * Sigma * w)."""
        return float(np.sqrt(max(self.portfolio_variance(weights), 0.0)))

    def portfolio_sharpe(self, weights: np.ndarray) -> float:
        """
        Calculate portfolio Sharpe ratio.

        Formula: Sharpe = (mu_p - rf) / sigma_p
        """
        ret = self.portfolio_return(weights)
        std = self.portfolio_std(weights)
        if std < 1e-10:
            return 0.0
        return (ret - self.rf_rate) / std

    def portfolio_stats(self, weights: np.ndarray) -> Dict[str, float]:
        """
        Calculate all portfolio statistics.

        Args:
            weights: Portfolio weights

        Returns:
            Dictionary containing mean, std, variance, and Sharpe ratio
        """
        ret = self.portfolio_return(weights)
        var = self.portfolio_variance(weights)
        std = float(np.sqrt(max(var, 0.0)))
        sharpe = (ret - self.rf_rate) / std if std > 1e-10 else 0.0

        return {
            'mean': ret,
            'std': std,
            'variance': var,
            'sharpe': sharpe
        }

    def annualize(self, mean: float, std: float,
                  periods_per_year: Optional[int] = None) -> Tuple[float, float]:
        """Scale a per-period (mean, std) pair to annual figures."""
        periods = self.config.periods_per_year if periods_per_year is None else periods_per_year
        return periods * mean, float(np.sqrt(periods)) * std

    def frontier_constants(self) -> FrontierConstants:
        """Return the (C, D, E) constants of this asset universe."""
        return self._constants

    # ------------------------------------------------------------------
    # Optimal portfolios
    # ------------------------------------------------------------------

    def minimum_variance_portfolio(self) -> Tuple[np.ndarray, Dict[str, float]]:
        """
        Find the Minimum Variance Portfolio (MVP).

        The MVP has the lowest possible risk among all fully invested
        portfolios (short positions allowed). It is the leftmost point on
        the efficient frontier.

        Closed form (Lagrangian first-order conditions):
            w = Sigma^-1 1 / (1' Sigma^-1 1)

        Returns:
            Tuple of (weights, stats_dict)
        """
        weights = np.array(self._inv_ones) / self._constants.C
        stats = self.portfolio_stats(weights)
        logger.debug("MVP solved: mean=%.6g std=%.6g", stats['mean'], stats['std'])
        return weights, stats

    def efficient_portfolio(
        self,
        target_return: float,
        mvp_weights: Optional[np.ndarray] = None
    ) -> Tuple[np.ndarray, Dict[str, float]]:
        """
        Find the minimum variance portfolio with a given expected return.

        Uses the MVP as the starting point and moves along the frontier:
            lambda = 2 (target - D/C) / (E - D^2/C)
            w      = w_mvp + (lambda / 2) (Sigma^-1 mu - D w_mvp)

        Args:
            target_return: Per-period target expected return
            mvp_weights: Precomputed MVP weights (computed if omitted)

        Returns:
            Tuple of (weights, stats_dict)

        Raises:
            DegenerateFrontierError: If all assets share one expected return
            ValueError: If mvp_weights is not this optimizer's MVP
        """
        C, D, E = self._constants
        denominator = E - D * D / C
        tolerance = self.config.degenerate_rtol * abs(E) + self.config.degenerate_atol
        if abs(denominator) <= tolerance:
            raise DegenerateFrontierError(
                f"Efficient frontier collapses to a point (E - D^2/C = {denominator:.3e}); "
                f"assets have indistinguishable expected returns"
            )

        if mvp_weights is None:
            mvp_weights, _ = self.minimum_variance_portfolio()
        mvp_weights = np.asarray(mvp_weights, dtype=float)
        if mvp_weights.shape != (self.n_assets,):
            raise ValueError(
                f"MVP weights shape {mvp_weights.shape} doesn't match number of assets {self.n_assets}"
            )
        if not np.allclose(mvp_weights, np.array(self._inv_ones) / C, rtol=1e-8, atol=1e-10):
            raise ValueError(
                "Supplied weights are not the minimum variance portfolio of these assets"
            )

        lam = 2.0 * (target_return - D / C) / denominator
        weights = mvp_weights + (lam / 2.0) * (self._inv_mu - D * mvp_weights)

        stats = self.portfolio_stats(weights)
        logger.debug("Efficient portfolio for target %.6g: lambda=%.6g std=%.6g",
                     target_return, lam, stats['std'])
        return weights, stats

    def tangent_portfolio(self) -> Tuple[np.ndarray, Dict[str, float]]:
        """
        Find the Tangent Portfolio (maximum Sharpe ratio).

        Closed form with excess returns mu - rf:
            w = Sigma^-1 (mu - rf 1) / 1' Sigma^-1 (mu - rf 1)

        The formula gives the maximum Sharpe portfolio only while rf lies
        below the MVP return; otherwise a warning is issued.

        Returns:
            Tuple of (weights, stats_dict)

        Raises:
            DegenerateFrontierError: If 1' Sigma^-1 (mu - rf 1) vanishes
        """
        C, D, _ = self._constants
        denominator = D - self.rf_rate * C
        tolerance = (self.config.degenerate_rtol * (abs(D) + abs(self.rf_rate) * C)
                     + self.config.degenerate_atol)
        if abs(denominator) <= tolerance:
            raise DegenerateFrontierError(
                "Risk-free rate equals the MVP return; the tangent portfolio is undefined"
            )

        if self.rf_rate >= D / C:
            warnings.warn(
                f"Risk-free rate {self.rf_rate:.6f} is not below the MVP return "
                f"{D / C:.6f}; tangent portfolio lies on the inefficient branch"
            )

        weights = (np.array(self._inv_mu) - self.rf_rate * np.array(self._inv_ones)) / denominator
        return weights, self.portfolio_stats(weights)

    def efficient_frontier(
        self,
        mixing_range: Optional[Iterable[float]] = None,
        reference_return: Optional[float] = None,
        periods_per_year: Optional[int] = None
    ) -> "EfficientFrontier":
        """
        Sweep the efficient frontier using two-fund separation.

        The MVP and one reference efficient portfolio span the frontier:
            weight(a) = (1 - a) * w_mvp + a * w_ref

        Args:
            mixing_range: Mixing coefficients a (default: config sweep,
                -0.4 to 1.9 step 0.01)
            reference_return: Target return of the reference portfolio
                (default: config.reference_multiple times the MVP return)
            periods_per_year: Annualization factor (default: config)

        Returns:
            EfficientFrontier yielding (a, annual_return, annual_volatility)

        Raises:
            DegenerateFrontierError: If the reference portfolio coincides
                with the MVP, so every point would be the same portfolio
        """
        mvp_weights, mvp_stats = self.minimum_variance_portfolio()
        mvp_return = mvp_stats['mean']

        if reference_return is None:
            reference_return = self.config.reference_multiple * mvp_return
            ref_weights, _ = self.efficient_portfolio(reference_return, mvp_weights)
            if self._same_portfolio(ref_weights, mvp_weights):
                # Multiple of a (near) zero MVP return; use the asset mean farthest away
                idx = int(np.argmax(np.abs(self.expected_returns - mvp_return)))
                reference_return = float(self.expected_returns[idx])
                ref_weights, _ = self.efficient_portfolio(reference_return, mvp_weights)
        else:
            ref_weights, _ = self.efficient_portfolio(reference_return, mvp_weights)

        if self._same_portfolio(ref_weights, mvp_weights):
            raise DegenerateFrontierError(
                f"Reference return {reference_return:.6g} is indistinguishable from the "
                f"MVP return {mvp_return:.6g}; the frontier sweep would collapse to one point"
            )

        if mixing_range is None:
            mixing_range = self.config.mixing_range()
        if periods_per_year is None:
            periods_per_year = self.config.periods_per_year

        return EfficientFrontier(
            mvp_weights,
            ref_weights,
            self.expected_returns,
            self.cov_matrix,
            mixing_range,
            periods_per_year
        )

    @staticmethod
    def _same_portfolio(weights: np.ndarray, other: np.ndarray) -> bool:
        scale = max(1.0, float(np.max(np.abs(other))))
        return bool(np.allclose(weights, other, rtol=0.0, atol=1e-10 * scale))

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def get_asset_stats(self) -> Dict[str, Dict[str, float]]:
        """
        Get individual asset statistics.

        Returns:
            Dictionary mapping asset names to their stats
        """
        stats = {}
        for i, name in enumerate(self.asset_names):
            stats[name] = {
                'mean': float(self.expected_returns[i]),
                'std': float(np.sqrt(self.cov_matrix[i, i])),
                'variance': float(self.cov_matrix[i, i])
            }
        return stats

    def summary_report(self) -> str:
        """
        Generate a summary report of the assets and the MVP.

        Returns:
            Formatted string report
        """
        lines = []
        lines.append("=" * 70)
        lines.append("MEAN-VARIANCE SUMMARY REPORT")
        lines.append("=" * 70)

        lines.append("\n--- Individual Asset Statistics ---")
        lines.append(f"{'Asset':<12} {'Mean':>12} {'Std Dev':>12} {'Variance':>12}")
        lines.append("-" * 50)

        for name, asset in self.get_asset_stats().items():
            lines.append(f"{name:<12} {asset['mean']:>12.6f} "
                         f"{asset['std']:>12.6f} {asset['variance']:>12.6f}")

        C, D, E = self._constants
        lines.append(f"\nFrontier constants: C = {C:.6f}, D = {D:.6f}, E = {E:.6f}")

        lines.append("\n--- Minimum Variance Portfolio (MVP) ---")
        mvp_w, mvp_stats = self.minimum_variance_portfolio()
        lines.append("Weights:")
        for i, name in enumerate(self.asset_names):
            lines.append(f"  {name}: {mvp_w[i]:.6f} ({mvp_w[i]*100:.2f}%)")
        ann_ret, ann_vol = self.annualize(mvp_stats['mean'], mvp_stats['std'])
        lines.append(f"Expected Return: {mvp_stats['mean']:.6f} (annualized {ann_ret*100:.2f}%)")
        lines.append(f"Standard Deviation: {mvp_stats['std']:.6f} (annualized {ann_vol*100:.2f}%)")

        lines.append("\n" + "=" * 70)

        return "\n".join(lines)


class EfficientFrontier:
    """
    Finite, restartable sequence of frontier points.

    Points are computed lazily on each iteration from the two spanning
    portfolios; iterating twice yields identical points.
    """

    def __init__(
        self,
        mvp_weights: np.ndarray,
        reference_weights: np.ndarray,
        expected_returns: np.ndarray,
        cov_matrix: np.ndarray,
        mixing_range: Iterable[float],
        periods_per_year: int
    ):
        self.mvp_weights = _read_only(mvp_weights)
        self.reference_weights = _read_only(reference_weights)
        self.expected_returns = _read_only(expected_returns)
        self.cov_matrix = _read_only(cov_matrix)
        self.mixing_range = tuple(float(a) for a in mixing_range)
        self.periods_per_year = periods_per_year

    def __len__(self) -> int:
        return len(self.mixing_range)

    def __iter__(self) -> Iterator[FrontierPoint]:
        for a in self.mixing_range:
            yield self.point_at(a)

    def weights_at(self, a: float) -> np.ndarray:
        """Portfolio weights (1 - a) * w_mvp + a * w_ref."""
        return (1.0 - a) * self.mvp_weights + a * self.reference_weights

    def point_at(self, a: float) -> FrontierPoint:
        """Annualized return and volatility of the portfolio at mixing coefficient a."""
        weights = self.weights_at(a)
        mean = float(weights @ self.expected_returns)
        variance = float(weights @ self.cov_matrix @ weights)
        return FrontierPoint(
            a=a,
            annual_return=self.periods_per_year * mean,
            annual_volatility=float(np.sqrt(self.periods_per_year * max(variance, 0.0)))
        )

    def to_frame(self) -> pd.DataFrame:
        """All points as a DataFrame with columns a, annual_return, annual_volatility."""
        return pd.DataFrame(list(self), columns=list(FrontierPoint._fields))


# ----------------------------------------------------------------------
# Functional entry points over a raw returns matrix
# ----------------------------------------------------------------------

def compute_minimum_variance_portfolio(
    returns,
    asset_names: Optional[List[str]] = None,
    config: Optional[OptimizerConfig] = None
) -> Tuple[np.ndarray, Dict[str, float]]:
    """MVP weights and stats for a T x N returns matrix."""
    optimizer = PortfolioOptimizer.from_returns(returns, asset_names, config=config)
    return optimizer.minimum_variance_portfolio()


def compute_efficient_portfolio(
    returns,
    target_return: float,
    mvp_weights: Optional[np.ndarray] = None,
    config: Optional[OptimizerConfig] = None
) -> Tuple[np.ndarray, Dict[str, float]]:
    """Efficient portfolio weights and stats for a per-period target return."""
    optimizer = PortfolioOptimizer.from_returns(returns, config=config)
    return optimizer.efficient_portfolio(target_return, mvp_weights)


def compute_efficient_frontier(
    returns,
    mixing_range: Optional[Iterable[float]] = None,
    reference_return: Optional[float] = None,
    periods_per_year: Optional[int] = None,
    config: Optional[OptimizerConfig] = None
) -> EfficientFrontier:
    """Efficient frontier sweep for a T x N returns matrix."""
    optimizer = PortfolioOptimizer.from_returns(returns, config=config)
    return optimizer.efficient_frontier(mixing_range, reference_return, periods_per_year)
