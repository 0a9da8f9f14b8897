"""
tests/test_frontier.py — Unit Tests for the Efficient Frontier Sweep

Two-fund interpolation between the minimum variance portfolio and a
reference efficient portfolio, annualization and restartability.
"""

import numpy as np
import pandas as pd
import pytest

from mean_variance import (
    DegenerateFrontierError,
    EfficientFrontier,
    FrontierPoint,
    OptimizerConfig,
    PortfolioOptimizer,
    compute_efficient_frontier,
)


def test_default_sweep_covers_config_range(optimizer):
    frontier = optimizer.efficient_frontier()

    assert isinstance(frontier, EfficientFrontier)
    assert len(frontier) == 231
    points = list(frontier)
    assert len(points) == 231
    assert points[0].a == pytest.approx(-0.4)
    assert points[-1].a == pytest.approx(1.9)
    assert all(isinstance(p, FrontierPoint) for p in points)


def test_frontier_is_restartable(optimizer):
    frontier = optimizer.efficient_frontier(mixing_range=(a for a in np.linspace(0, 1, 5)))
    first = list(frontier)
    second = list(frontier)
    assert len(first) == 5
    assert first == second


def test_endpoints_are_mvp_and_reference(optimizer):
    mvp_weights, mvp_stats = optimizer.minimum_variance_portfolio()
    frontier = optimizer.efficient_frontier(mixing_range=[0.0, 1.0], reference_return=0.03)
    start, end = list(frontier)

    np.testing.assert_allclose(frontier.weights_at(0.0), mvp_weights, atol=1e-14)
    assert start.annual_return == pytest.approx(252 * mvp_stats['mean'], rel=1e-12)
    assert start.annual_volatility == pytest.approx(np.sqrt(252) * mvp_stats['std'], rel=1e-12)
    assert end.annual_return == pytest.approx(252 * 0.03, rel=1e-9)


def test_default_reference_is_multiple_of_mvp_return(optimizer):
    _, mvp_stats = optimizer.minimum_variance_portfolio()
    frontier = optimizer.efficient_frontier(mixing_range=[1.0])
    (point,) = list(frontier)
    assert point.annual_return == pytest.approx(252 * 2.0 * mvp_stats['mean'], rel=1e-9)


def test_zero_mvp_return_falls_back_to_asset_mean():
    opt = PortfolioOptimizer([0.01, -0.01], np.eye(2) * 0.01)
    _, mvp_stats = opt.minimum_variance_portfolio()
    assert mvp_stats['mean'] == pytest.approx(0.0, abs=1e-15)

    (point,) = list(opt.efficient_frontier(mixing_range=[1.0]))
    assert point.annual_return == pytest.approx(252 * 0.01, rel=1e-9)


def test_near_zero_mvp_return_falls_back_to_asset_mean():
    opt = PortfolioOptimizer([0.01 + 2e-14, -0.01], np.eye(2) * 0.01)
    _, mvp_stats = opt.minimum_variance_portfolio()
    assert abs(mvp_stats['mean']) < 1e-13

    start, end = list(opt.efficient_frontier(mixing_range=[0.0, 1.0]))
    assert abs(end.annual_return) == pytest.approx(252 * 0.01, rel=1e-6)
    assert end.annual_volatility > start.annual_volatility


def test_reference_at_mvp_return_is_rejected(optimizer):
    _, mvp_stats = optimizer.minimum_variance_portfolio()
    with pytest.raises(DegenerateFrontierError):
        optimizer.efficient_frontier(mixing_range=[-0.4, 0.0, 1.9],
                                     reference_return=mvp_stats['mean'])


def test_interpolation_is_linear(optimizer):
    frontier = optimizer.efficient_frontier()
    a1, a2, t = -0.3, 1.5, 0.25
    a3 = (1 - t) * a1 + t * a2

    expected = (1 - t) * frontier.weights_at(a1) + t * frontier.weights_at(a2)
    np.testing.assert_allclose(frontier.weights_at(a3), expected, atol=1e-12)


def test_every_point_is_fully_invested_and_efficient(optimizer):
    _, mvp_stats = optimizer.minimum_variance_portfolio()
    frontier = optimizer.efficient_frontier()
    min_vol = np.sqrt(252) * mvp_stats['std']

    for point in frontier:
        assert frontier.weights_at(point.a).sum() == pytest.approx(1.0, abs=1e-9)
        assert point.annual_volatility >= min_vol - 1e-12

        # Same return, same variance as the directly solved efficient portfolio
        _, stats = optimizer.efficient_portfolio(point.annual_return / 252)
        assert point.annual_volatility == pytest.approx(np.sqrt(252) * stats['std'], rel=1e-8)


def test_annualization_uses_periods_per_year(optimizer):
    weekly = optimizer.efficient_frontier(mixing_range=[0.5], periods_per_year=52)
    (point,) = list(weekly)
    weights = weekly.weights_at(0.5)

    assert point.annual_return == pytest.approx(52 * optimizer.portfolio_return(weights))
    assert point.annual_volatility == pytest.approx(np.sqrt(52) * optimizer.portfolio_std(weights))


def test_config_controls_sweep(sample_returns):
    config = OptimizerConfig(periods_per_year=12, mixing_start=0.0, mixing_stop=1.0, mixing_step=0.25)
    frontier = compute_efficient_frontier(sample_returns, config=config)

    assert frontier.mixing_range == (0.0, 0.25, 0.5, 0.75, 1.0)
    assert frontier.periods_per_year == 12


def test_to_frame(sample_returns):
    frontier = compute_efficient_frontier(sample_returns, mixing_range=np.arange(0, 1.01, 0.1))
    frame = frontier.to_frame()

    assert isinstance(frame, pd.DataFrame)
    assert list(frame.columns) == ['a', 'annual_return', 'annual_volatility']
    assert len(frame) == 11
    assert frame['annual_volatility'].min() > 0
