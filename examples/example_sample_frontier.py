"""
Mean-Variance Analysis on Synthetic Returns
4 Stocks: AAPL, AXP, BA, CAT
60 monthly periods, annualized with 12 periods per year

Run after `pip install -e .`:
    python examples/example_sample_frontier.py
"""

from mean_variance import (
    OptimizerConfig,
    PortfolioOptimizer,
    generate_sample_returns,
    setup_logger,
)

logger = setup_logger("example_sample_frontier")

# === Data ===
returns = generate_sample_returns(n_periods=60, n_assets=4, seed=42)
config = OptimizerConfig(periods_per_year=12, rf_rate=0.0005)

optimizer = PortfolioOptimizer.from_returns(returns, config=config)
logger.info("\n%s", optimizer.summary_report())

# === Efficient portfolio at twice the MVP return ===
mvp_weights, mvp_stats = optimizer.minimum_variance_portfolio()
target = 2 * mvp_stats['mean']
eff_weights, eff_stats = optimizer.efficient_portfolio(target, mvp_weights)

logger.info("Efficient portfolio for target %.4f%% per month:", target * 100)
for name, w in zip(optimizer.asset_names, eff_weights):
    logger.info("  %s: %8.4f", name, w)
logger.info("  std: %.6f", eff_stats['std'])

# === Frontier sweep ===
frontier = optimizer.efficient_frontier(reference_return=target)
table = frontier.to_frame()
logger.info("Frontier points: %d", len(table))
logger.info("\n%s", table.iloc[::25].to_string(index=False))
