"""
Optimizer Configuration
=======================

Default numerical settings for the mean-variance optimizer. Every value
can be overridden per call, per optimizer (``config=``) or through
``MV_*`` environment variables via ``OptimizerConfig.from_env()``.
"""

import os
from dataclasses import dataclass, replace
from typing import Optional

import numpy as np


# ============================================================
# ANNUALIZATION
# ============================================================
PERIODS_PER_YEAR_DAILY     = 252
PERIODS_PER_YEAR_WEEKLY    = 52
PERIODS_PER_YEAR_MONTHLY   = 12

# ============================================================
# NUMERICAL TOLERANCES
# ============================================================
MAX_CONDITION_NUMBER       = 1e12      # above this Sigma is treated as singular
DEGENERATE_RTOL            = 1e-13     # relative to mu' Sigma^-1 mu, a few hundred eps
DEGENERATE_ATOL            = 1e-15

# ============================================================
# FRONTIER SWEEP
# ============================================================
MIXING_START               = -0.4
MIXING_STOP                = 1.9
MIXING_STEP                = 0.01
REFERENCE_MULTIPLE         = 2.0       # reference target = multiple * MVP return


@dataclass(frozen=True)
class OptimizerConfig:
    """
    Settings shared by ``PortfolioOptimizer`` and the frontier sweep.

    Attributes:
        periods_per_year: Return periods per year used for annualization
        rf_rate: Per-period risk-free rate used for Sharpe ratios
        max_condition_number: Largest acceptable condition number of Sigma
        degenerate_rtol: Relative tolerance for a collapsed frontier
        degenerate_atol: Absolute tolerance for a collapsed frontier
        mixing_start: First mixing coefficient of the default sweep
        mixing_stop: Last mixing coefficient of the default sweep (inclusive)
        mixing_step: Spacing of the default sweep
        reference_multiple: Default reference target as a multiple of the MVP return
    """

    periods_per_year: int = PERIODS_PER_YEAR_DAILY
    rf_rate: float = 0.0
    max_condition_number: float = MAX_CONDITION_NUMBER
    degenerate_rtol: float = DEGENERATE_RTOL
    degenerate_atol: float = DEGENERATE_ATOL
    mixing_start: float = MIXING_START
    mixing_stop: float = MIXING_STOP
    mixing_step: float = MIXING_STEP
    reference_multiple: float = REFERENCE_MULTIPLE

    def __post_init__(self):
        if self.periods_per_year <= 0:
            raise ValueError(f"periods_per_year must be positive, got {self.periods_per_year}")
        if self.mixing_step <= 0:
            raise ValueError(f"mixing_step must be positive, got {self.mixing_step}")
        if self.mixing_stop < self.mixing_start:
            raise ValueError("mixing_stop must not be smaller than mixing_start")

    def mixing_range(self) -> np.ndarray:
        """Default mixing coefficients, endpoints included."""
        n_steps = int(round((self.mixing_stop - self.mixing_start) / self.mixing_step))
        return np.round(self.mixing_start + self.mixing_step * np.arange(n_steps + 1), 10)

    def with_overrides(self, **changes) -> "OptimizerConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    @classmethod
    def from_env(cls, prefix: str = "MV_") -> "OptimizerConfig":
        """
        Build a config from environment variables.

        ``MV_PERIODS_PER_YEAR=12`` sets ``periods_per_year``, and so on for
        every field. Unset variables keep their defaults.
        """
        changes = {}
        for name, field_def in cls.__dataclass_fields__.items():
            raw: Optional[str] = os.getenv(prefix + name.upper())
            if raw is None:
                continue
            caster = int if field_def.type in (int, "int") else float
            try:
                changes[name] = caster(raw)
            except ValueError as e:
                raise ValueError(f"Invalid value for {prefix}{name.upper()}: {raw!r}") from e
        return cls(**changes)


DEFAULT_CONFIG = OptimizerConfig()
