"""
Exceptions raised by the mean-variance optimizer.

All errors derive from ``ValueError`` so callers that already guard
optimizer input with ``except ValueError`` keep working.
"""


class MeanVarianceError(ValueError):
    """Base class for every error raised by this package."""


class InsufficientDataError(MeanVarianceError):
    """Fewer than two assets or fewer than two return periods."""


class InvalidReturnsError(MeanVarianceError):
    """Returns matrix has the wrong shape or contains NaN/Inf values."""


class SingularCovarianceError(MeanVarianceError):
    """
    The sample covariance matrix cannot be inverted.

    Typical causes are T <= N (more assets than observations) or
    duplicated / perfectly collinear return series. Drop the offending
    assets or supply more observations.
    """


class DegenerateFrontierError(MeanVarianceError):
    """
    The efficient frontier collapses to a single point.

    Happens when every asset has the same expected return, so no
    portfolio can trade variance for return.
    """
