"""Closed-form helpers for sensitivity reporting."""

import numpy as np
from scipy.special import erf

from .errors import ConfigurationError
from .gbm import ContractParameters


def normal_cdf(z):
    """Standard normal CDF, 0.5 * (1 + erf(z / √2))."""
    result = 0.5 * (1.0 + erf(np.asarray(z, dtype=float) / np.sqrt(2.0)))
    return float(result) if np.ndim(result) == 0 else result


def delta(value_per_share: float, time_left: float, params: ContractParameters) -> float:
    """
    Distance of the per-share value from the strike rate, in units of
    σ √(time left).
    """
    if time_left <= 0:
        raise ConfigurationError("Time left must be positive")
    return (value_per_share - params.strike_rate) / (
        params.volatility * np.sqrt(time_left)
    )


def probability_above_strike(
    value_per_share: float, time_left: float, params: ContractParameters
) -> float:
    """Normal CDF of delta(), the chance of ending above the strike rate."""
    return normal_cdf(delta(value_per_share, time_left, params))
