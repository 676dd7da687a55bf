"""
Terminal payoff rules for vesting grants.

The value lattice is seeded from a terminal payoff evaluated on the last
level of the price lattice. To value a different terminal rule, subclass
Payoff and implement the evaluate() method, or wrap a function in
CustomPayoff.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

import numpy as np

from .errors import ConfigurationError
from .gbm import ContractParameters


class Payoff(ABC):
    """Abstract base class for terminal grant payoffs."""

    @abstractmethod
    def evaluate(self, prices: np.ndarray) -> np.ndarray:
        """
        Evaluate the payoff at maturity.

        Args:
            prices: Per-share prices at maturity with shape (n,)

        Returns:
            Array of payoff values with shape (n,)
        """
        pass


@dataclass(frozen=True)
class LinearAccrualPayoff(Payoff):
    """
    Grant held to maturity: (S(T) - strike_rate) * duration

    One share accrues per unit time at the strike rate, so holding the grant
    for the full duration nets the per-share margin times the duration.

    Attributes:
        strike_rate: Charged per share per unit time
        duration: Total horizon of the grant
    """

    strike_rate: float
    duration: float

    def __post_init__(self):
        if self.duration <= 0:
            raise ConfigurationError("Duration must be positive")

    @classmethod
    def from_params(cls, params: ContractParameters) -> "LinearAccrualPayoff":
        return cls(strike_rate=params.strike_rate, duration=params.duration)

    def evaluate(self, prices: np.ndarray) -> np.ndarray:
        """Evaluate (S(T) - strike_rate) * duration"""
        return (np.asarray(prices, dtype=float) - self.strike_rate) * self.duration


class CustomPayoff(Payoff):
    """
    Terminal payoff defined by a user-provided function.

    Example:
        # Only positive margins count
        floored = CustomPayoff(lambda s: np.maximum(s - 1.5, 0.0) * 4)
    """

    def __init__(self, payoff_func: Callable[[np.ndarray], np.ndarray]):
        self._payoff_func = payoff_func

    def evaluate(self, prices: np.ndarray) -> np.ndarray:
        """Evaluate the custom payoff function."""
        payoffs = np.asarray(self._payoff_func(np.asarray(prices, dtype=float)), dtype=float)
        if payoffs.shape != np.shape(prices):
            raise ConfigurationError(
                f"Payoff function returned shape {payoffs.shape}, "
                f"expected {np.shape(prices)}"
            )
        return payoffs
