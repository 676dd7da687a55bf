"""
Contract parameters and Geometric Brownian Motion path simulation.

The underlying per-share value is modelled as GBM and advanced with

    S(t + dt) = S(t) * exp(μ dt + σ √dt Z),    Z ~ N(0, 1)

where:
    μ = drift
    σ = volatility
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .errors import ConfigurationError

# Tolerance used when accumulating time steps up to the contract duration
EPSILON = 1e-6


@dataclass(frozen=True)
class ContractParameters:
    """Parameters of a vesting grant and of its underlying."""

    initial_price: float  # Per-share value on day 0
    drift: float  # Drift of the underlying (per unit time)
    volatility: float  # Volatility of the underlying (per unit time)
    strike_rate: float  # Charged per share per unit time
    cliff: float = 1.0  # Earliest time at which the grant can be abandoned
    duration: float = 4.0  # Total horizon
    time_step: float = 0.01  # dt
    interest_rate: float = 0.0  # Risk-free rate

    def __post_init__(self):
        # Written as negated comparisons so that NaN is rejected
        if not self.initial_price > 0:
            raise ConfigurationError("Initial price must be positive")
        if not self.volatility > 0:
            raise ConfigurationError("Volatility must be positive")
        if not self.time_step > 0:
            raise ConfigurationError("Time step must be positive")
        if not self.cliff >= 0:
            raise ConfigurationError("Cliff cannot be negative")
        if not math.isfinite(self.duration):
            raise ConfigurationError("Duration must be finite")
        if not self.duration > self.cliff:
            raise ConfigurationError("Duration must be greater than the cliff")

    @property
    def n_steps(self) -> int:
        """
        Number of time steps N covering the duration.

        Time is accumulated step by step and compared against
        ``duration - EPSILON`` so that rounding in ``dt`` does not add or
        drop a step.
        """
        steps = 0
        elapsed = 0.0
        while elapsed < self.duration - EPSILON:
            elapsed += self.time_step
            steps += 1
        return steps

    def time_grid(self) -> np.ndarray:
        """Times of the N + 1 lattice levels, starting at 0."""
        return np.arange(self.n_steps + 1) * self.time_step

    def can_exit_at(self, step: int) -> bool:
        """Whether the grant may be abandoned at the given step."""
        return step * self.time_step >= self.cliff - EPSILON


class RandomNormal:
    """
    Normal deviates from the Box-Muller transform.

    Uniforms come from ``rng.random()``, which samples [0, 1), so
    ``1 - u2`` lies in (0, 1] and the logarithm is always finite.
    """

    def __init__(self, rng: np.random.Generator):
        self.rng = rng

    def sample(self, mean: float = 0.0, stddev: float = 1.0) -> float:
        theta = 2 * math.pi * self.rng.random()
        rho = math.sqrt(-2 * math.log(1 - self.rng.random()))
        return mean + stddev * rho * math.cos(theta)

    def samples(self, size, mean: float = 0.0, stddev: float = 1.0) -> np.ndarray:
        """Vectorized form of :meth:`sample`."""
        theta = 2 * np.pi * self.rng.random(size)
        rho = np.sqrt(-2 * np.log(1 - self.rng.random(size)))
        return mean + stddev * rho * np.cos(theta)


class PathSimulator:
    """
    Simulator for sample paths of the grant's underlying.

    Each call draws a fresh path; pass a seed (or a shared generator) to
    make the draws reproducible.
    """

    def __init__(
        self,
        params: ContractParameters,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Initialize the path simulator.

        Args:
            params: Contract parameters
            seed: Random seed for reproducibility (ignored if rng is given)
            rng: Generator to draw from, shared with other components
        """
        self.params = params
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.normal = RandomNormal(self.rng)

    def simulate_path(self) -> np.ndarray:
        """
        Simulate one path from time 0 to the contract duration.

        Returns:
            Array of prices with shape (N + 1,), first entry the initial price
        """
        p = self.params
        dt = p.time_step
        drift_term = p.drift * dt
        vol_term = p.volatility * math.sqrt(dt)

        path = [p.initial_price]
        elapsed = 0.0
        while elapsed < p.duration - EPSILON:
            elapsed += dt
            z = self.normal.sample(0.0, 1.0)
            path.append(path[-1] * math.exp(drift_term + vol_term * z))

        return np.array(path)

    def simulate_paths(self, n_paths: int) -> np.ndarray:
        """
        Simulate independent paths in one batch.

        Returns:
            Array of shape (n_paths, N + 1)
        """
        if n_paths < 1:
            raise ConfigurationError("Number of paths must be at least 1")

        p = self.params
        n_steps = p.n_steps
        dt = p.time_step

        z = self.normal.samples((n_paths, n_steps))
        log_returns = p.drift * dt + p.volatility * np.sqrt(dt) * z

        paths = np.empty((n_paths, n_steps + 1))
        paths[:, 0] = p.initial_price
        paths[:, 1:] = p.initial_price * np.exp(np.cumsum(log_returns, axis=1))
        return paths


def simulate_path(params: ContractParameters, seed: Optional[int] = None) -> np.ndarray:
    """Simulate a single GBM path for the given contract."""
    return PathSimulator(params, seed=seed).simulate_path()
