"""
Recombining binomial lattice for the grant's underlying and its value.

Node (t, i) is the state after t steps of which i were up-moves. With

    u = exp(σ dt),   d = exp(-σ dt) = 1/u,   p = (exp(r dt) - d) / (u - d)

the price at (t, i) is S(0) u^i d^(t-i), and the grant value is obtained by
backward induction from the terminal payoff:

    V(t, i) = p V(t+1, i+1) + (1 - p) V(t+1, i)

No per-step discount factor is applied to the recursion.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import numpy as np

from .errors import ArbitrageError, ConfigurationError
from .gbm import ContractParameters
from .payoffs import LinearAccrualPayoff, Payoff

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LatticeParameters:
    """Up factor, down factor and risk-neutral up-probability."""

    u: float
    d: float
    p: float

    @property
    def q(self) -> float:
        """Risk-neutral down-probability."""
        return 1.0 - self.p


class Lattice:
    """
    Immutable triangular lattice.

    ``levels[t]`` is a read-only array of t + 1 entries indexed by the number
    of up-moves.
    """

    def __init__(self, levels: Iterable[np.ndarray]):
        frozen = []
        for t, level in enumerate(levels):
            arr = np.array(level, dtype=float)
            if arr.shape != (t + 1,):
                raise ConfigurationError(
                    f"Level {t} must hold {t + 1} entries, got shape {arr.shape}"
                )
            arr.flags.writeable = False
            frozen.append(arr)
        if not frozen:
            raise ConfigurationError("Lattice needs at least one level")
        self.levels: Tuple[np.ndarray, ...] = tuple(frozen)

    def __len__(self) -> int:
        return len(self.levels)

    def __getitem__(self, t: int) -> np.ndarray:
        return self.levels[t]

    def __iter__(self):
        return iter(self.levels)

    def __repr__(self) -> str:
        return f"Lattice(n_steps={self.n_steps})"

    @property
    def n_steps(self) -> int:
        return len(self.levels) - 1

    @property
    def terminal(self) -> np.ndarray:
        return self.levels[-1]

    def as_array(self) -> np.ndarray:
        """Dense (N + 1, N + 1) array, NaN above the diagonal."""
        size = len(self.levels)
        dense = np.full((size, size), np.nan)
        for t, level in enumerate(self.levels):
            dense[t, : t + 1] = level
        return dense


def lattice_params(params: ContractParameters) -> LatticeParameters:
    """
    Derive (u, d, p) for the contract's time step.

    Raises:
        ConfigurationError: if u and d are equal in floating point
        ArbitrageError: if p falls outside [0, 1]
    """
    dt = params.time_step
    u = math.exp(params.volatility * dt)
    d = 1.0 / u
    if u <= d:
        raise ConfigurationError(
            "Volatility too small for the time step: u and d coincide"
        )
    growth = math.exp(params.interest_rate * dt)
    p = (growth - d) / (u - d)

    if not (0.0 <= p <= 1.0):
        raise ArbitrageError(u=u, d=d, p=p, growth=growth)

    return LatticeParameters(u=u, d=d, p=p)


def price_lattice(params: ContractParameters) -> Lattice:
    """
    Build the forward price lattice with N + 1 levels.

    Each level is the previous one moved down, plus one new top node moved
    up from the previous level's highest price.
    """
    lp = lattice_params(params)
    n_steps = params.n_steps

    levels = [np.array([params.initial_price])]
    for _ in range(n_steps):
        prev = levels[-1]
        levels.append(np.append(prev * lp.d, prev[-1] * lp.u))

    logger.debug(
        "Built price lattice: N=%d, u=%.6f, d=%.6f, p=%.6f",
        n_steps, lp.u, lp.d, lp.p,
    )
    return Lattice(levels)


def value_lattice(
    prices: Lattice,
    params: ContractParameters,
    payoff: Optional[Payoff] = None,
) -> Lattice:
    """
    Backward-induce the grant value at every node of the price lattice.

    Args:
        prices: Price lattice from price_lattice()
        params: Contract parameters used to build the lattice
        payoff: Terminal payoff rule (default: LinearAccrualPayoff)

    Returns:
        Lattice with the same shape as ``prices``
    """
    if prices.n_steps != params.n_steps:
        raise ConfigurationError(
            f"Price lattice has {prices.n_steps} steps, "
            f"contract requires {params.n_steps}"
        )

    lp = lattice_params(params)
    if payoff is None:
        payoff = LinearAccrualPayoff.from_params(params)

    levels = [payoff.evaluate(prices.terminal)]
    for _ in range(prices.n_steps):
        nxt = levels[-1]
        levels.append(lp.p * nxt[1:] + lp.q * nxt[:-1])
    levels.reverse()

    logger.debug("Built value lattice: V(0, 0)=%.6f", levels[0][0])
    return Lattice(levels)


def build_lattice(params: ContractParameters) -> Tuple[Lattice, Lattice]:
    """Build the price lattice and its value lattice."""
    prices = price_lattice(params)
    return prices, value_lattice(prices, params)
