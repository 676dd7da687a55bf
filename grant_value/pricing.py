"""
Optimal-stopping simulation of a vesting grant.

Grant values come from the risk-neutral value lattice. The exercise-timing
walk through that lattice uses the real-world assumption of equal up and
down likelihood:

1. Draw N fair coin flips; node index idx(t) counts the up-moves so far
2. Walk t = 1..N; once past the cliff and before maturity, abandon the
   grant as soon as the expected one-step change in value is negative
3. Average the value held and the stopping time over all runs
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .errors import ConfigurationError
from .gbm import ContractParameters
from .lattice import Lattice, build_lattice, lattice_params

logger = logging.getLogger(__name__)

# Up-probability of the exercise walk (real-world measure)
WALK_UP_PROBABILITY = 0.5

# Runs simulated per batch; progress is logged after each batch
BATCH_SIZE = 10_000


@dataclass
class SimulationResult:
    """Result of an optimal-stopping simulation."""

    mean_value: float  # Expected grant value
    mean_stopping_time: float  # Expected holding time (in units of time)
    value_std_error: float  # Standard error of mean_value
    stopping_time_std_error: float  # Standard error of mean_stopping_time
    n_runs: int  # Number of simulated runs
    confidence_interval_95: Tuple[float, float]  # 95% CI of mean_value

    def __str__(self) -> str:
        return (
            f"Value: {self.mean_value:.6f} "
            f"(SE: {self.value_std_error:.6f}, "
            f"95% CI: [{self.confidence_interval_95[0]:.6f}, "
            f"{self.confidence_interval_95[1]:.6f}]), "
            f"stopping time: {self.mean_stopping_time:.4f} "
            f"(SE: {self.stopping_time_std_error:.4f})"
        )


@dataclass(frozen=True)
class ExerciseWalk:
    """
    A batch of random walks through the lattice indices.

    Attributes:
        up_moves: Boolean array with shape (n_runs, N), True for an up-move
    """

    up_moves: np.ndarray

    @classmethod
    def generate(
        cls, rng: np.random.Generator, n_runs: int, n_steps: int
    ) -> "ExerciseWalk":
        """Draw n_runs independent sequences of N fair coin flips."""
        return cls(up_moves=rng.random((n_runs, n_steps)) < WALK_UP_PROBABILITY)

    @property
    def n_runs(self) -> int:
        return self.up_moves.shape[0]

    @property
    def n_steps(self) -> int:
        return self.up_moves.shape[1]

    @property
    def indices(self) -> np.ndarray:
        """Node index at every level, shape (n_runs, N + 1), starting at 0."""
        idx = np.zeros((self.n_runs, self.n_steps + 1), dtype=np.intp)
        idx[:, 1:] = np.cumsum(self.up_moves, axis=1)
        return idx


class OptimalStoppingSimulator:
    """
    Monte Carlo estimator of grant value under optimal abandonment.

    The value lattice is built once and only read by the simulation.
    """

    def __init__(
        self,
        params: ContractParameters,
        values: Lattice,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Initialize the simulator.

        Args:
            params: Contract parameters the lattice was built from
            values: Value lattice from value_lattice()
            seed: Random seed for reproducibility (ignored if rng is given)
            rng: Generator to draw the exercise walks from
        """
        if values.n_steps != params.n_steps:
            raise ConfigurationError(
                f"Value lattice has {values.n_steps} steps, "
                f"contract requires {params.n_steps}"
            )
        self.params = params
        self.values = values
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        # Risk-neutral probability used for the continuation value
        self.risk_neutral_p = lattice_params(params).p
        self._dense = values.as_array()
        n_steps = params.n_steps
        self._exit_allowed = np.array(
            [0 < t < n_steps and params.can_exit_at(t) for t in range(n_steps + 1)]
        )

    def walk(self, walks: ExerciseWalk) -> Tuple[np.ndarray, np.ndarray]:
        """
        Apply the stopping rule along the given walks.

        Returns:
            Tuple of (value held, stopping step) arrays with shape (n_runs,)
        """
        n_steps = self.params.n_steps
        if walks.n_steps != n_steps:
            raise ConfigurationError(
                f"Walks have {walks.n_steps} steps, contract requires {n_steps}"
            )

        p = self.risk_neutral_p
        dense = self._dense
        idx = walks.indices
        rows = np.arange(walks.n_runs)

        # Value of the node each walk sits on at every level
        node_values = dense[np.arange(n_steps + 1), idx]

        # Expected change from continuing one more step, decided at steps 1..N-1
        # while holding the value of the previous node
        steps = np.arange(1, n_steps)
        current = idx[:, 1:n_steps]
        continuation = (
            p * dense[steps + 1, current + 1]
            + (1 - p) * dense[steps + 1, current]
        )
        expected_change = continuation - node_values[:, : n_steps - 1]
        stop = (expected_change < 0) & self._exit_allowed[1:n_steps]

        stop_steps = np.full(walks.n_runs, n_steps, dtype=np.intp)
        held = node_values[:, n_steps].copy()
        if stop.shape[1] > 0:
            stopped = stop.any(axis=1)
            first = np.argmax(stop, axis=1) + 1
            stop_steps[stopped] = first[stopped]
            held[stopped] = node_values[rows[stopped], first[stopped] - 1]

        return held, stop_steps

    def run(self, n: int) -> SimulationResult:
        """
        Simulate n independent runs and aggregate them.

        Args:
            n: Number of runs (at least 1)

        Returns:
            SimulationResult with the mean value and mean stopping time
        """
        if n < 1:
            raise ConfigurationError("Number of runs must be at least 1")

        n_steps = self.params.n_steps
        held = np.empty(n)
        stop_steps = np.empty(n, dtype=np.intp)

        done = 0
        while done < n:
            size = min(BATCH_SIZE, n - done)
            walks = ExerciseWalk.generate(self.rng, size, n_steps)
            held[done:done + size], stop_steps[done:done + size] = self.walk(walks)
            done += size
            logger.debug("Simulated %d/%d runs", done, n)

        stop_times = stop_steps * self.params.time_step
        mean_value = float(np.mean(held))
        if n > 1:
            value_se = float(np.std(held, ddof=1) / np.sqrt(n))
            time_se = float(np.std(stop_times, ddof=1) / np.sqrt(n))
        else:
            value_se = time_se = float("nan")

        return SimulationResult(
            mean_value=mean_value,
            mean_stopping_time=float(np.mean(stop_times)),
            value_std_error=value_se,
            stopping_time_std_error=time_se,
            n_runs=n,
            confidence_interval_95=(
                mean_value - 1.96 * value_se,
                mean_value + 1.96 * value_se,
            ),
        )


def simulate(
    params: ContractParameters,
    values: Lattice,
    n: int,
    seed: Optional[int] = None,
) -> SimulationResult:
    """Run the optimal-stopping simulation on a prebuilt value lattice."""
    return OptimalStoppingSimulator(params, values, seed=seed).run(n)


def value_grant(
    params: ContractParameters, n: int, seed: Optional[int] = None
) -> SimulationResult:
    """Build the lattices for a contract and simulate n runs."""
    _, values = build_lattice(params)
    return simulate(params, values, n, seed=seed)
