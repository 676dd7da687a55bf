"""
Vesting Grant Valuation Library

Values a restricted equity-compensation grant as a real option: the
underlying follows Geometric Brownian Motion (GBM), a recombining binomial
lattice gives the grant value at every node, and a Monte Carlo walk through
the lattice estimates the value and holding time under optimal abandonment.
"""

from .errors import ArbitrageError, ConfigurationError
from .gbm import ContractParameters, PathSimulator, RandomNormal, simulate_path
from .lattice import (
    Lattice,
    LatticeParameters,
    build_lattice,
    lattice_params,
    price_lattice,
    value_lattice,
)
from .payoffs import CustomPayoff, LinearAccrualPayoff, Payoff
from .pricing import (
    ExerciseWalk,
    OptimalStoppingSimulator,
    SimulationResult,
    simulate,
    value_grant,
)
from .stats import delta, normal_cdf, probability_above_strike

__all__ = [
    "ArbitrageError",
    "ConfigurationError",
    "ContractParameters",
    "PathSimulator",
    "RandomNormal",
    "simulate_path",
    "Lattice",
    "LatticeParameters",
    "build_lattice",
    "lattice_params",
    "price_lattice",
    "value_lattice",
    "Payoff",
    "LinearAccrualPayoff",
    "CustomPayoff",
    "ExerciseWalk",
    "OptimalStoppingSimulator",
    "SimulationResult",
    "simulate",
    "value_grant",
    "delta",
    "normal_cdf",
    "probability_above_strike",
]
