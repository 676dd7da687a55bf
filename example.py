#!/usr/bin/env python3
"""
Example usage of the grant valuation library.

Values a four-year grant with a one-year cliff under optimal abandonment,
compares it with the value when the grant can be abandoned at any time,
and shows a simulated path of the underlying.
"""

import argparse
import logging
from dataclasses import replace

import numpy as np

from grant_value import (
    ContractParameters,
    PathSimulator,
    build_lattice,
    lattice_params,
    simulate,
)
from grant_value.stats import delta, probability_above_strike


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--runs", type=int, default=10_000, help="Monte Carlo runs")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    params = ContractParameters(
        initial_price=1.0,
        drift=0.2,
        volatility=0.4,
        strike_rate=1.5,
        cliff=1.0,
        duration=4.0,
        time_step=1 / 12,
        interest_rate=0.1,
    )

    print("=" * 60)
    print("Vesting Grant Valuation")
    print("=" * 60)
    print("\nContract Parameters:")
    print(f"  Initial price:    {params.initial_price:.2f}")
    print(f"  Drift:            {params.drift:.1%}")
    print(f"  Volatility:       {params.volatility:.1%}")
    print(f"  Strike rate:      {params.strike_rate:.2f}")
    print(f"  Cliff:            {params.cliff:.2f}")
    print(f"  Duration:         {params.duration:.2f}")
    print(f"  Time step:        {params.time_step:.4f} ({params.n_steps} steps)")
    print(f"  Interest rate:    {params.interest_rate:.1%}")

    lp = lattice_params(params)
    prices, values = build_lattice(params)

    print("\n" + "-" * 60)
    print("Lattice")
    print("-" * 60)
    print(f"  u = {lp.u:.6f}, d = {lp.d:.6f}, p = {lp.p:.6f}")
    print(f"  Terminal prices: [{prices.terminal[0]:.4f}, {prices.terminal[-1]:.4f}]")
    print(f"  Value at inception: {values[0][0]:.6f}")

    print("\n" + "-" * 60)
    print("Optimal Stopping")
    print("-" * 60)

    result = simulate(params, values, args.runs, seed=args.seed)
    print(f"  With cliff:    {result}")

    no_cliff = replace(params, cliff=0.0)
    result_no_cliff = simulate(no_cliff, values, args.runs, seed=args.seed)
    print(f"  Without cliff: {result_no_cliff}")
    print(f"  Value of early exit: {result_no_cliff.mean_value - result.mean_value:.6f}")

    print("\n" + "-" * 60)
    print("Path Simulation Example")
    print("-" * 60)

    simulator = PathSimulator(params, seed=args.seed)
    path = simulator.simulate_path()
    yearly = path[:: params.n_steps // 4]
    print(f"  Simulated path with {len(path)} points")
    print(f"  Yearly samples: {np.round(yearly, 4)}")

    time_left = params.duration - params.cliff
    cliff_value = path[int(round(params.cliff / params.time_step))]
    print(f"  Delta at cliff: {delta(cliff_value, time_left, params):.4f}")
    print(
        f"  P(above strike) at cliff: "
        f"{probability_above_strike(cliff_value, time_left, params):.2%}"
    )

    print("\n" + "=" * 60)
    print("Simulation complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
