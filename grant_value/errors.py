"""Exceptions raised by the grant valuation engine."""


class ConfigurationError(ValueError):
    """Raised when contract or simulation parameters are invalid."""


class ArbitrageError(ValueError):
    """Raised when the lattice parameters admit an arbitrage.

    The risk-neutral probability ``p = (growth - d) / (u - d)`` is only a
    probability when ``d <= growth <= u``, where ``growth = exp(r * dt)``.
    Outside that range the lattice cannot be used for pricing.
    """

    def __init__(self, u: float, d: float, p: float, growth: float):
        self.u = u
        self.d = d
        self.p = p
        self.growth = growth
        super().__init__(
            f"Risk-neutral probability out of bounds: p={p:.6g} "
            f"(u={u:.6g}, d={d:.6g}, exp(r*dt)={growth:.6g}). "
            "Check interest_rate against volatility."
        )
