"""Unit tests for the terminal payoff rules."""

import numpy as np
import pytest

from grant_value.errors import ConfigurationError
from grant_value.gbm import ContractParameters
from grant_value.payoffs import CustomPayoff, LinearAccrualPayoff, Payoff


class TestLinearAccrualPayoff:
    """Tests for the hold-to-maturity payoff."""

    def test_from_params(self):
        params = ContractParameters(
            initial_price=1, drift=0.2, volatility=0.4, strike_rate=1.5, duration=4
        )
        payoff = LinearAccrualPayoff.from_params(params)
        assert payoff.strike_rate == 1.5
        assert payoff.duration == 4

    def test_above_strike(self):
        payoff = LinearAccrualPayoff(strike_rate=1.5, duration=4)
        np.testing.assert_allclose(payoff.evaluate(np.array([2.0, 3.5])), [2.0, 8.0])

    def test_below_strike_is_negative(self):
        """Unlike an option, holding to maturity can lose money."""
        payoff = LinearAccrualPayoff(strike_rate=1.5, duration=4)
        np.testing.assert_allclose(payoff.evaluate(np.array([1.0, 0.5])), [-2.0, -4.0])

    def test_at_strike(self):
        payoff = LinearAccrualPayoff(strike_rate=1.5, duration=4)
        np.testing.assert_array_equal(payoff.evaluate(np.array([1.5])), [0.0])

    def test_accepts_lists(self):
        payoff = LinearAccrualPayoff(strike_rate=1.0, duration=2)
        np.testing.assert_allclose(payoff.evaluate([1, 2, 3]), [0.0, 2.0, 4.0])

    def test_non_positive_duration_raises(self):
        with pytest.raises(ConfigurationError, match="Duration must be positive"):
            LinearAccrualPayoff(strike_rate=1.0, duration=0)

    def test_is_payoff(self):
        assert isinstance(LinearAccrualPayoff(strike_rate=1.0, duration=1), Payoff)


class TestCustomPayoff:
    """Tests for user-defined payoffs."""

    def test_evaluates_function(self):
        floored = CustomPayoff(lambda s: np.maximum(s - 1.5, 0.0) * 4)
        np.testing.assert_allclose(floored.evaluate(np.array([1.0, 2.0])), [0.0, 2.0])

    def test_wrong_shape_raises(self):
        broken = CustomPayoff(lambda s: np.sum(s))
        with pytest.raises(ConfigurationError, match="shape"):
            broken.evaluate(np.array([1.0, 2.0]))

    def test_cannot_instantiate_base(self):
        with pytest.raises(TypeError):
            Payoff()
