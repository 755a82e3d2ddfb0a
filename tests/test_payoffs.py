"""
Unit tests for plain vanilla option payoffs.
"""

import numpy as np
import pytest

from bs_pricer.payoffs.plain_vanilla import EuropeanCallPayoff, EuropeanPutPayoff, payoff_for


class TestEuropeanCallPayoff:
    """Test suite for European call payoff."""

    def test_invalid_strike(self):
        """Test that non-positive strike raises ValueError."""
        with pytest.raises(ValueError, match="Strike price must be positive"):
            EuropeanCallPayoff(strike=0)

        with pytest.raises(ValueError, match="Strike price must be positive"):
            EuropeanCallPayoff(strike=-100)

    def test_payoff(self):
        payoff = EuropeanCallPayoff(strike=100)
        S_T = np.array([50, 90, 100, 110, 150])
        assert np.allclose(payoff(S_T), [0, 0, 0, 10, 50])

    def test_monotonicity(self):
        """Test that call payoff is monotonically increasing in spot."""
        payoffs = EuropeanCallPayoff(strike=100)(np.linspace(50, 150, 100))
        assert np.all(np.diff(payoffs) >= 0)

    def test_repr(self):
        payoff = EuropeanCallPayoff(strike=100)
        assert "EuropeanCallPayoff" in repr(payoff)
        assert "100" in repr(payoff)


class TestEuropeanPutPayoff:
    """Test suite for European put payoff."""

    def test_invalid_strike(self):
        with pytest.raises(ValueError, match="Strike price must be positive"):
            EuropeanPutPayoff(strike=0)

    def test_payoff(self):
        payoff = EuropeanPutPayoff(strike=100)
        S_T = np.array([50, 90, 100, 110, 150])
        assert np.allclose(payoff(S_T), [50, 10, 0, 0, 0])

    def test_monotonicity(self):
        """Test that put payoff is monotonically decreasing in spot."""
        payoffs = EuropeanPutPayoff(strike=100)(np.linspace(50, 150, 100))
        assert np.all(np.diff(payoffs) <= 0)


class TestPayoffFor:
    """Test payoff selection by option type."""

    def test_call(self):
        assert isinstance(payoff_for("call", 100.0), EuropeanCallPayoff)

    def test_put(self):
        payoff = payoff_for("put", 95.0)
        assert isinstance(payoff, EuropeanPutPayoff)
        assert payoff.strike == 95.0

    def test_put_call_difference(self):
        """C_T - P_T = S_T - K at expiry."""
        S_T = np.linspace(50, 150, 21)
        diff = payoff_for("call", 100.0)(S_T) - payoff_for("put", 100.0)(S_T)
        assert np.allclose(diff, S_T - 100.0)
