"""
Tests for the implied volatility solver.
"""

import math

import pytest

from bs_pricer.analytics.black_scholes import bs_price
from bs_pricer.analytics.implied_vol import (
    DEFAULT_INITIAL_GUESS,
    IV_MAX,
    IV_MIN,
    implied_vol,
)


class TestImpliedVolRecovery:
    """Test that implied_vol recovers the true volatility."""

    def test_round_trip_atm(self):
        price = bs_price(100, 100, 1.0, 0.05, 0.30, "call")
        iv = implied_vol(price, 100, 100, 1.0, 0.05, "call")
        assert abs(iv - 0.30) < 1e-3

    @pytest.mark.parametrize("initial_guess", [0.05, 0.15, 0.8, 2.5])
    def test_round_trip_from_other_guesses(self, initial_guess):
        price = bs_price(100, 100, 1.0, 0.05, 0.30, "put")
        iv = implied_vol(price, 100, 100, 1.0, 0.05, "put", initial_guess=initial_guess)
        assert abs(iv - 0.30) < 1e-3

    def test_deep_otm_call(self):
        price = bs_price(100, 200, 0.5, 0.05, 0.40, "call")
        iv = implied_vol(price, 100, 200, 0.5, 0.05, "call")
        assert abs(iv - 0.40) < 2e-2

    def test_crypto_scale(self):
        S, K, T, r, sigma = 100000, 110000, 1.0, 0.045, 0.60
        price = bs_price(S, K, T, r, sigma, "call")

        assert 0 < price < S
        iv = implied_vol(price, S, K, T, r, "call")
        assert abs(iv - sigma) < 2e-2

    @pytest.mark.parametrize("sigma", [0.05, 0.2, 0.5, 1.0, 2.0])
    @pytest.mark.parametrize("K", [90, 100, 110])
    @pytest.mark.parametrize("option_type", ["call", "put"])
    def test_round_trip_grid(self, sigma, K, option_type):
        price = bs_price(100, K, 0.5, 0.03, sigma, option_type)
        iv = implied_vol(price, 100, K, 0.5, 0.03, option_type)
        assert abs(iv - sigma) < 2e-2

    def test_dividend_must_be_passed(self):
        """The solver does not infer q; it must match the pricing q."""
        price = bs_price(100, 100, 1.0, 0.05, 0.25, "call", q=0.04)

        with_q = implied_vol(price, 100, 100, 1.0, 0.05, "call", q=0.04)
        without_q = implied_vol(price, 100, 100, 1.0, 0.05, "call")

        assert abs(with_q - 0.25) < 1e-3
        assert abs(without_q - 0.25) > 1e-2


class TestGuards:
    """Invalid inputs return the initial guess unchanged."""

    def test_zero_price(self):
        assert implied_vol(0.0, 100, 100, 1.0, 0.05, "call") == DEFAULT_INITIAL_GUESS

    def test_nan_price(self):
        assert implied_vol(math.nan, 100, 100, 1.0, 0.05, "call") == 0.30

    @pytest.mark.parametrize(
        "args",
        [
            (-1.0, 100, 100, 1.0, 0.05),
            (10.0, 0.0, 100, 1.0, 0.05),
            (10.0, 100, -5.0, 1.0, 0.05),
            (10.0, 100, 100, 0.0, 0.05),
            (10.0, 100, 100, 1.0, math.inf),
            (math.inf, 100, 100, 1.0, 0.05),
        ],
    )
    def test_custom_guess_returned(self, args):
        assert implied_vol(*args, "put", initial_guess=0.55) == 0.55

    def test_non_finite_guess_falls_back_to_default(self):
        price = bs_price(100, 100, 1.0, 0.05, 0.30, "call")
        iv = implied_vol(price, 100, 100, 1.0, 0.05, "call", initial_guess=math.nan)
        assert abs(iv - 0.30) < 1e-3

    def test_invalid_option_type_raises(self):
        with pytest.raises(ValueError):
            implied_vol(10.0, 100, 100, 1.0, 0.05, "forward")


class TestBounds:
    """Unachievable prices saturate at the volatility bounds."""

    def test_price_above_ceiling_saturates_high(self):
        iv = implied_vol(150.0, 100, 100, 1.0, 0.05, "call")
        assert IV_MAX - 0.01 < iv <= IV_MAX

    def test_price_below_floor_saturates_low(self):
        iv = implied_vol(0.5, 200, 50, 1.0, 0.05, "call")
        assert IV_MIN <= iv < IV_MIN + 0.01

    @pytest.mark.parametrize("market_price", [1e-6, 0.01, 3.0, 25.0, 99.0, 1e6])
    def test_result_always_in_range(self, market_price):
        for option_type in ("call", "put"):
            iv = implied_vol(market_price, 100, 100, 0.25, 0.05, option_type)
            assert math.isfinite(iv)
            assert IV_MIN <= iv <= IV_MAX

    def test_short_expiry_otm(self):
        """Near-zero vega at the start forces the bisection phase."""
        price = bs_price(100, 120, 0.02, 0.05, 1.5, "call")
        iv = implied_vol(price, 100, 120, 0.02, 0.05, "call", initial_guess=0.05)
        assert abs(iv - 1.5) < 2e-2
