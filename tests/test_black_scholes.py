"""
Tests for the closed-form Black-Scholes evaluator.
"""

import math

import pytest

from bs_pricer.analytics.black_scholes import (
    OptionType,
    bs_price,
    intrinsic_value,
    norm_cdf,
    norm_pdf,
    price_with_greeks,
)
from bs_pricer.greeks.types import ZERO_GREEKS, Greeks
from tests.utils.black_scholes import (
    black_scholes_call,
    black_scholes_delta_call,
    black_scholes_delta_put,
    black_scholes_gamma,
    black_scholes_put,
    black_scholes_vega,
)
from tests.utils.black_scholes import norm_cdf as exact_norm_cdf

GREEK_FIELDS = ("price", "delta", "gamma", "theta", "vega", "rho")


def assert_zero_greeks(greeks: Greeks, price: float = 0.0):
    assert greeks.price == pytest.approx(price, abs=0.01)
    for name in GREEK_FIELDS[1:]:
        assert getattr(greeks, name) == 0.0, name


class TestNormalDistribution:
    """Tests for the normal CDF approximation and PDF."""

    def test_cdf_at_zero(self):
        assert abs(norm_cdf(0.0) - 0.5) < 1e-6

    @pytest.mark.parametrize("x", [0.1, 0.5, 1.0, 1.96, 2.5, 4.0, 8.0, 40.0])
    def test_cdf_symmetry(self, x):
        assert abs(norm_cdf(-x) + norm_cdf(x) - 1.0) < 3e-7

    @pytest.mark.parametrize("x", [-6.0, -3.0, -1.5, -0.3, 0.0, 0.7, 1.2, 2.8, 5.0])
    def test_cdf_matches_erf(self, x):
        """Rational approximation stays within its published error bound."""
        assert abs(norm_cdf(x) - exact_norm_cdf(x)) < 1e-7

    def test_cdf_tails(self):
        assert norm_cdf(-50.0) == pytest.approx(0.0, abs=1e-12)
        assert norm_cdf(50.0) == pytest.approx(1.0, abs=1e-12)

    def test_pdf(self):
        assert norm_pdf(0.0) == pytest.approx(1.0 / math.sqrt(2.0 * math.pi))
        assert norm_pdf(1.3) == pytest.approx(norm_pdf(-1.3))


class TestOptionType:
    """Tests for option type parsing."""

    @pytest.mark.parametrize("value", ["call", "CALL", "Call", OptionType.CALL])
    def test_parse_call(self, value):
        assert OptionType.parse(value) is OptionType.CALL

    def test_parse_put(self):
        assert OptionType.parse("put") is OptionType.PUT

    def test_invalid_type_raises(self):
        with pytest.raises(ValueError, match="option_type must be 'call' or 'put'"):
            OptionType.parse("straddle")

    def test_evaluator_rejects_invalid_type(self):
        with pytest.raises(ValueError):
            price_with_greeks(100, 100, 1.0, 0.05, 0.2, "binary")


class TestScenarios:
    """End-to-end pricing scenarios."""

    def test_atm_call(self):
        g = price_with_greeks(100, 100, 1.0, 0.05, 0.20, OptionType.CALL)

        assert g.price == pytest.approx(10.4506, abs=0.05)
        assert g.delta == pytest.approx(0.6368, abs=0.01)
        assert g.gamma > 0
        assert g.theta < 0
        assert g.rho > 0

    def test_atm_put_and_parity(self):
        call = price_with_greeks(100, 100, 1.0, 0.05, 0.20, "call")
        put = price_with_greeks(100, 100, 1.0, 0.05, 0.20, "put")

        assert put.delta < 0
        assert put.rho < 0
        assert put.theta < 0
        assert call.price - put.price == pytest.approx(100 - 100 * math.exp(-0.05), abs=0.01)

    def test_deep_itm_call(self):
        g = price_with_greeks(200, 50, 1.0, 0.05, 0.20, "call")

        assert g.price > 145
        assert g.delta == pytest.approx(1.0, abs=0.01)

    def test_deep_otm_call(self):
        g = price_with_greeks(50, 200, 1.0, 0.05, 0.20, "call")

        assert g.price < 0.01
        assert g.price >= 0.0
        assert g.delta == pytest.approx(0.0, abs=0.01)

    def test_expired_call_is_intrinsic(self):
        assert_zero_greeks(price_with_greeks(100, 90, 0.0, 0.05, 0.20, "call"), price=10.0)

    def test_nan_spot_gives_zero_record(self):
        assert price_with_greeks(math.nan, 100, 1.0, 0.05, 0.20, "call") == ZERO_GREEKS

    def test_zero_vol_atm_is_intrinsic(self):
        """At the money, intrinsic value is zero whatever the rate."""
        assert_zero_greeks(price_with_greeks(100, 100, 1.0, 0.05, 0.0, "call"), price=0.0)

    def test_zero_vol_itm_is_intrinsic(self):
        assert_zero_greeks(price_with_greeks(100, 90, 1.0, 0.05, 0.0, "call"), price=10.0)


class TestDegenerateInputs:
    """Degenerate inputs never raise and never produce non-finite fields."""

    @pytest.mark.parametrize(
        "args",
        [
            (math.inf, 100, 1.0, 0.05, 0.2),
            (100, math.nan, 1.0, 0.05, 0.2),
            (100, 100, math.inf, 0.05, 0.2),
            (100, 100, 1.0, math.nan, 0.2),
            (100, 100, 1.0, 0.05, -math.inf),
        ],
    )
    def test_non_finite_inputs(self, args):
        assert price_with_greeks(*args, "call") == ZERO_GREEKS
        assert price_with_greeks(*args, "put") == ZERO_GREEKS

    def test_non_finite_dividend(self):
        assert price_with_greeks(100, 100, 1.0, 0.05, 0.2, "call", q=math.nan) == ZERO_GREEKS

    def test_negative_time_is_intrinsic(self):
        assert_zero_greeks(price_with_greeks(90, 100, -0.5, 0.05, 0.2, "put"), price=10.0)

    def test_negative_vol_is_intrinsic(self):
        assert_zero_greeks(price_with_greeks(120, 100, 1.0, 0.05, -0.2, "call"), price=20.0)

    def test_zero_spot(self):
        assert_zero_greeks(price_with_greeks(0.0, 100, 1.0, 0.05, 0.2, "put"), price=100.0)
        assert_zero_greeks(price_with_greeks(0.0, 100, 1.0, 0.05, 0.2, "call"), price=0.0)

    def test_negative_strike_floors_at_zero(self):
        g = price_with_greeks(100, -10, 1.0, 0.05, 0.2, "put")
        assert_zero_greeks(g, price=0.0)

    @pytest.mark.parametrize(
        "S,K,option_type",
        [(1e308, -1e308, "call"), (-1e308, 1e308, "put")],
    )
    def test_overflowing_intrinsic_value(self, S, K, option_type):
        assert price_with_greeks(S, K, 1.0, 0.05, 0.2, option_type) == ZERO_GREEKS

    @pytest.mark.parametrize(
        "args",
        [
            (1e-300, 1e300, 1.0, 0.05, 0.2),
            (1e300, 1e-300, 1.0, 0.05, 0.2),
            (100, 100, 1e-300, 0.05, 1e-300),
            (100, 100, 1.0, 800.0, 0.2),
            (100, 100, 1.0, -800.0, 0.2),
            (100, 100, 1e6, 0.05, 1e6),
        ],
    )
    def test_extreme_inputs_stay_finite(self, args):
        for option_type in ("call", "put"):
            g = price_with_greeks(*args, option_type)
            for name in GREEK_FIELDS:
                assert math.isfinite(getattr(g, name)), name
            assert g.price >= 0.0


class TestAgainstReference:
    """Compare with the erf-based reference formulas."""

    @pytest.mark.parametrize(
        "S,K,T,r,sigma,q",
        [
            (100, 100, 1.0, 0.05, 0.2, 0.0),
            (100, 110, 0.5, 0.03, 0.25, 0.0),
            (100, 90, 2.0, 0.01, 0.35, 0.02),
            (50, 55, 0.25, 0.04, 0.6, 0.01),
            (100000, 110000, 1.0, 0.045, 0.6, 0.0),
        ],
    )
    def test_price_and_greeks(self, S, K, T, r, sigma, q):
        call = price_with_greeks(S, K, T, r, sigma, "call", q)
        put = price_with_greeks(S, K, T, r, sigma, "put", q)

        # Φ error is at most ~7.5e-8, scaled by S and K
        tol = 1e-6 * max(S, K)
        assert call.price == pytest.approx(black_scholes_call(S, K, T, r, sigma, q), abs=tol)
        assert put.price == pytest.approx(black_scholes_put(S, K, T, r, sigma, q), abs=tol)
        assert call.delta == pytest.approx(black_scholes_delta_call(S, K, T, r, sigma, q), abs=1e-6)
        assert put.delta == pytest.approx(black_scholes_delta_put(S, K, T, r, sigma, q), abs=1e-6)
        assert call.gamma == pytest.approx(black_scholes_gamma(S, K, T, r, sigma, q), rel=1e-9)
        assert call.gamma == put.gamma

    def test_greek_scaling(self):
        """Vega and rho are per percentage point, theta per calendar day."""
        S, K, T, r, sigma = 100, 100, 1.0, 0.05, 0.2
        g = price_with_greeks(S, K, T, r, sigma, "call")

        assert g.vega == pytest.approx(black_scholes_vega(S, K, T, r, sigma) / 100, rel=1e-9)
        assert g.vega == pytest.approx(0.3752, abs=1e-3)
        assert g.rho == pytest.approx(0.5323, abs=1e-3)
        assert g.theta == pytest.approx(-6.414 / 365, abs=1e-4)

    def test_bs_price_matches_record(self):
        g = price_with_greeks(100, 95, 0.75, 0.03, 0.3, "put", 0.01)
        assert bs_price(100, 95, 0.75, 0.03, 0.3, "put", 0.01) == g.price


class TestDividendYield:
    """Tests for the continuous dividend yield."""

    def test_dividend_lowers_call_raises_put(self):
        call_0 = bs_price(100, 100, 1.0, 0.05, 0.2, "call", 0.0)
        call_q = bs_price(100, 100, 1.0, 0.05, 0.2, "call", 0.03)
        put_0 = bs_price(100, 100, 1.0, 0.05, 0.2, "put", 0.0)
        put_q = bs_price(100, 100, 1.0, 0.05, 0.2, "put", 0.03)

        assert call_q < call_0
        assert put_q > put_0

    def test_parity_with_dividend(self):
        S, K, T, r, sigma, q = 100, 105, 0.5, 0.04, 0.3, 0.025
        call = bs_price(S, K, T, r, sigma, "call", q)
        put = bs_price(S, K, T, r, sigma, "put", q)
        assert call - put == pytest.approx(S * math.exp(-q * T) - K * math.exp(-r * T), abs=1e-2)

    def test_delta_discounted_by_dividend(self):
        g = price_with_greeks(100, 100, 1.0, 0.05, 0.2, "call", 0.03)
        assert g.delta < math.exp(-0.03)


class TestIntrinsicValue:
    """Tests for intrinsic value."""

    def test_call(self):
        assert intrinsic_value(110, 100, "call") == 10
        assert intrinsic_value(90, 100, "call") == 0

    def test_put(self):
        assert intrinsic_value(90, 100, "put") == 10
        assert intrinsic_value(110, 100, "put") == 0


class TestGreeksRecord:
    """Tests for the Greeks value type."""

    def test_scaled_and_add(self):
        g = Greeks(price=1.0, delta=0.5, gamma=0.1, theta=-0.01, vega=0.2, rho=0.3)
        total = g + g.scaled(-2.0)

        assert total.price == pytest.approx(-1.0)
        assert total.delta == pytest.approx(-0.5)
        assert total.rho == pytest.approx(-0.3)

    def test_to_dict(self):
        assert ZERO_GREEKS.to_dict() == dict.fromkeys(GREEK_FIELDS, 0.0)

    def test_frozen(self):
        with pytest.raises(AttributeError):
            ZERO_GREEKS.price = 1.0
