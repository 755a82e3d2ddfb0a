"""
Black-Scholes analytical pricing formulas for European options.

This module provides closed-form pricing and Greeks for European calls and
puts with a continuous dividend yield. It is pure math: no I/O, no state,
and no exceptions for degenerate numeric inputs. Bad inputs collapse to
the zero record or to intrinsic value instead.
"""

import math
from enum import Enum

from bs_pricer.greeks.types import ZERO_GREEKS, Greeks

# Abramowitz & Stegun 7.1.26
_AS_P = 0.3275911
_AS_A1 = 0.254829592
_AS_A2 = -0.284496736
_AS_A3 = 1.421413741
_AS_A4 = -1.453152027
_AS_A5 = 1.061405429

_SQRT_2 = math.sqrt(2.0)
_SQRT_2PI = math.sqrt(2.0 * math.pi)

DAYS_PER_YEAR = 365.0
PERCENT = 100.0

# Floor on remaining time (years) used when rolling a position forward
MIN_TIME = 0.001


class OptionType(str, Enum):
    """European option variant."""

    CALL = "call"
    PUT = "put"

    @classmethod
    def parse(cls, value: "OptionType | str") -> "OptionType":
        """
        Coerce a string or OptionType to OptionType.

        Raises
        ------
        ValueError
            If value is not 'call' or 'put'
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"option_type must be 'call' or 'put', got {value!r}") from None


def norm_cdf(x: float) -> float:
    """
    Cumulative distribution function for standard normal distribution.

    Uses the Abramowitz & Stegun rational approximation (7.1.26) of erf on
    |x|/√2, then symmetrizes. Absolute error is below 1.5e-7 for every
    finite x, and Φ(x) + Φ(-x) == 1 holds exactly for x != 0.

    Parameters
    ----------
    x : float
        Input value

    Returns
    -------
    float
        CDF value at x: P(Z <= x) where Z ~ N(0,1)
    """
    sign = -1.0 if x < 0 else 1.0
    z = abs(x) / _SQRT_2
    t = 1.0 / (1.0 + _AS_P * z)
    poly = ((((_AS_A5 * t + _AS_A4) * t + _AS_A3) * t + _AS_A2) * t + _AS_A1) * t
    y = 1.0 - poly * math.exp(-z * z)
    return 0.5 * (1.0 + sign * y)


def norm_pdf(x: float) -> float:
    """
    Probability density function for standard normal distribution.

    Parameters
    ----------
    x : float
        Input value

    Returns
    -------
    float
        PDF value at x: φ(x) = exp(-x²/2)/√(2π)
    """
    return math.exp(-0.5 * x * x) / _SQRT_2PI


def intrinsic_value(S: float, K: float, option_type: OptionType | str) -> float:
    """Intrinsic value max(S - K, 0) for a call or max(K - S, 0) for a put."""
    if OptionType.parse(option_type) is OptionType.CALL:
        return max(0.0, S - K)
    return max(0.0, K - S)


def price_with_greeks(
    S: float,
    K: float,
    T: float,
    r: float,
    sigma: float,
    option_type: OptionType | str = OptionType.CALL,
    q: float = 0.0,
) -> Greeks:
    """
    Compute European option price and Greeks using Black-Scholes-Merton.

    Parameters
    ----------
    S : float
        Spot price of the underlying
    K : float
        Strike price
    T : float
        Time to maturity in years
    r : float
        Risk-free interest rate (annualized, continuous, e.g. 0.05)
    sigma : float
        Volatility (annualized, e.g. 0.20)
    option_type : OptionType | str
        'call' or 'put'
    q : float, optional
        Continuous dividend yield (default: 0)

    Returns
    -------
    Greeks
        Price, delta, gamma, theta (per calendar day), vega (per vol point)
        and rho (per rate point). Every field is finite.

    Notes
    -----
    Degenerate inputs never raise:
    - any non-finite input: ZERO_GREEKS
    - T <= 0, sigma <= 0, S <= 0 or K <= 0: intrinsic price, zero Greeks
      (ZERO_GREEKS if the intrinsic value overflows)
    - d1 or d2 non-finite: ZERO_GREEKS
    """
    option_type = OptionType.parse(option_type)

    if not all(math.isfinite(v) for v in (S, K, T, r, sigma, q)):
        return ZERO_GREEKS

    if T <= 0 or sigma <= 0 or S <= 0 or K <= 0:
        intrinsic = intrinsic_value(S, K, option_type)
        if not math.isfinite(intrinsic):
            return ZERO_GREEKS
        return Greeks(
            price=intrinsic,
            delta=0.0,
            gamma=0.0,
            theta=0.0,
            vega=0.0,
            rho=0.0,
        )

    try:
        sqrt_T = math.sqrt(T)
        eqT = math.exp(-q * T)
        erT = math.exp(-r * T)
    except OverflowError:
        return ZERO_GREEKS

    vol_sqrt_T = sigma * sqrt_T
    if vol_sqrt_T == 0.0:
        return ZERO_GREEKS

    d1 = (math.log(S) - math.log(K) + (r - q + 0.5 * sigma * sigma) * T) / vol_sqrt_T
    d2 = d1 - vol_sqrt_T

    if not (math.isfinite(d1) and math.isfinite(d2)):
        return ZERO_GREEKS

    pdf_d1 = norm_pdf(d1)
    decay = -S * eqT * pdf_d1 * sigma / (2.0 * sqrt_T)

    if option_type is OptionType.CALL:
        cdf_d1 = norm_cdf(d1)
        cdf_d2 = norm_cdf(d2)
        price = S * eqT * cdf_d1 - K * erT * cdf_d2
        delta = eqT * cdf_d1
        theta = decay + q * S * eqT * cdf_d1 - r * K * erT * cdf_d2
        rho = K * T * erT * cdf_d2
    else:  # put
        cdf_md1 = norm_cdf(-d1)
        cdf_md2 = norm_cdf(-d2)
        price = K * erT * cdf_md2 - S * eqT * cdf_md1
        delta = -eqT * cdf_md1
        theta = decay - q * S * eqT * cdf_md1 + r * K * erT * cdf_md2
        rho = -K * T * erT * cdf_md2

    gamma = eqT * pdf_d1 / (S * vol_sqrt_T)
    vega = S * eqT * pdf_d1 * sqrt_T

    result = Greeks(
        # The A&S approximation can leave deep OTM prices a hair below zero
        price=max(price, 0.0),
        delta=delta,
        gamma=gamma,
        theta=theta / DAYS_PER_YEAR,
        vega=vega / PERCENT,
        rho=rho / PERCENT,
    )

    if not all(math.isfinite(v) for v in result.to_dict().values()):
        return ZERO_GREEKS
    return result


def bs_price(
    S: float,
    K: float,
    T: float,
    r: float,
    sigma: float,
    option_type: OptionType | str = OptionType.CALL,
    q: float = 0.0,
) -> float:
    """Black-Scholes price only; see ``price_with_greeks``."""
    return price_with_greeks(S, K, T, r, sigma, option_type, q).price
