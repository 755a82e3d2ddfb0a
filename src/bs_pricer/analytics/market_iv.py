"""Implied volatility computation from market quotes.

This module provides utilities to compute implied volatilities from
market option quotes, with proper arbitrage bound checking, and the
calendar conventions used to turn expiry dates into year fractions.
"""

import math
from datetime import datetime

from bs_pricer.analytics.black_scholes import MIN_TIME, OptionType
from bs_pricer.analytics.implied_vol import DEFAULT_INITIAL_GUESS, implied_vol
from bs_pricer.data.yahoo_options import OptionQuote

SECONDS_PER_YEAR = 365.25 * 24 * 60 * 60

_BOUND_TOL = 1e-8


def arbitrage_bounds(
    option_type: OptionType | str,
    S0: float,
    K: float,
    r: float,
    T: float,
    q: float = 0.0,
) -> tuple[float, float]:
    """Return the (lower, upper) no-arbitrage bounds of a European option price.

    Call: [max(S e^(-qT) - K e^(-rT), 0), S e^(-qT)]
    Put:  [max(K e^(-rT) - S e^(-qT), 0), K e^(-rT)]
    """
    forward_spot = S0 * math.exp(-q * T)
    discounted_strike = K * math.exp(-r * T)

    if OptionType.parse(option_type) is OptionType.CALL:
        return max(forward_spot - discounted_strike, 0.0), forward_spot
    return max(discounted_strike - forward_spot, 0.0), discounted_strike


def quote_to_iv(
    quote: OptionQuote,
    r: float,
    T: float,  # noqa: N803
    q: float = 0.0,
) -> float | None:
    """Compute implied volatility from an option quote.

    Parameters
    ----------
    quote : OptionQuote
        Market option quote with bid/ask prices.
    r : float
        Risk-free interest rate (annualized, as decimal e.g. 0.05 for 5%).
    T : float
        Time to maturity in years. See ``expiry_to_years`` and
        ``year_fraction``.
    q : float, optional
        Continuous dividend yield (default: 0).

    Returns
    -------
    float | None
        Implied volatility (as decimal, e.g. 0.25 for 25%) if successful,
        None if:
        - Mid price is invalid (None)
        - Spot, strike or maturity are not positive
        - Mid price violates arbitrage bounds

    Notes
    -----
    The solver itself never fails; it is seeded with the vendor IV when
    the quote carries a usable one. Returning None rather than raising is
    appropriate for market data which may contain stale or erroneous quotes.
    """
    mid = quote.mid()
    if mid is None:
        return None

    S0 = quote.underlying_spot  # noqa: N806
    K = quote.strike  # noqa: N806

    if not (S0 > 0 and K > 0 and T > 0):
        return None

    lower_bound, upper_bound = arbitrage_bounds(quote.option_type, S0, K, r, T, q)
    if mid < lower_bound - _BOUND_TOL or mid > upper_bound + _BOUND_TOL:
        return None

    guess = DEFAULT_INITIAL_GUESS
    if quote.iv_yahoo is not None and math.isfinite(quote.iv_yahoo) and quote.iv_yahoo > 0:
        guess = quote.iv_yahoo

    return implied_vol(mid, S0, K, T, r, quote.option_type, q, initial_guess=guess)


def expiry_to_years(expiry_str: str, reference_date: datetime | None = None) -> float:
    """Convert expiry date string to time in years using ACT/365.

    Parameters
    ----------
    expiry_str : str
        Expiry date in YYYY-MM-DD format.
    reference_date : datetime | None, optional
        Reference date for time calculation. If None, uses current time.

    Returns
    -------
    float
        Time to expiry in years (ACT/365 convention).

    Raises
    ------
    ValueError
        If expiry_str cannot be parsed or if expiry is in the past.

    Examples
    --------
    >>> from datetime import datetime
    >>> ref = datetime(2025, 12, 31, 12, 0, 0)
    >>> T = expiry_to_years('2026-12-31', ref)
    >>> abs(T - 1.0) < 0.01  # Approximately 1 year
    True
    """
    if reference_date is None:
        reference_date = datetime.now()

    try:
        expiry_date = datetime.strptime(expiry_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValueError(f"Invalid expiry format '{expiry_str}'. Expected YYYY-MM-DD.") from e

    days = (expiry_date - reference_date).days

    if days < 0:
        raise ValueError(
            f"Expiry '{expiry_str}' is in the past relative to {reference_date.date()}"
        )

    return days / 365.0


def year_fraction(expiry: datetime, now: datetime) -> float:
    """Time from ``now`` to ``expiry`` in years of 365.25 days, floored at MIN_TIME.

    Unlike ``expiry_to_years`` this never raises: an expired contract is
    priced at the floor, which keeps the evaluator on its smooth branch.
    """
    seconds = (expiry - now).total_seconds()
    return max(seconds / SECONDS_PER_YEAR, MIN_TIME)
