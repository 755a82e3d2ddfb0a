"""
Implied volatility solver for European options.

Damped Newton-Raphson on the price residual, with a bisection fallback
for the regions where vega vanishes (deep OTM, very short expiries).
The solver never raises for numeric input: it degrades to the initial
guess or to the best volatility it found inside [IV_MIN, IV_MAX].
"""

import math

from bs_pricer.analytics.black_scholes import OptionType, price_with_greeks

IV_MIN = 0.01
IV_MAX = 5.0
PRICE_TOL = 1e-4

NEWTON_MAX_ITER = 100
BISECTION_MAX_ITER = 80

# Below this (undone-scaling) vega Newton steps are meaningless
MIN_VEGA = 1e-5

# Newton's best residual is accepted without bisection below this
NEWTON_ACCEPT_TOL = 0.01

DEFAULT_INITIAL_GUESS = 0.30


def _clamp(sigma: float) -> float:
    return max(IV_MIN, min(sigma, IV_MAX))


def implied_vol(
    market_price: float,
    S: float,
    K: float,
    T: float,
    r: float,
    option_type: OptionType | str = OptionType.CALL,
    q: float = 0.0,
    initial_guess: float = DEFAULT_INITIAL_GUESS,
) -> float:
    """
    Compute implied volatility from an observed option price.

    Solves for σ such that price_with_greeks(S, K, T, r, σ, type, q).price
    equals market_price.

    Parameters
    ----------
    market_price : float
        Observed market price of the option
    S : float
        Current spot price
    K : float
        Strike price
    T : float
        Time to maturity in years
    r : float
        Risk-free interest rate (annualized)
    option_type : OptionType | str
        'call' or 'put'
    q : float, optional
        Continuous dividend yield (default: 0). Not inferred: pass it
        explicitly for dividend-paying underlyings.
    initial_guess : float, optional
        Starting volatility for Newton iterations (default: 0.30)

    Returns
    -------
    float
        Implied volatility. Returns initial_guess unchanged when the inputs
        are non-finite or non-positive; otherwise a finite value in
        [IV_MIN, IV_MAX].

    Notes
    -----
    Phase 1 runs up to NEWTON_MAX_ITER damped Newton steps, tracking the
    best (σ, |residual|) seen. It stops early when vega vanishes. If the
    best residual is below NEWTON_ACCEPT_TOL that σ is returned.

    Phase 2 bisects [IV_MIN, IV_MAX] for up to BISECTION_MAX_ITER steps,
    relying on the European price being strictly increasing in σ. Prices
    below the no-arbitrage floor saturate near IV_MIN, prices above the
    ceiling saturate near IV_MAX.
    """
    option_type = OptionType.parse(option_type)

    if not all(math.isfinite(v) for v in (market_price, S, K, T, r)):
        return initial_guess
    if market_price <= 0 or S <= 0 or K <= 0 or T <= 0:
        return initial_guess

    # Phase 1: Newton-Raphson
    sigma = _clamp(initial_guess) if math.isfinite(initial_guess) else DEFAULT_INITIAL_GUESS
    best_sigma = sigma
    best_err = math.inf

    for _ in range(NEWTON_MAX_ITER):
        greeks = price_with_greeks(S, K, T, r, sigma, option_type, q)
        diff = greeks.price - market_price
        err = abs(diff)

        if err < best_err:
            best_err = err
            best_sigma = sigma
        if err < PRICE_TOL:
            return sigma

        vega_abs = greeks.vega * 100.0
        if vega_abs < MIN_VEGA:
            break

        sigma = _clamp(sigma - diff / vega_abs)

    if best_err < NEWTON_ACCEPT_TOL:
        return best_sigma

    # Phase 2: bisection
    lo, hi = IV_MIN, IV_MAX
    for _ in range(BISECTION_MAX_ITER):
        mid = 0.5 * (lo + hi)
        diff = price_with_greeks(S, K, T, r, mid, option_type, q).price - market_price

        if abs(diff) < PRICE_TOL:
            return mid
        if diff > 0:
            hi = mid
        else:
            lo = mid
        if hi - lo < PRICE_TOL:
            return mid

    return 0.5 * (lo + hi)
