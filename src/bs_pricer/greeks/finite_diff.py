"""
Greeks computation via finite differences.

Bump-and-reprice estimators on top of the analytic evaluator. They are
returned on the same scale as the analytic Greeks (theta per day, vega and
rho per percentage point) so the two can be compared directly.
"""

from bs_pricer.analytics.black_scholes import (
    DAYS_PER_YEAR,
    PERCENT,
    OptionType,
    bs_price,
)
from bs_pricer.greeks.types import Greeks


def finite_diff_delta(
    S: float,
    K: float,
    T: float,
    r: float,
    sigma: float,
    option_type: OptionType | str,
    q: float = 0.0,
    h_rel: float = 1e-4,
) -> float:
    """
    Compute Delta via central finite difference.

    Parameters
    ----------
    S, K, T, r, sigma, option_type, q
        Pricing inputs, as for ``price_with_greeks``
    h_rel : float
        Relative step size for spot (h = h_rel * S)

    Returns
    -------
    float
        Delta estimate
    """
    h = h_rel * S

    if S - h <= 0:
        # Use forward difference if central would give negative spot
        V_up = bs_price(S + h, K, T, r, sigma, option_type, q)
        V_base = bs_price(S, K, T, r, sigma, option_type, q)
        return (V_up - V_base) / h

    V_up = bs_price(S + h, K, T, r, sigma, option_type, q)
    V_down = bs_price(S - h, K, T, r, sigma, option_type, q)
    return (V_up - V_down) / (2 * h)


def finite_diff_gamma(
    S: float,
    K: float,
    T: float,
    r: float,
    sigma: float,
    option_type: OptionType | str,
    q: float = 0.0,
    h_rel: float = 1e-4,
) -> float:
    """
    Compute Gamma via second-order central finite difference.

    Gamma ≈ (V(S+h) - 2V(S) + V(S-h)) / h²
    """
    h = h_rel * S

    V_up = bs_price(S + h, K, T, r, sigma, option_type, q)
    V_base = bs_price(S, K, T, r, sigma, option_type, q)
    V_down = bs_price(S - h, K, T, r, sigma, option_type, q)
    return (V_up - 2 * V_base + V_down) / (h * h)


def finite_diff_vega(
    S: float,
    K: float,
    T: float,
    r: float,
    sigma: float,
    option_type: OptionType | str,
    q: float = 0.0,
    h_abs: float = 1e-4,
) -> float:
    """
    Compute Vega via central finite difference, per 1 vol point.

    Parameters
    ----------
    h_abs : float
        Absolute step size for sigma
    """
    if sigma - h_abs <= 0:
        V_up = bs_price(S, K, T, r, sigma + h_abs, option_type, q)
        V_base = bs_price(S, K, T, r, sigma, option_type, q)
        return (V_up - V_base) / h_abs / PERCENT

    V_up = bs_price(S, K, T, r, sigma + h_abs, option_type, q)
    V_down = bs_price(S, K, T, r, sigma - h_abs, option_type, q)
    return (V_up - V_down) / (2 * h_abs) / PERCENT


def finite_diff_theta(
    S: float,
    K: float,
    T: float,
    r: float,
    sigma: float,
    option_type: OptionType | str,
    q: float = 0.0,
    h_days: float = 1.0,
) -> float:
    """
    Compute Theta via finite difference in calendar time, per day.

    Theta is the change in value as time passes, i.e. as T shrinks.

    Parameters
    ----------
    h_days : float
        Step size in calendar days
    """
    dt = h_days / DAYS_PER_YEAR

    if T - dt <= 0:
        V_base = bs_price(S, K, T, r, sigma, option_type, q)
        V_longer = bs_price(S, K, T + dt, r, sigma, option_type, q)
        return (V_base - V_longer) / dt / DAYS_PER_YEAR

    V_shorter = bs_price(S, K, T - dt, r, sigma, option_type, q)
    V_longer = bs_price(S, K, T + dt, r, sigma, option_type, q)
    return (V_shorter - V_longer) / (2 * dt) / DAYS_PER_YEAR


def finite_diff_rho(
    S: float,
    K: float,
    T: float,
    r: float,
    sigma: float,
    option_type: OptionType | str,
    q: float = 0.0,
    h_abs: float = 1e-4,
) -> float:
    """
    Compute Rho via central finite difference, per 1 rate point.
    """
    V_up = bs_price(S, K, T, r + h_abs, sigma, option_type, q)
    V_down = bs_price(S, K, T, r - h_abs, sigma, option_type, q)
    return (V_up - V_down) / (2 * h_abs) / PERCENT


def finite_diff_greeks(
    S: float,
    K: float,
    T: float,
    r: float,
    sigma: float,
    option_type: OptionType | str,
    q: float = 0.0,
) -> Greeks:
    """
    Compute all Greeks by bump-and-reprice with default step sizes.

    Returns
    -------
    Greeks
        Model price with finite-difference delta, gamma, theta, vega, rho
    """
    return Greeks(
        price=bs_price(S, K, T, r, sigma, option_type, q),
        delta=finite_diff_delta(S, K, T, r, sigma, option_type, q),
        gamma=finite_diff_gamma(S, K, T, r, sigma, option_type, q),
        theta=finite_diff_theta(S, K, T, r, sigma, option_type, q),
        vega=finite_diff_vega(S, K, T, r, sigma, option_type, q),
        rho=finite_diff_rho(S, K, T, r, sigma, option_type, q),
    )
