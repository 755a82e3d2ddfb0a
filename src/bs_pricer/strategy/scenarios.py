"""
Scenario grids for a single option position.

P&L per contract is (model price - entry price) * CONTRACT_MULTIPLIER * contracts.
"""

import numpy as np

from bs_pricer.analytics.black_scholes import DAYS_PER_YEAR, MIN_TIME, OptionType, bs_price
from bs_pricer.analytics.implied_vol import IV_MIN
from bs_pricer.strategy.legs import CONTRACT_MULTIPLIER


def pnl_matrix(
    option_type: OptionType | str,
    spot: float,
    strike: float,
    T: float,
    r: float,
    sigma: float,
    entry_price: float,
    *,
    spot_shifts: np.ndarray,
    vol_shifts: np.ndarray,
    q: float = 0.0,
    contracts: int = 1,
) -> np.ndarray:
    """
    P&L over a grid of instantaneous spot and volatility shocks.

    Parameters
    ----------
    spot_shifts : np.ndarray
        Relative spot moves, e.g. [-0.1, 0.0, 0.1] for ±10%
    vol_shifts : np.ndarray
        Absolute volatility moves, e.g. [-0.05, 0.0, 0.05]. Shocked
        volatility is floored at IV_MIN.

    Returns
    -------
    np.ndarray
        Array of shape (len(spot_shifts), len(vol_shifts))
    """
    spot_shifts = np.asarray(spot_shifts, dtype=float)
    vol_shifts = np.asarray(vol_shifts, dtype=float)
    scale = CONTRACT_MULTIPLIER * contracts

    result = np.empty((len(spot_shifts), len(vol_shifts)))
    for i, ds in enumerate(spot_shifts):
        shocked_spot = spot * (1.0 + ds)
        for j, dv in enumerate(vol_shifts):
            shocked_vol = max(sigma + dv, IV_MIN)
            value = bs_price(shocked_spot, strike, T, r, shocked_vol, option_type, q)
            result[i, j] = (value - entry_price) * scale
    return result


def pnl_surface(
    option_type: OptionType | str,
    strike: float,
    T: float,
    r: float,
    sigma: float,
    entry_price: float,
    *,
    spots: np.ndarray,
    days: np.ndarray,
    q: float = 0.0,
    contracts: int = 1,
) -> np.ndarray:
    """
    P&L over underlying price and calendar days elapsed since entry.

    Remaining time is T - days / 365, floored at MIN_TIME.

    Returns
    -------
    np.ndarray
        Array of shape (len(spots), len(days))
    """
    spots = np.asarray(spots, dtype=float)
    days = np.asarray(days, dtype=float)
    scale = CONTRACT_MULTIPLIER * contracts

    result = np.empty((len(spots), len(days)))
    for j, d in enumerate(days):
        remaining = max(T - d / DAYS_PER_YEAR, MIN_TIME)
        for i, s in enumerate(spots):
            value = bs_price(s, strike, remaining, r, sigma, option_type, q)
            result[i, j] = (value - entry_price) * scale
    return result
