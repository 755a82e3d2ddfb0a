"""
Multi-leg strategy valuation: net cost, position Greeks, P&L curves
and breakevens.
"""

from dataclasses import dataclass, field

import numpy as np

from bs_pricer.analytics.black_scholes import MIN_TIME, bs_price, price_with_greeks
from bs_pricer.greeks.types import ZERO_GREEKS, Greeks
from bs_pricer.payoffs.plain_vanilla import payoff_for
from bs_pricer.strategy.legs import CONTRACT_MULTIPLIER, OptionLeg


@dataclass
class LegValuation:
    """
    Model valuation of a single leg at the current spot.

    Attributes
    ----------
    leg : OptionLeg
        The position
    greeks : Greeks
        Per-unit model price and Greeks
    effective_premium : float
        Entry premium: the leg's premium, or the model price if it was zero
    """

    leg: OptionLeg
    greeks: Greeks
    effective_premium: float

    @property
    def position_scale(self) -> float:
        return self.leg.sign * self.leg.quantity * CONTRACT_MULTIPLIER


@dataclass
class StrategyAnalysis:
    """
    Results of analyze_strategy.

    Attributes
    ----------
    legs : list[LegValuation]
        Per-leg valuations
    net_cost : float
        Signed premium outlay (positive = net debit, negative = net credit)
    greeks : Greeks
        Position Greeks summed over legs, scaled by direction, quantity
        and contract multiplier
    spots : np.ndarray
        Underlying price grid
    pnl_now : np.ndarray
        P&L on the grid if the spot moved immediately
    pnl_horizons : dict[float, np.ndarray]
        P&L on the grid after each horizon (years) elapses
    pnl_expiry : np.ndarray
        P&L on the grid at expiry
    max_profit : float
        Maximum of the expiry P&L over the grid
    max_loss : float
        Minimum of the expiry P&L over the grid
    breakevens : list[float]
        Spots where the expiry P&L crosses zero
    """

    legs: list[LegValuation]
    net_cost: float
    greeks: Greeks
    spots: np.ndarray
    pnl_now: np.ndarray
    pnl_expiry: np.ndarray
    max_profit: float
    max_loss: float
    breakevens: list[float]
    pnl_horizons: dict[float, np.ndarray] = field(default_factory=dict)

    def __repr__(self) -> str:
        breakevens = ", ".join(f"{b:,.2f}" for b in self.breakevens) or "none"
        return (
            f"StrategyAnalysis(\n"
            f"  legs={len(self.legs)},\n"
            f"  net_cost={self.net_cost:,.2f},\n"
            f"  max_profit={self.max_profit:,.2f}, max_loss={self.max_loss:,.2f},\n"
            f"  breakevens=[{breakevens}]\n"
            f")"
        )


def find_breakevens(spots: np.ndarray, pnl: np.ndarray) -> list[float]:
    """
    Locate zero crossings of a P&L curve by linear interpolation.

    A crossing is counted between consecutive points when the P&L goes
    from negative to non-negative or from non-negative to negative.
    """
    breakevens = []
    for i in range(1, len(spots)):
        prev, curr = pnl[i - 1], pnl[i]
        if (prev < 0 <= curr) or (prev >= 0 > curr):
            ratio = abs(prev) / (abs(prev) + abs(curr))
            breakevens.append(float(spots[i - 1] + ratio * (spots[i] - spots[i - 1])))
    return breakevens


def _position_pnl(
    valuations: list[LegValuation],
    spots: np.ndarray,
    T: float,
    r: float,
    sigma: float,
    q: float,
) -> np.ndarray:
    pnl = np.zeros_like(spots)
    for v in valuations:
        leg = v.leg
        values = np.array(
            [bs_price(s, leg.strike, T, r, sigma, leg.option_type, q) for s in spots]
        )
        pnl += v.position_scale * (values - v.effective_premium)
    return pnl


def analyze_strategy(
    legs: list[OptionLeg],
    spot: float,
    T: float,
    r: float,
    sigma: float,
    q: float = 0.0,
    *,
    n_points: int = 61,
    range_pct: float = 0.5,
    horizons: tuple[float, ...] = (0.5, 1.0),
) -> StrategyAnalysis:
    """
    Value a multi-leg European option strategy.

    All legs share the same expiry T and volatility sigma.

    Parameters
    ----------
    legs : list[OptionLeg]
        Positions making up the strategy
    spot : float
        Current underlying price
    T : float
        Time to expiry in years
    r : float
        Risk-free rate
    sigma : float
        Volatility used for every leg
    q : float, optional
        Continuous dividend yield (default: 0)
    n_points : int, optional
        Number of points on the spot grid (default: 61)
    range_pct : float, optional
        Grid spans spot * (1 ± range_pct) (default: 0.5)
    horizons : tuple[float, ...], optional
        Elapsed times in years for intermediate P&L curves. Remaining time
        is floored at MIN_TIME.

    Returns
    -------
    StrategyAnalysis

    Raises
    ------
    ValueError
        If legs is empty, spot is not positive or the grid is malformed
    """
    if not legs:
        raise ValueError("Strategy must contain at least one leg")
    if spot <= 0:
        raise ValueError("spot must be positive")
    if n_points < 2:
        raise ValueError("n_points must be at least 2")
    if not 0 < range_pct < 1:
        raise ValueError("range_pct must be in (0, 1)")

    valuations = []
    for leg in legs:
        greeks = price_with_greeks(spot, leg.strike, T, r, sigma, leg.option_type, q)
        premium = leg.premium if leg.premium > 0 else greeks.price
        valuations.append(LegValuation(leg=leg, greeks=greeks, effective_premium=premium))

    net_cost = sum(v.position_scale * v.effective_premium for v in valuations)

    position_greeks = ZERO_GREEKS
    for v in valuations:
        position_greeks = position_greeks + v.greeks.scaled(v.position_scale)

    spots = np.linspace(spot * (1 - range_pct), spot * (1 + range_pct), n_points)

    pnl_now = _position_pnl(valuations, spots, T, r, sigma, q)
    pnl_horizons = {
        h: _position_pnl(valuations, spots, max(T - h, MIN_TIME), r, sigma, q)
        for h in horizons
    }

    pnl_expiry = np.zeros_like(spots)
    for v in valuations:
        payoff = payoff_for(v.leg.option_type, v.leg.strike)
        pnl_expiry += v.position_scale * (payoff(spots) - v.effective_premium)

    return StrategyAnalysis(
        legs=valuations,
        net_cost=float(net_cost),
        greeks=position_greeks,
        spots=spots,
        pnl_now=pnl_now,
        pnl_horizons=pnl_horizons,
        pnl_expiry=pnl_expiry,
        max_profit=float(np.max(pnl_expiry)),
        max_loss=float(np.min(pnl_expiry)),
        breakevens=find_breakevens(spots, pnl_expiry),
    )
