"""
Investment-based position sizing in whole contracts.
"""

import math
from dataclasses import dataclass

from bs_pricer.strategy.legs import CONTRACT_MULTIPLIER


@dataclass(frozen=True)
class PositionSize:
    """
    Contracts bought with a cash budget.

    Attributes
    ----------
    num_contracts : int
        Whole contracts bought
    principal : float
        Capital deployed: num_contracts * option_price * CONTRACT_MULTIPLIER
    unused_cash : float
        Budget left over; negative when the minimum contract count costs
        more than the budget
    """

    num_contracts: int
    principal: float
    unused_cash: float


def size_position(investment: float, option_price: float, min_contracts: int = 1) -> PositionSize:
    """
    Number of contracts affordable from an investment.

    At least ``min_contracts`` are bought even if the budget does not cover
    them. A non-positive option price buys ``min_contracts`` at no cost.

    Parameters
    ----------
    investment : float
        Cash budget
    option_price : float
        Per-unit option price
    min_contracts : int, optional
        Floor on the contract count (default: 1)

    Returns
    -------
    PositionSize
    """
    cost_per_contract = option_price * CONTRACT_MULTIPLIER
    if cost_per_contract <= 0:
        return PositionSize(num_contracts=min_contracts, principal=0.0, unused_cash=investment)

    num_contracts = max(min_contracts, math.floor(investment / cost_per_contract))
    principal = num_contracts * cost_per_contract
    return PositionSize(
        num_contracts=num_contracts,
        principal=principal,
        unused_cash=investment - principal,
    )
