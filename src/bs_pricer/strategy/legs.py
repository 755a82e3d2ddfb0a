"""
Option legs and multi-leg strategy presets.
"""

import math
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from bs_pricer.analytics.black_scholes import OptionType

# Shares per listed option contract
CONTRACT_MULTIPLIER = 100


class Direction(Enum):
    """Long or short position; the value is the P&L sign."""

    LONG = 1
    SHORT = -1

    @classmethod
    def parse(cls, value: "Direction | str") -> "Direction":
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).upper()]
        except KeyError:
            raise ValueError(f"direction must be 'long' or 'short', got {value!r}") from None


@dataclass(frozen=True)
class OptionLeg:
    """
    One European option position within a strategy.

    Attributes
    ----------
    option_type : OptionType
        Call or put
    direction : Direction
        Long or short
    strike : float
        Strike price (must be > 0)
    premium : float
        Price paid or received per unit. Zero means "use the model price".
    quantity : int
        Number of contracts (must be >= 1)
    """

    option_type: OptionType
    direction: Direction
    strike: float
    premium: float = 0.0
    quantity: int = 1

    def __post_init__(self):
        object.__setattr__(self, "option_type", OptionType.parse(self.option_type))
        object.__setattr__(self, "direction", Direction.parse(self.direction))
        if self.strike <= 0:
            raise ValueError(f"strike must be positive, got {self.strike}")
        if self.premium < 0:
            raise ValueError(f"premium must be non-negative, got {self.premium}")
        if self.quantity < 1:
            raise ValueError(f"quantity must be at least 1, got {self.quantity}")

    @property
    def sign(self) -> int:
        return self.direction.value


def round_strike(strike: float) -> float:
    """
    Round a strike to the nearest whole unit, halves up.

    Strikes that would round to zero (sub-unit underlyings) are kept as is.
    """
    rounded = float(math.floor(strike + 0.5))
    return rounded if rounded > 0 else strike


def _leg(option_type: OptionType, direction: Direction, strike: float) -> OptionLeg:
    return OptionLeg(option_type=option_type, direction=direction, strike=round_strike(strike))


CALL, PUT = OptionType.CALL, OptionType.PUT
LONG, SHORT = Direction.LONG, Direction.SHORT

StrategyBuilder = Callable[[float, float], list[OptionLeg]]

STRATEGY_PRESETS: dict[str, tuple[str, StrategyBuilder]] = {
    "bull_call_spread": (
        "Bull Call Spread",
        lambda S, K: [
            OptionLeg(CALL, LONG, K),
            _leg(CALL, SHORT, S * 1.10),
        ],
    ),
    "bear_put_spread": (
        "Bear Put Spread",
        lambda S, K: [_leg(PUT, LONG, S), _leg(PUT, SHORT, S * 0.85)],
    ),
    "long_straddle": (
        "Long Straddle",
        lambda S, K: [_leg(CALL, LONG, S), _leg(PUT, LONG, S)],
    ),
    "long_strangle": (
        "Long Strangle",
        lambda S, K: [_leg(CALL, LONG, S * 1.05), _leg(PUT, LONG, S * 0.95)],
    ),
    "iron_condor": (
        "Iron Condor",
        lambda S, K: [
            _leg(PUT, LONG, S * 0.85),
            _leg(PUT, SHORT, S * 0.92),
            _leg(CALL, SHORT, S * 1.08),
            _leg(CALL, LONG, S * 1.15),
        ],
    ),
    "iron_butterfly": (
        "Iron Butterfly",
        lambda S, K: [
            _leg(PUT, LONG, S * 0.90),
            _leg(PUT, SHORT, S),
            _leg(CALL, SHORT, S),
            _leg(CALL, LONG, S * 1.10),
        ],
    ),
}


def build_preset(name: str, spot: float, strike: float | None = None) -> list[OptionLeg]:
    """
    Build the legs of a named strategy around the current spot.

    Parameters
    ----------
    name : str
        One of the keys of STRATEGY_PRESETS
    spot : float
        Current underlying price; wing strikes are multiples of it rounded
        with round_strike
    strike : float | None
        Reference strike for presets anchored on it, used unrounded
        (defaults to spot)

    Returns
    -------
    list[OptionLeg]
        Legs with zero premium, i.e. priced off the model

    Raises
    ------
    ValueError
        If the preset name is unknown or spot is not positive
    """
    if name not in STRATEGY_PRESETS:
        raise ValueError(
            f"Unknown strategy preset '{name}'. Available: {', '.join(sorted(STRATEGY_PRESETS))}"
        )
    if spot <= 0:
        raise ValueError("spot must be positive")

    _, builder = STRATEGY_PRESETS[name]
    return builder(spot, spot if strike is None else strike)
