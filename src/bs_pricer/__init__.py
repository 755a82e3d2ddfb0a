"""
Black-Scholes Option Pricing Engine

Closed-form European option pricing with continuous dividend yield,
full Greeks, and an implied volatility solver.
"""

from bs_pricer._version import __version__

# Analytics
from bs_pricer.analytics.black_scholes import (
    OptionType,
    bs_price,
    norm_cdf,
    norm_pdf,
    price_with_greeks,
)
from bs_pricer.analytics.implied_vol import implied_vol
from bs_pricer.greeks.types import ZERO_GREEKS, Greeks

# Strategies
from bs_pricer.strategy.analysis import StrategyAnalysis, analyze_strategy
from bs_pricer.strategy.legs import Direction, OptionLeg, build_preset

__all__ = [
    # Version
    "__version__",
    # Types
    "Greeks",
    "ZERO_GREEKS",
    "OptionType",
    # Analytics
    "norm_cdf",
    "norm_pdf",
    "price_with_greeks",
    "bs_price",
    "implied_vol",
    # Strategies
    "Direction",
    "OptionLeg",
    "StrategyAnalysis",
    "analyze_strategy",
    "build_preset",
]
