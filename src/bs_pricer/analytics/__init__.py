"""
Analytics module for Black-Scholes pricing and implied volatility.

Provides closed-form pricing, Greeks and volatility solving without
scipy dependency.
"""

from bs_pricer.analytics.black_scholes import (
    OptionType,
    bs_price,
    intrinsic_value,
    norm_cdf,
    norm_pdf,
    price_with_greeks,
)
from bs_pricer.analytics.implied_vol import IV_MAX, IV_MIN, PRICE_TOL, implied_vol

__all__ = [
    "IV_MAX",
    "IV_MIN",
    "PRICE_TOL",
    "OptionType",
    "bs_price",
    "implied_vol",
    "intrinsic_value",
    "norm_cdf",
    "norm_pdf",
    "price_with_greeks",
]
