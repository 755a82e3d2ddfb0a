"""
Payoffs package initialization.
"""

from bs_pricer.payoffs.plain_vanilla import EuropeanCallPayoff, EuropeanPutPayoff, payoff_for

__all__ = [
    "EuropeanCallPayoff",
    "EuropeanPutPayoff",
    "payoff_for",
]
