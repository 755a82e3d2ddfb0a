"""
Greeks package initialization.

Only the result types are imported here; the analytic evaluator depends on
them. Import finite-difference estimators from ``bs_pricer.greeks.finite_diff``.
"""

from bs_pricer.greeks.types import ZERO_GREEKS, Greeks

__all__ = [
    'Greeks',
    'ZERO_GREEKS',
]
