"""
Strategy package: option legs, presets, position sizing, roll planning
and position-level analytics.
"""

from bs_pricer.strategy.analysis import (
    LegValuation,
    StrategyAnalysis,
    analyze_strategy,
    find_breakevens,
)
from bs_pricer.strategy.legs import (
    CONTRACT_MULTIPLIER,
    STRATEGY_PRESETS,
    Direction,
    OptionLeg,
    build_preset,
    round_strike,
)
from bs_pricer.strategy.roll import (
    RollDay,
    RollLeg,
    RollLegResult,
    RollOptimization,
    RollPlan,
    optimal_roll_by_final_price,
    optimize_roll,
    plan_rolls,
    roll_iv_sensitivity,
    roll_price_path,
    roll_target_sensitivity,
)
from bs_pricer.strategy.scenarios import pnl_matrix, pnl_surface
from bs_pricer.strategy.sizing import PositionSize, size_position

__all__ = [
    "CONTRACT_MULTIPLIER",
    "STRATEGY_PRESETS",
    "Direction",
    "LegValuation",
    "OptionLeg",
    "PositionSize",
    "RollDay",
    "RollLeg",
    "RollLegResult",
    "RollOptimization",
    "RollPlan",
    "StrategyAnalysis",
    "analyze_strategy",
    "build_preset",
    "find_breakevens",
    "optimal_roll_by_final_price",
    "optimize_roll",
    "plan_rolls",
    "pnl_matrix",
    "pnl_surface",
    "roll_iv_sensitivity",
    "roll_price_path",
    "roll_target_sensitivity",
    "round_strike",
    "size_position",
]
