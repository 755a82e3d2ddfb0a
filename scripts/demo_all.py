#!/usr/bin/env python
"""
Comprehensive demonstration of all features.

Shows closed-form pricing, Greeks, implied volatility, degenerate inputs,
strategy analysis, scenario grids and roll planning.
"""

import math
import sys
from pathlib import Path

import numpy as np

# Add parent directory to path to allow imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bs_pricer.analytics.black_scholes import bs_price, price_with_greeks
from bs_pricer.analytics.implied_vol import implied_vol
from bs_pricer.greeks.finite_diff import finite_diff_greeks
from bs_pricer.strategy import (
    STRATEGY_PRESETS,
    RollLeg,
    analyze_strategy,
    build_preset,
    optimize_roll,
    plan_rolls,
    pnl_matrix,
)


def demo_basic_pricing():
    """Demonstrate basic option pricing."""
    print("=" * 80)
    print("DEMO 1: European Call and Put Pricing")
    print("=" * 80)

    S0, K, r, sigma, T = 100.0, 100.0, 0.05, 0.2, 1.0

    print("\nMarket Parameters:")
    print(f"  S0 = {S0}, K = {K}, r = {r}, σ = {sigma}, T = {T}")

    call = price_with_greeks(S0, K, T, r, sigma, "call")
    put = price_with_greeks(S0, K, T, r, sigma, "put")

    print("\nCall:")
    print(call)
    print("\nPut:")
    print(put)

    parity = call.price - put.price - (S0 - K * math.exp(-r * T))
    print(f"\nPut-call parity residual: {parity:.2e}")

    print("\nDividend yield effect on the call:")
    for q in (0.0, 0.02, 0.05):
        print(f"  q = {q:.2f}: price = {bs_price(S0, K, T, r, sigma, 'call', q):.4f}")


def demo_greeks():
    """Compare analytic and finite-difference Greeks."""
    print("\n" + "=" * 80)
    print("DEMO 2: Analytic vs Finite-Difference Greeks")
    print("=" * 80)

    args = (100.0, 105.0, 0.5, 0.03, 0.25, "put", 0.01)
    analytic = price_with_greeks(*args)
    fd = finite_diff_greeks(*args)

    print(f"\n{'Greek':<8} {'Analytic':>14} {'FD':>14} {'Abs Diff':>12}")
    print("-" * 52)
    for name in ("delta", "gamma", "theta", "vega", "rho"):
        a, b = getattr(analytic, name), getattr(fd, name)
        print(f"{name:<8} {a:>14.6f} {b:>14.6f} {abs(a - b):>12.2e}")


def demo_implied_vol():
    """Demonstrate implied volatility recovery."""
    print("\n" + "=" * 80)
    print("DEMO 3: Implied Volatility")
    print("=" * 80)

    cases = [
        ("ATM", 100.0, 100.0, 1.0, 0.30),
        ("Deep OTM", 100.0, 200.0, 0.5, 0.40),
        ("Crypto", 100000.0, 110000.0, 1.0, 0.60),
    ]

    print(f"\n{'Case':<10} {'Price':>14} {'True Vol':>10} {'Implied':>10}")
    print("-" * 48)
    for label, S0, K, T, sigma in cases:
        price = bs_price(S0, K, T, 0.05, sigma, "call")
        iv = implied_vol(price, S0, K, T, 0.05, "call")
        print(f"{label:<10} {price:>14.6f} {sigma:>10.4f} {iv:>10.6f}")

    print(f"\nZero price returns the initial guess: {implied_vol(0.0, 100, 100, 1, 0.05)}")
    print(f"NaN price returns the initial guess:  {implied_vol(math.nan, 100, 100, 1, 0.05)}")


def demo_degenerate_inputs():
    """Show how degenerate inputs are absorbed."""
    print("\n" + "=" * 80)
    print("DEMO 4: Degenerate Inputs")
    print("=" * 80)

    cases = [
        ("Expired (T=0)", (100.0, 90.0, 0.0, 0.05, 0.2)),
        ("Zero vol", (100.0, 90.0, 1.0, 0.05, 0.0)),
        ("NaN spot", (math.nan, 100.0, 1.0, 0.05, 0.2)),
        ("Zero spot put", (0.0, 100.0, 1.0, 0.05, 0.2)),
    ]
    for label, args in cases:
        option_type = "put" if "put" in label else "call"
        g = price_with_greeks(*args, option_type)
        print(f"  {label:<16} price = {g.price:>8.4f}, delta = {g.delta:.1f}, vega = {g.vega:.1f}")


def demo_strategies():
    """Analyze every strategy preset."""
    print("\n" + "=" * 80)
    print("DEMO 5: Strategy Presets")
    print("=" * 80)

    S0, T, r, sigma = 100.0, 0.25, 0.05, 0.25

    print(f"\n{'Strategy':<20} {'Net Cost':>10} {'Max Profit':>12} {'Max Loss':>10} "
          f"{'Delta':>8} {'Theta/day':>10} {'Breakevens':<20}")
    print("-" * 96)
    for name, (label, _) in STRATEGY_PRESETS.items():
        a = analyze_strategy(build_preset(name, S0), S0, T, r, sigma)
        breakevens = ", ".join(f"{b:.2f}" for b in a.breakevens)
        print(f"{label:<20} {a.net_cost:>10.2f} {a.max_profit:>12.2f} {a.max_loss:>10.2f} "
              f"{a.greeks.delta:>8.2f} {a.greeks.theta:>10.2f} {breakevens:<20}")


def demo_scenarios():
    """Spot/vol P&L matrix for a long ATM call."""
    print("\n" + "=" * 80)
    print("DEMO 6: Spot x Vol P&L Matrix (1 long ATM call)")
    print("=" * 80)

    S0, K, T, r, sigma = 100.0, 100.0, 0.25, 0.05, 0.25
    entry = bs_price(S0, K, T, r, sigma, "call")
    spot_shifts = np.array([-0.10, -0.05, 0.0, 0.05, 0.10])
    vol_shifts = np.array([-0.10, 0.0, 0.10])

    grid = pnl_matrix(
        "call", S0, K, T, r, sigma, entry, spot_shifts=spot_shifts, vol_shifts=vol_shifts
    )

    header = "".join(f"{f'σ{dv:+.2f}':>12}" for dv in vol_shifts)
    print(f"\n{'Spot':>8}{header}")
    for ds, row in zip(spot_shifts, grid):
        print(f"{ds:>+8.0%}" + "".join(f"{v:>12.2f}" for v in row))


def demo_rolls():
    """Roll a near-dated call into longer-dated ones."""
    print("\n" + "=" * 80)
    print("DEMO 7: Roll Planning ($10,000 in calls)")
    print("=" * 80)

    S0, r, sigma = 100.0, 0.05, 0.35
    legs = [
        RollLeg("call", strike=110.0, expiry=0.25, roll_after_days=45, label="3M 110C"),
        RollLeg("call", strike=125.0, expiry=0.75, roll_after_days=90, label="9M 125C"),
        RollLeg("call", strike=140.0, expiry=1.5, label="18M 140C"),
    ]
    plan = plan_rolls(legs, S0, r, sigma, 10_000.0, target_price=160.0, slippage_pct=1.0)

    print(f"\n{'Leg':<10} {'Days':>6} {'Spot In':>9} {'Spot Out':>9} {'Contracts':>10} "
          f"{'Entry':>8} {'Exit':>8} {'P&L':>12}")
    print("-" * 80)
    for res in plan.legs:
        print(f"{res.leg.label:<10} {res.entry_day:>3}-{res.exit_day:<3} {res.spot_at_entry:>8.2f} "
              f"{res.spot_at_exit:>9.2f} {res.size.num_contracts:>10} {res.entry_price:>8.2f} "
              f"{res.exit_price:>8.2f} {res.pnl:>12,.2f}")
    print(f"\nFinal capital: {plan.final_capital:,.2f} ({plan.total_pnl_pct:+.1%})")

    roll = optimize_roll(
        "call", S0, 110.0, 0.5, r, sigma, 10_000.0,
        roll_strike=130.0, roll_T=1.0,
        peak_price=140.0, peak_day=60, final_price=105.0, slippage_pct=1.0,
    )
    best = roll.optimal_roll
    print("\nHold 6M 110C vs roll into 12M 130C (peak 140 on day 60, ending at 105):")
    print(f"  Best roll day:  {best.day} (spot {best.spot:.2f}, advantage {best.roll_advantage:,.2f})")
    print(f"  Peak value day: {roll.peak_value.day}")
    if roll.theta_critical is not None:
        print(f"  Theta > 0.5%/day of position from day {roll.theta_critical.day}")


def main():
    """Run all demonstrations."""
    demo_basic_pricing()
    demo_greeks()
    demo_implied_vol()
    demo_degenerate_inputs()
    demo_strategies()
    demo_scenarios()
    demo_rolls()

    print("\n" + "=" * 80)
    print("All demos complete")
    print("=" * 80)


if __name__ == "__main__":
    main()
