#!/usr/bin/env python
"""
Command-line interface for Black-Scholes option pricing.

This module provides the main CLI entrypoint for the bs-price command.

Example usage:
    bs-price --S0 100 --K 100 --T 1.0 --r 0.05 --sigma 0.2
    bs-price --S0 100 --K 100 --T 1.0 --r 0.05 --sigma 0.2 --option_type put --market_price 6.1
    bs-price --S0 100 --K 100 --T 1.0 --r 0.05 --sigma 0.2 --strategy iron_condor
    bs-price --config runs.json --out results/
"""

import argparse
import sys
from pathlib import Path

from bs_pricer.analytics.black_scholes import OptionType, price_with_greeks
from bs_pricer.analytics.implied_vol import DEFAULT_INITIAL_GUESS, implied_vol
from bs_pricer.experiments.io import load_configs, save_results
from bs_pricer.experiments.run import run_configs
from bs_pricer.greeks.finite_diff import finite_diff_greeks
from bs_pricer.greeks.types import Greeks
from bs_pricer.strategy.analysis import analyze_strategy
from bs_pricer.strategy.legs import STRATEGY_PRESETS, build_preset

_PRICING_ARGS = ("S0", "K", "T", "r", "sigma")


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Parameters
    ----------
    args : list[str] | None
        Command-line arguments. If None, uses sys.argv.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        description="Black-Scholes European option pricing engine",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Market parameters
    parser.add_argument("--S0", type=float, help="Spot price")
    parser.add_argument("--K", type=float, help="Strike price")
    parser.add_argument("--T", type=float, help="Time to maturity (years)")
    parser.add_argument("--r", type=float, help="Risk-free rate")
    parser.add_argument("--sigma", type=float, help="Volatility")
    parser.add_argument("--q", type=float, default=0.0, help="Continuous dividend yield")

    parser.add_argument(
        "--option_type",
        type=str,
        choices=[t.value for t in OptionType],
        default="call",
        help="Option type: call or put",
    )

    # Implied volatility
    parser.add_argument(
        "--market_price",
        type=float,
        default=None,
        help="Compute implied volatility from given market price",
    )
    parser.add_argument(
        "--initial_guess",
        type=float,
        default=DEFAULT_INITIAL_GUESS,
        help="Initial volatility guess for the implied volatility solver",
    )

    parser.add_argument(
        "--fd_check",
        action="store_true",
        help="Compare analytic Greeks with finite-difference estimates",
    )

    parser.add_argument(
        "--strategy",
        type=str,
        choices=sorted(STRATEGY_PRESETS),
        default=None,
        help="Analyze a multi-leg strategy preset around S0",
    )

    # Batch mode
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file with a list of pricing configs (batch mode)",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=Path("results"),
        help="Output directory for batch results",
    )

    return parser.parse_args(args)


def print_greeks(title: str, greeks: Greeks) -> None:
    print(f"\n{title}:")
    print(f"  Price:                  {greeks.price:.6f}")
    print(f"  Delta:                  {greeks.delta:.6f}")
    print(f"  Gamma:                  {greeks.gamma:.6f}")
    print(f"  Theta (per day):        {greeks.theta:.6f}")
    print(f"  Vega (per 1% vol):      {greeks.vega:.6f}")
    print(f"  Rho (per 1% rate):      {greeks.rho:.6f}")


def run_batch(config_path: Path, out_dir: Path) -> int:
    try:
        configs = load_configs(config_path)
    except (OSError, ValueError) as e:
        print(f"Error: could not load {config_path}: {e}")
        return 1

    results = run_configs(configs)
    save_results(results, out_dir, config_path.stem)
    return 0 if len(results) == len(configs) else 1


def run_strategy(parsed: argparse.Namespace) -> None:
    legs = build_preset(parsed.strategy, parsed.S0, parsed.K)
    analysis = analyze_strategy(legs, parsed.S0, parsed.T, parsed.r, parsed.sigma, parsed.q)
    label, _ = STRATEGY_PRESETS[parsed.strategy]

    print("\n" + "=" * 70)
    print(f"Strategy: {label}")
    print("=" * 70)
    print(f"  {'Dir':<6} {'Type':<5} {'Strike':>12} {'Premium':>12} {'Qty':>5}")
    for v in analysis.legs:
        leg = v.leg
        print(f"  {leg.direction.name.lower():<6} {leg.option_type.value:<5} "
              f"{leg.strike:>12,.2f} {v.effective_premium:>12.4f} {leg.quantity:>5}")

    print(f"\n  Net Cost:               {analysis.net_cost:,.2f}")
    print(f"  Max Profit (expiry):    {analysis.max_profit:,.2f}")
    print(f"  Max Loss (expiry):      {analysis.max_loss:,.2f}")
    breakevens = ", ".join(f"{b:,.2f}" for b in analysis.breakevens) or "none"
    print(f"  Breakevens:             {breakevens}")
    print_greeks("Position Greeks", analysis.greeks)


def main(args: list[str] | None = None) -> int:
    """Main entry point for CLI.

    Parameters
    ----------
    args : list[str] | None
        Command-line arguments. If None, uses sys.argv.

    Returns
    -------
    int
        Exit code (0 for success, non-zero for errors).
    """
    parsed = parse_args(args)

    if parsed.config is not None:
        return run_batch(parsed.config, parsed.out)

    missing = [f"--{name}" for name in _PRICING_ARGS if getattr(parsed, name) is None]
    if missing:
        print(f"Error: pricing requires: {', '.join(missing)}")
        return 1

    option_type = OptionType.parse(parsed.option_type)
    pricing_args = (parsed.S0, parsed.K, parsed.T, parsed.r, parsed.sigma, option_type, parsed.q)

    print("=" * 70)
    print("Black-Scholes Option Pricing Engine")
    print("=" * 70)
    print("\nInput Parameters:")
    print(f"  Spot Price (S0):        {parsed.S0:,.2f}")
    print(f"  Strike Price (K):       {parsed.K:,.2f}")
    print(f"  Time to Maturity (T):   {parsed.T:.4f} years")
    print(f"  Risk-free Rate (r):     {parsed.r:.4f}")
    print(f"  Volatility (σ):         {parsed.sigma:.4f}")
    print(f"  Dividend Yield (q):     {parsed.q:.4f}")
    print(f"  Option Type:            {option_type.value.upper()}")

    greeks = price_with_greeks(*pricing_args)
    print_greeks("Results", greeks)

    if parsed.market_price is not None:
        iv = implied_vol(
            parsed.market_price,
            parsed.S0,
            parsed.K,
            parsed.T,
            parsed.r,
            option_type,
            parsed.q,
            initial_guess=parsed.initial_guess,
        )
        print(f"\n  Market Price:           {parsed.market_price:.6f}")
        print(f"  Implied Volatility:     {iv:.6f} ({iv * 100:.2f}%)")

    if parsed.fd_check:
        fd = finite_diff_greeks(*pricing_args)
        print("\nAnalytic vs Finite Difference:")
        print(f"  {'Greek':<8} {'Analytic':>14} {'FD':>14} {'Abs Diff':>12}")
        for name in ("delta", "gamma", "theta", "vega", "rho"):
            a, b = getattr(greeks, name), getattr(fd, name)
            print(f"  {name:<8} {a:>14.6f} {b:>14.6f} {abs(a - b):>12.2e}")

    if parsed.strategy is not None:
        try:
            run_strategy(parsed)
        except ValueError as e:
            print(f"Error: {e}")
            return 1

    print("\n" + "=" * 70)
    return 0


if __name__ == "__main__":
    sys.exit(main())
