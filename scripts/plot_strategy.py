#!/usr/bin/env python
"""
Strategy P&L visualization.

Plots the P&L of a strategy preset now, at intermediate horizons and at
expiry, plus a spot/days P&L heatmap for a single long call.
"""

import argparse
import sys
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

# Add parent directory to path to allow imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bs_pricer.analytics.black_scholes import bs_price
from bs_pricer.strategy import STRATEGY_PRESETS, analyze_strategy, build_preset, pnl_surface


def main():
    """Generate P&L plots for a strategy preset."""
    parser = argparse.ArgumentParser(description="Plot strategy P&L curves")
    parser.add_argument("--strategy", choices=sorted(STRATEGY_PRESETS), default="iron_condor")
    parser.add_argument("--S0", type=float, default=100.0)
    parser.add_argument("--T", type=float, default=0.25)
    parser.add_argument("--r", type=float, default=0.05)
    parser.add_argument("--sigma", type=float, default=0.25)
    parser.add_argument("--q", type=float, default=0.0)
    args = parser.parse_args()

    label, _ = STRATEGY_PRESETS[args.strategy]
    legs = build_preset(args.strategy, args.S0)
    horizons = (args.T / 3, 2 * args.T / 3)
    analysis = analyze_strategy(
        legs, args.S0, args.T, args.r, args.sigma, args.q, n_points=201, horizons=horizons
    )

    print("=" * 80)
    print(f"{label} P&L Analysis")
    print("=" * 80)
    print(f"\nParameters: S0={args.S0}, T={args.T}, r={args.r}, sigma={args.sigma}, q={args.q}")
    print(analysis)

    # Create plot
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(15, 6))

    ax1.plot(analysis.spots, analysis.pnl_expiry, "k-", linewidth=2, label="At expiry")
    ax1.plot(analysis.spots, analysis.pnl_now, "b-", linewidth=2, label="Now")
    for h, pnl in analysis.pnl_horizons.items():
        ax1.plot(analysis.spots, pnl, "--", linewidth=1.5, label=f"After {h * 365:.0f} days")
    for b in analysis.breakevens:
        ax1.axvline(b, color="gray", linestyle=":", alpha=0.7)
    ax1.axhline(0.0, color="black", linewidth=0.8)
    ax1.axvline(args.S0, color="red", linestyle=":", alpha=0.5, label=f"Spot ({args.S0})")
    ax1.set_xlabel("Underlying Price", fontsize=12)
    ax1.set_ylabel("P&L", fontsize=12)
    ax1.set_title(f"{label}: P&L by Horizon", fontsize=14, fontweight="bold")
    ax1.legend(fontsize=10)
    ax1.grid(True, alpha=0.3)

    # Single long ATM call over spot and elapsed days
    entry = bs_price(args.S0, args.S0, args.T, args.r, args.sigma, "call", args.q)
    spots = np.linspace(args.S0 * 0.8, args.S0 * 1.2, 41)
    days = np.arange(0, int(args.T * 365) + 1, 5)
    surface = pnl_surface(
        "call", args.S0, args.T, args.r, args.sigma, entry, spots=spots, days=days, q=args.q
    )

    im = ax2.imshow(
        surface,
        origin="lower",
        aspect="auto",
        cmap="RdYlGn",
        extent=[days[0], days[-1], spots[0], spots[-1]],
    )
    fig.colorbar(im, ax=ax2, label="P&L")
    ax2.set_xlabel("Days Elapsed", fontsize=12)
    ax2.set_ylabel("Underlying Price", fontsize=12)
    ax2.set_title("Long ATM Call: P&L Surface", fontsize=14, fontweight="bold")

    plt.tight_layout()

    plots_dir = Path(__file__).parent.parent / "plots"
    plots_dir.mkdir(exist_ok=True)

    output_path = plots_dir / f"strategy_{args.strategy}.png"
    plt.savefig(output_path, dpi=150, bbox_inches="tight")
    print(f"\nPlot saved to: {output_path}")

    plt.show()


if __name__ == "__main__":
    main()
