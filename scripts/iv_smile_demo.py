#!/usr/bin/env python
"""
Implied volatility smile demonstration.

Generates a synthetic volatility smile and recovers implied volatility
from model prices. Optionally plots the smile if matplotlib is available.
"""

import sys
from pathlib import Path

# Add parent directory to path to allow imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bs_pricer.analytics.black_scholes import bs_price
from bs_pricer.analytics.implied_vol import implied_vol


def main():
    """Run IV smile demonstration."""
    # Parameters
    S0 = 100.0
    r = 0.05
    q = 0.01
    T = 1.0
    option_type = "call"

    # Volatility smile parameters
    base_vol = 0.20  # ATM volatility
    skew = -0.15
    curvature = 0.25

    strikes = [60, 70, 80, 90, 100, 110, 120, 130, 150, 200]

    print("=" * 100)
    print("Implied Volatility Smile Demonstration")
    print("=" * 100)
    print(f"\nParameters: S0={S0}, r={r}, q={q}, T={T}, option_type={option_type}")
    print(f"Volatility model: σ(K) = {base_vol} + {skew}*(K/S0 - 1) + {curvature}*(K/S0 - 1)²")
    print("\n" + "-" * 100)
    print(f"{'Strike':<10} {'Moneyness':<12} {'True Vol':<12} "
          f"{'Model Price':<15} {'Implied Vol':<15} {'Abs Error':<12}")
    print("-" * 100)

    results = []
    for K in strikes:
        moneyness = K / S0
        deviation = moneyness - 1.0
        true_sigma = base_vol + skew * deviation + curvature * deviation**2

        market_price = bs_price(S0, K, T, r, true_sigma, option_type, q)
        iv = implied_vol(market_price, S0, K, T, r, option_type, q)
        error = abs(iv - true_sigma)
        results.append((K, moneyness, true_sigma, market_price, iv, error))

        print(f"{K:<10.1f} {moneyness:<12.4f} {true_sigma:<12.6f} "
              f"{market_price:<15.6f} {iv:<15.6f} {error:<12.2e}")

    print("-" * 100)

    errors = [r[5] for r in results]
    print("\nRecovery Statistics:")
    print(f"  Maximum error:  {max(errors):.2e}")
    print(f"  Average error:  {sum(errors) / len(errors):.2e}")
    print(f"  All errors < 1e-3: {'✓' if all(e < 1e-3 for e in errors) else '✗'}")

    # Optional plotting
    try:
        import matplotlib.pyplot as plt

        print("\n" + "=" * 100)
        print("Generating plot...")
        print("=" * 100)

        strikes_list = [r[0] for r in results]
        true_vols = [r[2] for r in results]
        implied_vols = [r[4] for r in results]

        plt.figure(figsize=(10, 6))
        plt.plot(strikes_list, true_vols, 'b-o', label='True Volatility', linewidth=2)
        plt.plot(strikes_list, implied_vols, 'r--s', label='Implied Volatility', linewidth=2)
        plt.axvline(S0, color='gray', linestyle=':', alpha=0.7, label=f'ATM (S0={S0})')
        plt.xlabel('Strike Price (K)', fontsize=12)
        plt.ylabel('Volatility', fontsize=12)
        plt.title('Volatility Smile: True vs Recovered Implied Volatility', fontsize=14)
        plt.legend(fontsize=10)
        plt.grid(True, alpha=0.3)
        plt.tight_layout()

        plots_dir = Path(__file__).parent.parent / "plots"
        plots_dir.mkdir(exist_ok=True)
        output_path = plots_dir / "iv_smile.png"
        plt.savefig(output_path, dpi=150, bbox_inches='tight')
        print(f"\nPlot saved to: {output_path}")
        print("=" * 100)

    except ImportError:
        print("\n" + "=" * 100)
        print("Note: matplotlib not available - skipping plot generation")
        print("Install with: pip install -e \".[plots]\"")
        print("=" * 100)

    print("\nKey Observations:")
    print("  • Newton steps converge in a few iterations near the money")
    print("  • Deep OTM strikes (K=200) fall back to bisection where vega vanishes")
    print("  • The dividend yield must be passed to the solver to recover the smile")
    print("=" * 100)


if __name__ == "__main__":
    main()
