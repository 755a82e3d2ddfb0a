#!/usr/bin/env python
"""
Reproducible pricing benchmark runner.

Usage:
    python scripts/runner.py --experiment greeks_check
    python scripts/runner.py --experiment iv_round_trip
    python scripts/runner.py --experiment all
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bs_pricer.analytics.black_scholes import bs_price
from bs_pricer.experiments import PricingConfig, run_configs, save_results


def get_greeks_check_configs() -> list[PricingConfig]:
    """
    Analytic vs finite-difference Greeks across moneyness and dividends.

    Every run also carries a ±5 vol point price ladder.
    """
    configs = []
    for option_type in ("call", "put"):
        for K in (80.0, 100.0, 120.0):
            for q in (0.0, 0.03):
                configs.append(
                    PricingConfig(
                        name=f"{option_type}_K{int(K)}_q{q:g}",
                        option_type=option_type,
                        S0=100.0,
                        K=K,
                        T=1.0,
                        r=0.05,
                        sigma=0.2,
                        q=q,
                        compute_fd_greeks=True,
                        vol_shifts=[-0.05, 0.05],
                    )
                )
    return configs


def get_iv_round_trip_configs() -> list[PricingConfig]:
    """
    Implied volatility recovery from model prices.

    Covers the near-the-money Newton path, the deep OTM bisection
    fallback and a crypto-scale underlying.
    """
    cases = [
        ("atm", "call", 100.0, 100.0, 1.0, 0.05, 0.30),
        ("deep_otm", "call", 100.0, 200.0, 0.5, 0.05, 0.40),
        ("otm_put", "put", 100.0, 80.0, 0.25, 0.03, 0.35),
        ("crypto", "call", 100000.0, 110000.0, 1.0, 0.045, 0.60),
        ("high_vol", "put", 50.0, 55.0, 2.0, 0.02, 1.50),
    ]
    configs = []
    for name, option_type, S0, K, T, r, sigma in cases:
        configs.append(
            PricingConfig(
                name=name,
                option_type=option_type,
                S0=S0,
                K=K,
                T=T,
                r=r,
                sigma=sigma,
                market_price=bs_price(S0, K, T, r, sigma, option_type),
            )
        )
    return configs


EXPERIMENTS = {
    "greeks_check": ("Analytic vs Finite-Difference Greeks", get_greeks_check_configs),
    "iv_round_trip": ("Implied Volatility Round Trip", get_iv_round_trip_configs),
}


def run_experiment(name: str, results_dir: Path) -> None:
    title, build = EXPERIMENTS[name]

    print("\n" + "=" * 80)
    print(f"BENCHMARK: {title}")
    print("=" * 80)

    configs = build()
    print(f"\nRunning {len(configs)} configurations...")
    results = run_configs(configs)

    if name == "iv_round_trip":
        print(f"\n{'Run':<12} {'True Vol':>10} {'Implied Vol':>12} {'Abs Error':>12}")
        print("-" * 50)
        for config, r in zip(configs, results):
            error = abs(r.implied_vol - config.sigma)
            print(f"{r.config_name:<12} {config.sigma:>10.4f} {r.implied_vol:>12.6f} {error:>12.2e}")

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_dir = results_dir / name / timestamp
    save_results(results, out_dir, title)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Run reproducible pricing benchmarks",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--experiment",
        type=str,
        required=True,
        choices=[*EXPERIMENTS, "all"],
        help="Experiment to run",
    )

    parser.add_argument(
        "--results_dir", type=Path, default=Path("results"), help="Directory for results output"
    )

    args = parser.parse_args()

    args.results_dir.mkdir(exist_ok=True)

    print("\n" + "=" * 80)
    print("REPRODUCIBLE EXPERIMENT RUNNER")
    print("=" * 80)
    print(f"Results directory: {args.results_dir.absolute()}")

    names = list(EXPERIMENTS) if args.experiment == "all" else [args.experiment]
    for name in names:
        run_experiment(name, args.results_dir)

    print("\n" + "=" * 80)
    print("✓ All experiments complete")
    print("=" * 80)


if __name__ == "__main__":
    main()
