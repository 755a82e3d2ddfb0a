"""
I/O utilities for pricing configurations and results.
"""

import json
from dataclasses import fields
from pathlib import Path
from typing import Any

from bs_pricer.experiments.types import PricingConfig, PricingRunResult


def config_from_dict(data: dict[str, Any]) -> PricingConfig:
    """
    Build a PricingConfig from a mapping.

    Raises
    ------
    ValueError
        If required keys are missing or unknown keys are present
    """
    known = {f.name for f in fields(PricingConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

    try:
        return PricingConfig(**data)
    except TypeError as e:
        raise ValueError(f"Invalid pricing config: {e}") from e


def load_configs(path: str | Path) -> list[PricingConfig]:
    """
    Load pricing configurations from a JSON file.

    The file holds either a list of config objects or an object with a
    ``"configs"`` list.
    """
    with open(path) as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("configs")
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of pricing configs")

    return [config_from_dict(item) for item in data]


def _fmt(value: float | None, spec: str = ".6f") -> str:
    return "N/A" if value is None else format(value, spec)


def save_results(
    results: list[PricingRunResult],
    out_dir: Path,
    run_name: str
) -> None:
    """
    Save run results to JSON and summary text files.

    Creates:
    - results.json: Full machine-readable results
    - summary.txt: Human-readable table summary

    Parameters
    ----------
    results : list[PricingRunResult]
        Results to save
    out_dir : Path
        Output directory
    run_name : str
        Name of the batch for headers
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    json_path = out_dir / "results.json"
    json_data = {
        "run_name": run_name,
        "n_results": len(results),
        "results": [r.to_dict() for r in results]
    }

    with open(json_path, "w") as f:
        json.dump(json_data, f, indent=2)

    summary_path = out_dir / "summary.txt"
    with open(summary_path, "w") as f:
        f.write("=" * 120 + "\n")
        f.write(f"Run: {run_name}\n")
        f.write("=" * 120 + "\n")
        f.write(f"\nTotal runs: {len(results)}\n")

        if results:
            meta = results[0].metadata
            f.write("\nMetadata:\n")
            f.write(f"  Timestamp:      {meta.timestamp}\n")
            f.write(f"  Python:         {meta.python_version}\n")
            f.write(f"  NumPy:          {meta.numpy_version}\n")
            f.write(f"  Platform:       {meta.platform_system} {meta.platform_release}\n")
            f.write(f"  Git commit:     {meta.git_commit or 'N/A'}\n")

        f.write("\n" + "-" * 120 + "\n")
        f.write(f"{'Name':<20} {'Type':<5} {'Price':>12} {'Delta':>10} {'Gamma':>10} "
                f"{'Theta/day':>10} {'Vega/1%':>10} {'Rho/1%':>10} {'IV':>10} "
                f"{'FD dev':>10}\n")
        f.write("-" * 120 + "\n")

        for r in results:
            g = r.greeks
            f.write(f"{r.config_name:<20} {r.option_type:<5} {g.price:>12.6f} "
                    f"{g.delta:>10.6f} {g.gamma:>10.6f} {g.theta:>10.6f} "
                    f"{g.vega:>10.6f} {g.rho:>10.6f} {_fmt(r.implied_vol):>10} "
                    f"{_fmt(r.max_fd_deviation, '.2e'):>10}\n")

        f.write("-" * 120 + "\n")

    print(f"\n✓ Results saved to {out_dir}")
    print(f"  - {json_path.name}")
    print(f"  - {summary_path.name}")


def load_results(results_dir: Path) -> dict:
    """
    Load run results from JSON file.

    Parameters
    ----------
    results_dir : Path
        Directory containing results.json

    Returns
    -------
    dict
        Loaded run data
    """
    json_path = Path(results_dir) / "results.json"
    with open(json_path) as f:
        return json.load(f)
