"""
Experiments package for reproducible batch pricing runs.
"""

from bs_pricer.experiments.artifacts import ArtifactMetadata, format_summary_table, save_artifact
from bs_pricer.experiments.io import load_configs, load_results, save_results
from bs_pricer.experiments.run import run_config, run_configs
from bs_pricer.experiments.types import PricingConfig, PricingRunResult

__all__ = [
    "ArtifactMetadata",
    "PricingConfig",
    "PricingRunResult",
    "format_summary_table",
    "load_configs",
    "load_results",
    "run_config",
    "run_configs",
    "save_artifact",
    "save_results",
]
