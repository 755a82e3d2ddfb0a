"""
Batch execution of pricing configurations.
"""

import time

from bs_pricer.analytics.black_scholes import OptionType, bs_price, price_with_greeks
from bs_pricer.analytics.implied_vol import IV_MIN, implied_vol
from bs_pricer.experiments.artifacts import ArtifactMetadata, collect_metadata
from bs_pricer.experiments.types import PricingConfig, PricingRunResult
from bs_pricer.greeks.finite_diff import finite_diff_greeks

_GREEK_FIELDS = ("delta", "gamma", "theta", "vega", "rho")


def validate_config(config: PricingConfig) -> OptionType:
    """
    Check a configuration before running it.

    Degenerate market inputs (T = 0, sigma = 0, ...) are valid: the
    evaluator prices them at intrinsic value. Only malformed configs fail.

    Returns
    -------
    OptionType
        Parsed option type

    Raises
    ------
    ValueError
        If the option type is unknown, a numeric field is not a number, or
        finite-difference Greeks are requested on a degenerate input
    """
    option_type = OptionType.parse(config.option_type)

    for name in ("S0", "K", "T", "r", "sigma", "q", "initial_guess"):
        value = getattr(config, name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{name} must be a number, got {value!r}")

    if config.compute_fd_greeks and not (
        config.S0 > 0 and config.K > 0 and config.T > 0 and config.sigma > 0
    ):
        raise ValueError("Finite-difference Greeks require positive S0, K, T and sigma")

    return option_type


def run_config(
    config: PricingConfig, metadata: ArtifactMetadata | None = None
) -> PricingRunResult:
    """
    Price one configuration.

    Parameters
    ----------
    config : PricingConfig
        Run configuration
    metadata : ArtifactMetadata | None
        Environment metadata; collected if not given

    Returns
    -------
    PricingRunResult

    Raises
    ------
    ValueError
        If configuration is invalid
    """
    option_type = validate_config(config)
    if metadata is None:
        metadata = collect_metadata()

    args = (config.S0, config.K, config.T, config.r, config.sigma, option_type, config.q)
    notes_parts = ["BS"]

    start_time = time.perf_counter()

    greeks = price_with_greeks(*args)

    iv = None
    if config.market_price is not None:
        iv = implied_vol(
            config.market_price,
            config.S0,
            config.K,
            config.T,
            config.r,
            option_type,
            config.q,
            initial_guess=config.initial_guess,
        )
        notes_parts.append("IV")

    fd_greeks = None
    max_dev = None
    if config.compute_fd_greeks:
        fd_greeks = finite_diff_greeks(*args)
        max_dev = max(
            abs(getattr(greeks, name) - getattr(fd_greeks, name)) for name in _GREEK_FIELDS
        )
        notes_parts.append("FD")

    vol_ladder = {}
    for shift in config.vol_shifts:
        shocked = max(config.sigma + shift, IV_MIN)
        vol_ladder[float(shift)] = bs_price(
            config.S0, config.K, config.T, config.r, shocked, option_type, config.q
        )
    if vol_ladder:
        notes_parts.append("ladder")

    runtime = time.perf_counter() - start_time

    return PricingRunResult(
        config_name=config.name,
        option_type=option_type.value,
        greeks=greeks,
        implied_vol=iv,
        fd_greeks=fd_greeks,
        max_fd_deviation=max_dev,
        vol_ladder=vol_ladder,
        runtime_seconds=runtime,
        metadata=metadata,
        notes="+".join(notes_parts),
    )


def run_configs(configs: list[PricingConfig]) -> list[PricingRunResult]:
    """
    Run a batch of configurations.

    Invalid configurations are reported and skipped; the rest still run.
    Environment metadata is collected once for the whole batch.
    """
    metadata = collect_metadata()
    results = []

    for config in configs:
        try:
            results.append(run_config(config, metadata))
        except ValueError as e:
            print(f"Error in run {config.name}: {e}")
            continue

    return results
