"""
Types and dataclasses for batch pricing runs.
"""

from dataclasses import dataclass, field
from typing import Any

from bs_pricer.experiments.artifacts import ArtifactMetadata
from bs_pricer.greeks.types import Greeks


@dataclass
class PricingConfig:
    """
    Configuration for one pricing run.

    Attributes
    ----------
    name : str
        Run identifier
    option_type : str
        Option type: 'call' or 'put'
    S0 : float
        Spot price
    K : float
        Strike price
    T : float
        Time to maturity in years
    r : float
        Risk-free rate
    sigma : float
        Volatility
    q : float
        Continuous dividend yield
    market_price : float | None
        Observed option price to invert for implied volatility
    initial_guess : float
        Starting point for the implied volatility solver
    compute_fd_greeks : bool
        Cross-check analytic Greeks against finite differences
    vol_shifts : list[float]
        Absolute volatility shocks for the price ladder
    """

    name: str
    option_type: str
    S0: float
    K: float
    T: float
    r: float
    sigma: float
    q: float = 0.0
    market_price: float | None = None
    initial_guess: float = 0.30
    compute_fd_greeks: bool = False
    vol_shifts: list[float] = field(default_factory=list)


@dataclass
class PricingRunResult:
    """
    Results from a single pricing run.

    Attributes
    ----------
    config_name : str
        Name of the run configuration
    option_type : str
        'call' or 'put'
    greeks : Greeks
        Analytic price and Greeks
    implied_vol : float | None
        Implied volatility of market_price (if given)
    fd_greeks : Greeks | None
        Finite-difference Greeks (if requested)
    max_fd_deviation : float | None
        Largest absolute analytic-vs-FD difference over delta, gamma,
        theta, vega and rho
    vol_ladder : dict[float, float]
        Price at sigma + shift for each configured shift
    runtime_seconds : float
        Wall-clock time for computation
    metadata : ArtifactMetadata
        Environment metadata for reproducibility
    notes : str
        Short description of what was computed
    """

    config_name: str
    option_type: str
    greeks: Greeks
    implied_vol: float | None
    fd_greeks: Greeks | None
    max_fd_deviation: float | None
    vol_ladder: dict[float, float]
    runtime_seconds: float
    metadata: ArtifactMetadata
    notes: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary for JSON serialization."""
        return {
            "config_name": self.config_name,
            "option_type": self.option_type,
            "greeks": self.greeks.to_dict(),
            "implied_vol": self.implied_vol,
            "fd_greeks": self.fd_greeks.to_dict() if self.fd_greeks is not None else None,
            "max_fd_deviation": self.max_fd_deviation,
            "vol_ladder": {str(k): v for k, v in self.vol_ladder.items()},
            "runtime_seconds": self.runtime_seconds,
            "notes": self.notes,
            "metadata": self.metadata.to_dict(),
        }
