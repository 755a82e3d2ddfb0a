"""
Greeks result types.
"""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class Greeks:
    """
    Option value and sensitivities from the Black-Scholes evaluator.

    Attributes
    ----------
    price : float
        Theoretical option value
    delta : float
        ∂V/∂S per 1 unit of spot
    gamma : float
        ∂²V/∂S² per 1 unit of spot, squared
    theta : float
        ∂V/∂t per calendar day (annual theta / 365)
    vega : float
        ∂V/∂σ per 1 vol point (analytic vega / 100)
    rho : float
        ∂V/∂r per 1 rate point (analytic rho / 100)
    """

    price: float
    delta: float
    gamma: float
    theta: float
    vega: float
    rho: float

    def scaled(self, factor: float) -> "Greeks":
        """Return a copy with every field multiplied by ``factor``."""
        return Greeks(
            price=self.price * factor,
            delta=self.delta * factor,
            gamma=self.gamma * factor,
            theta=self.theta * factor,
            vega=self.vega * factor,
            rho=self.rho * factor,
        )

    def __add__(self, other: "Greeks") -> "Greeks":
        if not isinstance(other, Greeks):
            return NotImplemented
        return Greeks(
            price=self.price + other.price,
            delta=self.delta + other.delta,
            gamma=self.gamma + other.gamma,
            theta=self.theta + other.theta,
            vega=self.vega + other.vega,
            rho=self.rho + other.rho,
        )

    def to_dict(self) -> dict[str, float]:
        """Convert to a plain dictionary for JSON serialization."""
        return asdict(self)

    def __repr__(self) -> str:
        return (
            f"Greeks(\n"
            f"  price={self.price:.6f},\n"
            f"  delta={self.delta:.6f}, gamma={self.gamma:.6f},\n"
            f"  theta={self.theta:.6f}, vega={self.vega:.6f}, rho={self.rho:.6f}\n"
            f")"
        )


ZERO_GREEKS = Greeks(price=0.0, delta=0.0, gamma=0.0, theta=0.0, vega=0.0, rho=0.0)
