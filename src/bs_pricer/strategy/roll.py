"""
Roll planning for long option positions.

Two tools:

- ``plan_rolls`` chains capital through a sequence of options held one
  after another. Each leg is bought with whatever the previous leg returned,
  held for a number of days (or to expiry for the last leg), and sold at the
  model price less slippage.
- ``optimize_roll`` compares, for every day of an option's life, selling it
  and buying a longer-dated option against holding to expiry, along an
  assumed price path that ramps to a peak and then drifts to a final price.

Expiries are year fractions measured from today. Calendar offsets between
legs use 365.25-day years; remaining option life uses 365-day years, as the
rest of the package does.
"""

import math
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from bs_pricer.analytics.black_scholes import (
    DAYS_PER_YEAR,
    MIN_TIME,
    OptionType,
    intrinsic_value,
    price_with_greeks,
)
from bs_pricer.strategy.legs import CONTRACT_MULTIPLIER
from bs_pricer.strategy.sizing import PositionSize, size_position

CALENDAR_DAYS_PER_YEAR = 365.25

# Leg volatility floor when derived from a shifted base volatility
MIN_LEG_IV = 0.05

PATH_MODES = ("linear", "flat")

# Critical-point thresholds for optimize_roll
TIME_VALUE_CRITICAL_PCT = 0.5
THETA_CRITICAL_PCT = 0.005
MIN_OPTION_VALUE = 0.01

_TARGET_SENSITIVITY_POINTS = 30
_FINAL_PRICE_SCENARIOS = 13
_ROLL_DAY_POINTS = 80


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


@dataclass(frozen=True)
class RollLeg:
    """
    One option in a roll sequence.

    Attributes
    ----------
    option_type : OptionType
        Call or put
    strike : float
        Strike price (must be > 0)
    expiry : float
        Expiry in years from today
    roll_after_days : int | None
        Days to hold before rolling into the next leg. None or 0 holds to
        expiry. Ignored for the last leg, which is always held to expiry.
    iv : float | None
        Volatility for this leg. None derives it from the base volatility.
    premium : float
        Entry price per unit. Zero means "use the model price".
    spot_at_roll : float | None
        Underlying price when this leg is entered, overriding the path
    label : str
        Display name
    """

    option_type: OptionType
    strike: float
    expiry: float
    roll_after_days: int | None = None
    iv: float | None = None
    premium: float = 0.0
    spot_at_roll: float | None = None
    label: str = ""

    def __post_init__(self):
        object.__setattr__(self, "option_type", OptionType.parse(self.option_type))
        if self.strike <= 0:
            raise ValueError(f"strike must be positive, got {self.strike}")
        if self.premium < 0:
            raise ValueError(f"premium must be non-negative, got {self.premium}")
        if self.iv is not None and self.iv <= 0:
            raise ValueError(f"iv must be positive, got {self.iv}")
        if self.roll_after_days is not None and self.roll_after_days < 0:
            raise ValueError(f"roll_after_days must be non-negative, got {self.roll_after_days}")


@dataclass
class RollLegResult:
    """Outcome of holding one leg of a roll sequence."""

    leg: RollLeg
    entry_day: int
    exit_day: int
    T: float
    hold_days: int
    spot_at_entry: float
    spot_at_exit: float
    iv: float
    entry_price: float
    size: PositionSize
    capital_in: float
    exit_price: float
    exit_proceeds: float
    pnl: float
    pnl_pct: float


@dataclass
class RollPlan:
    """
    Results of plan_rolls.

    Attributes
    ----------
    legs : list[RollLegResult]
        Per-leg outcomes in holding order
    investment : float
        Starting capital
    final_capital : float
        Capital after the last leg, including cash never deployed
    total_pnl : float
        final_capital - investment
    total_pnl_pct : float
        total_pnl / investment
    days_held : int
        Sum of holding days over all legs
    journey_days : int
        Calendar days from today to the last expiry
    """

    legs: list[RollLegResult]
    investment: float
    final_capital: float
    total_pnl: float
    total_pnl_pct: float
    days_held: int
    journey_days: int


def _path_spot(spot: float, target: float, day: float, journey_days: int) -> float:
    frac = day / journey_days if journey_days > 0 else 1.0
    return spot + (target - spot) * frac


def _run_chain(
    legs: list[RollLeg],
    spot: float,
    target: float,
    r: float,
    q: float,
    investment: float,
    leg_iv: Callable[[RollLeg], float],
    slippage_mult: float,
    path: str,
    use_spot_overrides: bool,
) -> tuple[list[RollLegResult], float]:
    journey_days = _round_half_up(legs[-1].expiry * CALENDAR_DAYS_PER_YEAR)

    capital = investment
    elapsed = 0
    results = []

    for i, leg in enumerate(legs):
        is_last = i == len(legs) - 1
        T = max(leg.expiry - elapsed / CALENDAR_DAYS_PER_YEAR, MIN_TIME)
        leg_days = _round_half_up(T * DAYS_PER_YEAR)
        hold_days = leg_days if is_last else min(leg.roll_after_days or leg_days, leg_days)

        if i == 0:
            spot_in = spot
        elif use_spot_overrides and leg.spot_at_roll:
            spot_in = leg.spot_at_roll
        elif path == "linear":
            spot_in = _path_spot(spot, target, elapsed, journey_days) if journey_days > 0 else spot
        else:
            spot_in = spot

        if is_last:
            spot_out = target
        elif use_spot_overrides and legs[i + 1].spot_at_roll:
            spot_out = legs[i + 1].spot_at_roll
        elif path == "linear":
            spot_out = _path_spot(spot, target, elapsed + hold_days, journey_days)
        else:
            spot_out = spot

        iv = leg_iv(leg)
        model_entry = price_with_greeks(spot_in, leg.strike, T, r, iv, leg.option_type, q).price
        entry_price = leg.premium if leg.premium > 0 else model_entry
        size = size_position(capital, entry_price)

        exit_T = max(T - hold_days / DAYS_PER_YEAR, MIN_TIME)
        exit_price = price_with_greeks(spot_out, leg.strike, exit_T, r, iv, leg.option_type, q).price
        proceeds = exit_price * CONTRACT_MULTIPLIER * size.num_contracts
        if not is_last:
            proceeds *= slippage_mult
        pnl = proceeds - size.principal

        results.append(
            RollLegResult(
                leg=leg,
                entry_day=elapsed,
                exit_day=elapsed + hold_days,
                T=T,
                hold_days=hold_days,
                spot_at_entry=spot_in,
                spot_at_exit=spot_out,
                iv=iv,
                entry_price=entry_price,
                size=size,
                capital_in=capital,
                exit_price=exit_price,
                exit_proceeds=proceeds,
                pnl=pnl,
                pnl_pct=pnl / size.principal if size.principal > 0 else 0.0,
            )
        )

        capital = proceeds + size.unused_cash
        elapsed += hold_days

    return results, capital


def _check_roll_inputs(legs: list[RollLeg], spot: float, investment: float, path: str) -> None:
    if not legs:
        raise ValueError("Roll plan must contain at least one leg")
    if spot <= 0:
        raise ValueError("spot must be positive")
    if investment <= 0:
        raise ValueError("investment must be positive")
    if path not in PATH_MODES:
        raise ValueError(f"path must be one of {PATH_MODES}, got {path!r}")


def _base_leg_iv(sigma: float, iv_shift_pct: float) -> float:
    return max(MIN_LEG_IV, sigma * (1.0 + iv_shift_pct / 100.0))


def plan_rolls(
    legs: list[RollLeg],
    spot: float,
    r: float,
    sigma: float,
    investment: float,
    q: float = 0.0,
    *,
    target_price: float | None = None,
    iv_shift_pct: float = 0.0,
    slippage_pct: float = 0.0,
    path: str = "linear",
) -> RollPlan:
    """
    Chain capital through a sequence of options held one after another.

    Each leg buys as many whole contracts as the available capital allows
    (at least one), and the next leg starts with the exit proceeds plus the
    cash left over. Slippage is charged on every exit except the last.

    Parameters
    ----------
    legs : list[RollLeg]
        Options in holding order
    spot : float
        Current underlying price
    r : float
        Risk-free rate
    sigma : float
        Base volatility for legs without their own iv
    investment : float
        Starting capital
    q : float, optional
        Continuous dividend yield (default: 0)
    target_price : float | None, optional
        Underlying price at the last expiry (default: spot)
    iv_shift_pct : float, optional
        Relative shift of the base volatility in percent, floored at
        MIN_LEG_IV (default: 0)
    slippage_pct : float, optional
        Percentage lost on each roll exit (default: 0)
    path : str, optional
        'linear' interpolates the underlying from spot to target_price over
        the journey; 'flat' keeps it at spot until the last exit. A leg's
        spot_at_roll overrides either.

    Returns
    -------
    RollPlan

    Raises
    ------
    ValueError
        If legs is empty, spot or investment is not positive, or path is
        unknown
    """
    _check_roll_inputs(legs, spot, investment, path)
    target = spot if target_price is None else target_price
    base_iv = _base_leg_iv(sigma, iv_shift_pct)

    results, capital = _run_chain(
        legs,
        spot,
        target,
        r,
        q,
        investment,
        leg_iv=lambda leg: leg.iv if leg.iv is not None else base_iv,
        slippage_mult=1.0 - slippage_pct / 100.0,
        path=path,
        use_spot_overrides=True,
    )

    total_pnl = capital - investment
    return RollPlan(
        legs=results,
        investment=investment,
        final_capital=capital,
        total_pnl=total_pnl,
        total_pnl_pct=total_pnl / investment,
        days_held=sum(res.hold_days for res in results),
        journey_days=_round_half_up(legs[-1].expiry * CALENDAR_DAYS_PER_YEAR),
    )


def roll_target_sensitivity(
    legs: list[RollLeg],
    spot: float,
    r: float,
    sigma: float,
    investment: float,
    q: float = 0.0,
    *,
    prices: np.ndarray | None = None,
    iv_shift_pct: float = 0.0,
    slippage_pct: float = 0.0,
) -> dict[float, float]:
    """
    Final capital of the roll sequence for a range of final underlying prices.

    Each run moves the underlying linearly from spot to the final price and
    ignores per-leg spot_at_roll overrides.

    Parameters
    ----------
    prices : np.ndarray | None
        Final underlying prices. Defaults to 30 evenly spaced prices up to
        max(5 * spot, 500).

    Returns
    -------
    dict[float, float]
        Final capital keyed by final underlying price
    """
    _check_roll_inputs(legs, spot, investment, "linear")
    if prices is None:
        top = max(spot * 5.0, 500.0)
        prices = np.linspace(top / _TARGET_SENSITIVITY_POINTS, top, _TARGET_SENSITIVITY_POINTS)
    base_iv = _base_leg_iv(sigma, iv_shift_pct)

    result = {}
    for p in np.asarray(prices, dtype=float):
        _, capital = _run_chain(
            legs,
            spot,
            float(p),
            r,
            q,
            investment,
            leg_iv=lambda leg: leg.iv if leg.iv is not None else base_iv,
            slippage_mult=1.0 - slippage_pct / 100.0,
            path="linear",
            use_spot_overrides=False,
        )
        result[float(p)] = capital
    return result


def roll_iv_sensitivity(
    legs: list[RollLeg],
    spot: float,
    r: float,
    sigma: float,
    investment: float,
    q: float = 0.0,
    *,
    target_price: float | None = None,
    iv_shifts: tuple[float, ...] = tuple(range(-30, 31, 5)),
    iv_shift_pct: float = 0.0,
    slippage_pct: float = 0.0,
) -> dict[float, float]:
    """
    Final capital of the roll sequence under relative volatility shifts.

    Every leg, including those with their own iv, is priced at
    sigma * (1 + (iv_shift_pct + shift) / 100), floored at MIN_LEG_IV.

    Returns
    -------
    dict[float, float]
        Final capital keyed by shift in percent
    """
    _check_roll_inputs(legs, spot, investment, "linear")
    target = spot if target_price is None else target_price

    result = {}
    for shift in iv_shifts:
        shifted = _base_leg_iv(sigma, iv_shift_pct + shift)
        _, capital = _run_chain(
            legs,
            spot,
            target,
            r,
            q,
            investment,
            leg_iv=lambda leg: shifted,
            slippage_mult=1.0 - slippage_pct / 100.0,
            path="linear",
            use_spot_overrides=False,
        )
        result[float(shift)] = capital
    return result


def roll_price_path(
    day: float,
    spot: float,
    peak_price: float,
    peak_day: float,
    final_price: float,
    total_days: int,
) -> float:
    """
    Underlying price on a given day of the assumed roll path.

    The price eases from spot to peak_price by peak_day (smoothstep), then
    moves linearly to final_price on total_days.
    """
    if day <= 0:
        return spot
    if day >= total_days:
        return final_price
    if day <= peak_day:
        frac = day / peak_day if peak_day > 0 else 1.0
        smooth = frac * frac * (3.0 - 2.0 * frac)
        return spot + (peak_price - spot) * smooth
    remaining = total_days - peak_day
    frac = (day - peak_day) / remaining if remaining > 0 else 1.0
    return peak_price + (final_price - peak_price) * frac


@dataclass
class RollDay:
    """Hold-versus-roll comparison for rolling on one day."""

    day: int
    days_remaining: int
    spot: float
    option_value: float
    position_value: float
    pnl: float
    pnl_pct: float
    intrinsic: float
    time_value: float
    time_value_pct: float
    daily_theta: float
    hold_pnl: float
    sell_proceeds: float
    roll_entry_price: float
    roll_contracts: int
    roll_value: float
    roll_pnl: float
    roll_advantage: float


@dataclass
class RollOptimization:
    """
    Results of optimize_roll.

    Attributes
    ----------
    days : list[RollDay]
        One comparison per evaluated day, ending on expiry
    entry_price : float
        Entry price of the held option
    size : PositionSize
        Contracts bought with the investment
    total_days : int
        Days to expiry of the held option
    optimal_roll : RollDay
        Day with the largest roll advantage
    peak_value : RollDay
        Day with the largest position value
    time_value_critical : RollDay | None
        First day time value falls below TIME_VALUE_CRITICAL_PCT of the
        option value
    theta_critical : RollDay | None
        First day daily decay exceeds THETA_CRITICAL_PCT of the position
        value
    """

    days: list[RollDay]
    entry_price: float
    size: PositionSize
    total_days: int
    optimal_roll: RollDay
    peak_value: RollDay
    time_value_critical: RollDay | None
    theta_critical: RollDay | None

    def __repr__(self) -> str:
        return (
            f"RollOptimization(\n"
            f"  contracts={self.size.num_contracts}, principal={self.size.principal:,.2f},\n"
            f"  optimal_roll_day={self.optimal_roll.day}, "
            f"advantage={self.optimal_roll.roll_advantage:,.2f},\n"
            f"  peak_value_day={self.peak_value.day}\n"
            f")"
        )


def _roll_size(proceeds: float, price: float) -> PositionSize:
    if price > 0:
        return size_position(proceeds, price)
    return PositionSize(num_contracts=0, principal=0.0, unused_cash=proceeds)


def optimize_roll(
    option_type: OptionType | str,
    spot: float,
    strike: float,
    T: float,
    r: float,
    sigma: float,
    investment: float,
    q: float = 0.0,
    *,
    roll_strike: float,
    roll_T: float,
    roll_sigma: float | None = None,
    peak_price: float,
    peak_day: float,
    final_price: float,
    entry_price: float = 0.0,
    slippage_pct: float = 0.0,
) -> RollOptimization:
    """
    Find the best day to roll a held option into a longer-dated one.

    For each evaluated day the held position is sold at the model price less
    slippage and the proceeds buy the roll-into option. Holding is valued at
    intrinsic on the held option's expiry; rolling is valued at the model
    price of the roll-into option on that same date. The roll advantage is
    the difference.

    Parameters
    ----------
    option_type : OptionType | str
        Type of both the held and the roll-into option
    spot, strike, T : float
        Current underlying price, held strike and held expiry in years
    r : float
        Risk-free rate
    sigma : float
        Volatility of the held option
    investment : float
        Capital used to buy the held option
    q : float, optional
        Continuous dividend yield (default: 0)
    roll_strike, roll_T : float
        Strike and expiry in years from today of the roll-into option
    roll_sigma : float | None, optional
        Volatility of the roll-into option (default: sigma)
    peak_price, peak_day, final_price : float
        Assumed price path, see roll_price_path
    entry_price : float, optional
        Price paid per unit; zero uses the model price (default: 0)
    slippage_pct : float, optional
        Percentage lost when selling the held option (default: 0)

    Returns
    -------
    RollOptimization

    Raises
    ------
    ValueError
        If spot, either strike or the investment is not positive
    """
    option_type = OptionType.parse(option_type)
    if spot <= 0:
        raise ValueError("spot must be positive")
    if strike <= 0 or roll_strike <= 0:
        raise ValueError("strike must be positive")
    if investment <= 0:
        raise ValueError("investment must be positive")

    T = max(T, MIN_TIME)
    roll_T = max(roll_T, MIN_TIME)
    roll_sigma = sigma if roll_sigma is None else roll_sigma
    total_days = _round_half_up(T * DAYS_PER_YEAR)
    slippage_mult = 1.0 - slippage_pct / 100.0

    if entry_price <= 0:
        entry_price = price_with_greeks(spot, strike, T, r, sigma, option_type, q).price
    size = size_position(investment, entry_price)
    n = size.num_contracts
    scale = CONTRACT_MULTIPLIER * n

    hold_value = intrinsic_value(final_price, strike, option_type) * scale
    hold_pnl = hold_value - size.principal
    roll_T_at_expiry = max(roll_T - total_days / DAYS_PER_YEAR, MIN_TIME)
    roll_unit_at_expiry = price_with_greeks(
        final_price, roll_strike, roll_T_at_expiry, r, roll_sigma, option_type, q
    ).price

    day_step = max(_round_half_up(total_days / _ROLL_DAY_POINTS), 1)
    days = []
    for d in range(0, total_days + 1, day_step):
        s = roll_price_path(d, spot, peak_price, peak_day, final_price, total_days)
        current = price_with_greeks(
            s, strike, max(T - d / DAYS_PER_YEAR, MIN_TIME), r, sigma, option_type, q
        )
        position_value = current.price * scale
        pnl = position_value - size.principal
        intrinsic = intrinsic_value(s, strike, option_type)
        time_value = max(0.0, current.price - intrinsic)

        proceeds = position_value * slippage_mult
        roll_price = price_with_greeks(
            s, roll_strike, max(roll_T - d / DAYS_PER_YEAR, MIN_TIME), r, roll_sigma,
            option_type, q,
        ).price
        roll_size = _roll_size(proceeds, roll_price)
        roll_value = roll_unit_at_expiry * CONTRACT_MULTIPLIER * roll_size.num_contracts
        roll_value += roll_size.unused_cash
        roll_pnl = roll_value - size.principal

        days.append(
            RollDay(
                day=d,
                days_remaining=max(total_days - d, 0),
                spot=s,
                option_value=current.price,
                position_value=position_value,
                pnl=pnl,
                pnl_pct=pnl / size.principal if size.principal > 0 else 0.0,
                intrinsic=intrinsic,
                time_value=time_value,
                time_value_pct=time_value / current.price if current.price > 0 else 0.0,
                daily_theta=current.theta,
                hold_pnl=hold_pnl,
                sell_proceeds=proceeds,
                roll_entry_price=roll_price,
                roll_contracts=roll_size.num_contracts,
                roll_value=roll_value,
                roll_pnl=roll_pnl,
                roll_advantage=roll_pnl - hold_pnl,
            )
        )

    # Expiry itself: nothing left to roll
    if days[-1].day < total_days:
        intrinsic = intrinsic_value(final_price, strike, option_type)
        value = intrinsic * scale
        days.append(
            RollDay(
                day=total_days,
                days_remaining=0,
                spot=final_price,
                option_value=intrinsic,
                position_value=value,
                pnl=value - size.principal,
                pnl_pct=(value - size.principal) / size.principal if size.principal > 0 else 0.0,
                intrinsic=intrinsic,
                time_value=0.0,
                time_value_pct=0.0,
                daily_theta=0.0,
                hold_pnl=value - size.principal,
                sell_proceeds=0.0,
                roll_entry_price=0.0,
                roll_contracts=0,
                roll_value=0.0,
                roll_pnl=-size.principal,
                roll_advantage=0.0,
            )
        )

    optimal = days[0]
    peak = days[0]
    for row in days[1:]:
        if row.roll_advantage > optimal.roll_advantage:
            optimal = row
        if row.position_value > peak.position_value:
            peak = row

    time_value_critical = next(
        (
            row for row in days
            if row.day > 0
            and row.time_value_pct < TIME_VALUE_CRITICAL_PCT
            and row.option_value > MIN_OPTION_VALUE
        ),
        None,
    )
    theta_critical = next(
        (
            row for row in days
            if row.day > 0
            and row.position_value > 0
            and abs(row.daily_theta * scale) / row.position_value > THETA_CRITICAL_PCT
        ),
        None,
    )

    return RollOptimization(
        days=days,
        entry_price=entry_price,
        size=size,
        total_days=total_days,
        optimal_roll=optimal,
        peak_value=peak,
        time_value_critical=time_value_critical,
        theta_critical=theta_critical,
    )


def optimal_roll_by_final_price(
    option_type: OptionType | str,
    spot: float,
    strike: float,
    T: float,
    r: float,
    sigma: float,
    investment: float,
    q: float = 0.0,
    *,
    roll_strike: float,
    roll_T: float,
    roll_sigma: float | None = None,
    peak_price: float,
    peak_day: float,
    final_prices: np.ndarray | None = None,
    entry_price: float = 0.0,
    slippage_pct: float = 0.0,
) -> dict[float, tuple[int, float]]:
    """
    Optimal roll day for each assumed final underlying price.

    Days are sampled twice as coarsely as in optimize_roll, and the
    expiry-day row is not added.

    Parameters
    ----------
    final_prices : np.ndarray | None
        Final underlying prices. Defaults to 13 whole-unit prices from
        max(spot / 2, 1) to max(2 * strike, 4 * spot).

    Returns
    -------
    dict[float, tuple[int, float]]
        (optimal day, roll advantage on that day) keyed by final price
    """
    if final_prices is None:
        lo = max(spot * 0.5, 1.0)
        hi = max(strike * 2.0, spot * 4.0)
        final_prices = [
            float(_round_half_up(p)) for p in np.linspace(lo, hi, _FINAL_PRICE_SCENARIOS)
        ]

    T = max(T, MIN_TIME)
    total_days = _round_half_up(T * DAYS_PER_YEAR)
    day_step = max(_round_half_up(total_days / _ROLL_DAY_POINTS), 1) * 2

    result = {}
    for final_price in final_prices:
        analysis = optimize_roll(
            option_type, spot, strike, T, r, sigma, investment, q,
            roll_strike=roll_strike,
            roll_T=roll_T,
            roll_sigma=roll_sigma,
            peak_price=peak_price,
            peak_day=peak_day,
            final_price=float(final_price),
            entry_price=entry_price,
            slippage_pct=slippage_pct,
        )
        best_day, best_advantage = 0, -math.inf
        for row in analysis.days:
            if row.day % day_step == 0 and row.roll_advantage > best_advantage:
                best_day, best_advantage = row.day, row.roll_advantage
        result[float(final_price)] = (best_day, best_advantage)
    return result
