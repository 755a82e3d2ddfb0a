"""Yahoo Finance option quotes and spot prices.

This module turns vendor option-chain rows into ``OptionQuote`` records that
the implied volatility helpers consume, and fetches the scalar spot price
the evaluator is priced against. Fetching requires yfinance to be installed
(optional dependency, ``pip install -e ".[marketdata]"``).

WARNING: the fetch functions make network calls. Do not import automatically
in production code. Yahoo Finance data is unofficial and provided for
educational and research purposes only.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from bs_pricer.analytics.black_scholes import OptionType


@dataclass
class OptionQuote:
    """Single option quote.

    Attributes
    ----------
    ticker : str
        Underlying ticker symbol (e.g., 'SPY', 'BTC-USD').
    expiry : str
        Expiration date in YYYY-MM-DD format.
    option_type : OptionType
        Call or put.
    strike : float
        Strike price.
    bid : float
        Bid price.
    ask : float
        Ask price.
    last : float | None
        Last traded price (may be None if not available).
    iv_yahoo : float | None
        Vendor implied volatility, as decimal (e.g. 0.25 for 25%).
    open_interest : int | None
        Open interest.
    volume : int | None
        Trading volume.
    underlying_spot : float
        Spot price of underlying at fetch time.
    timestamp_utc : str
        ISO8601 timestamp when data was fetched (UTC).
    """

    ticker: str
    expiry: str
    option_type: OptionType
    strike: float
    bid: float
    ask: float
    last: float | None
    iv_yahoo: float | None
    open_interest: int | None
    volume: int | None
    underlying_spot: float
    timestamp_utc: str

    def __post_init__(self):
        self.option_type = OptionType.parse(self.option_type)

    def mid(self) -> float | None:
        """Compute mid price as (bid + ask) / 2.

        Returns
        -------
        float | None
            Mid price if both bid and ask are positive, otherwise None.
        """
        if self.bid > 0 and self.ask > 0 and self.ask >= self.bid:
            return (self.bid + self.ask) / 2.0
        return None

    def rel_spread(self) -> float | None:
        """Compute relative bid-ask spread.

        Returns
        -------
        float | None
            (ask - bid) / max(mid, 1e-12) if mid is valid, else None.
        """
        mid = self.mid()
        if mid is None:
            return None
        return (self.ask - self.bid) / max(mid, 1e-12)


def _import_yfinance():
    try:
        import yfinance as yf
    except ImportError as e:
        raise ImportError(
            "yfinance is required to fetch market data. Install with: pip install yfinance"
        ) from e
    return yf


def _optional_float(row: Any, column: str) -> float | None:
    if column not in row:
        return None
    value = float(row[column])
    return None if math.isnan(value) else value


def _optional_int(row: Any, column: str) -> int | None:
    value = _optional_float(row, column)
    return None if value is None else int(value)


def _spot_from_ticker(stock: Any, ticker: str) -> float:
    try:
        info = stock.info
        spot = info.get("currentPrice") or info.get("regularMarketPrice")
        if spot is None:
            hist = stock.history(period="1d")
            if hist.empty:
                raise ValueError(f"Could not fetch spot price for ticker '{ticker}'")
            spot = float(hist["Close"].iloc[-1])
    except Exception as e:
        raise ValueError(f"Failed to fetch spot price for '{ticker}': {e}") from e
    return float(spot)


def fetch_spot(ticker: str) -> float:
    """Fetch the current spot price of ``ticker`` from Yahoo Finance.

    Raises
    ------
    ImportError
        If yfinance is not installed.
    ValueError
        If no price is available for the ticker.
    """
    yf = _import_yfinance()
    return _spot_from_ticker(yf.Ticker(ticker), ticker)


def quotes_from_frame(
    frame: Any,
    *,
    ticker: str,
    expiry: str,
    option_type: OptionType | str,
    spot: float,
    timestamp_utc: str,
) -> list[OptionQuote]:
    """Convert one side of a vendor option chain (a DataFrame) into quotes."""
    if frame is None or frame.empty:
        return []

    quotes: list[OptionQuote] = []
    for _, row in frame.iterrows():
        quotes.append(
            OptionQuote(
                ticker=ticker,
                expiry=expiry,
                option_type=option_type,
                strike=float(row.get("strike", math.nan)),
                bid=float(row.get("bid", 0.0)),
                ask=float(row.get("ask", 0.0)),
                last=_optional_float(row, "lastPrice"),
                iv_yahoo=_optional_float(row, "impliedVolatility"),
                open_interest=_optional_int(row, "openInterest"),
                volume=_optional_int(row, "volume"),
                underlying_spot=spot,
                timestamp_utc=timestamp_utc,
            )
        )
    return quotes


def fetch_options_chain(
    ticker: str,
    expiry: str,
) -> list[OptionQuote]:
    """Fetch options chain from Yahoo Finance for a given ticker and expiry.

    Parameters
    ----------
    ticker : str
        Ticker symbol (e.g., 'SPY', 'AAPL').
    expiry : str
        Expiration date in YYYY-MM-DD format. Must be a valid expiry
        available on Yahoo Finance for this ticker.

    Returns
    -------
    list[OptionQuote]
        List of option quotes (calls and puts combined).

    Raises
    ------
    ImportError
        If yfinance is not installed.
    ValueError
        If ticker is invalid or expiry is not available.

    Examples
    --------
    >>> quotes = fetch_options_chain('SPY', '2026-01-16')  # doctest: +SKIP
    >>> print(f"Fetched {len(quotes)} quotes")  # doctest: +SKIP
    """
    yf = _import_yfinance()

    stock = yf.Ticker(ticker)
    spot = _spot_from_ticker(stock, ticker)

    try:
        chain = stock.option_chain(expiry)
    except Exception as e:
        raise ValueError(
            f"Failed to fetch options chain for '{ticker}' expiry '{expiry}': {e}"
        ) from e

    timestamp = datetime.now(timezone.utc).isoformat()
    common = {"ticker": ticker, "expiry": expiry, "spot": spot, "timestamp_utc": timestamp}

    return quotes_from_frame(
        getattr(chain, "calls", None), option_type=OptionType.CALL, **common
    ) + quotes_from_frame(getattr(chain, "puts", None), option_type=OptionType.PUT, **common)


def filter_quotes(
    quotes: list[OptionQuote],
    *,
    min_bid: float = 0.01,
    max_rel_spread: float = 0.30,
    min_volume: int | None = None,
    min_oi: int | None = None,
) -> list[OptionQuote]:
    """Filter option quotes based on liquidity and quality criteria.

    Parameters
    ----------
    quotes : list[OptionQuote]
        List of option quotes to filter.
    min_bid : float, optional
        Minimum bid price (default: 0.01).
    max_rel_spread : float, optional
        Maximum relative bid-ask spread (default: 0.30 = 30%).
    min_volume : int | None, optional
        Minimum volume (if provided, filters out quotes below this).
    min_oi : int | None, optional
        Minimum open interest (if provided, filters out quotes below this).

    Returns
    -------
    list[OptionQuote]
        Filtered list of quotes.
    """
    filtered: list[OptionQuote] = []

    for quote in quotes:
        if quote.bid <= 0 or quote.ask <= 0 or quote.ask < quote.bid:
            continue
        if quote.bid < min_bid:
            continue

        rel_spread = quote.rel_spread()
        if rel_spread is None or rel_spread > max_rel_spread:
            continue

        if min_volume is not None and (quote.volume is None or quote.volume < min_volume):
            continue
        if min_oi is not None and (quote.open_interest is None or quote.open_interest < min_oi):
            continue

        filtered.append(quote)

    return filtered


def compute_mids(quotes: list[OptionQuote]) -> list[OptionQuote]:
    """Filter quotes to only those with valid mid prices."""
    return [q for q in quotes if q.mid() is not None]
