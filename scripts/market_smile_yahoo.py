#!/usr/bin/env python3
"""Fetch and analyze implied volatility smile from Yahoo Finance.

This script demonstrates market data ingestion and IV computation using
the bs-pricer analytics library with real Yahoo Finance options chains.

Requires: pip install -e ".[marketdata]"

Example usage:
    python scripts/market_smile_yahoo.py --ticker SPY --expiry 2026-12-18 --option_type call
    python scripts/market_smile_yahoo.py --ticker AAPL --expiry 2027-01-15 --option_type put --q 0.005
"""

import argparse
import sys

import numpy as np

from bs_pricer.analytics.black_scholes import price_with_greeks
from bs_pricer.analytics.market_iv import expiry_to_years, quote_to_iv
from bs_pricer.data.yahoo_options import compute_mids, fetch_options_chain, filter_quotes


def print_table(quotes_with_iv: list[tuple], T: float, r: float, q: float, max_rows: int = 25) -> None:
    """Print formatted table of option quotes with implied volatilities and Greeks.

    Parameters
    ----------
    quotes_with_iv : list[tuple]
        List of (quote, iv) tuples sorted by strike.
    T : float
        Time to maturity in years.
    r : float
        Risk-free rate.
    q : float
        Dividend yield.
    max_rows : int
        Maximum number of rows to print.
    """
    print("\n" + "=" * 110)
    print("OPTION QUOTES WITH IMPLIED VOLATILITIES")
    print("=" * 110)
    print(
        f"{'Strike':>10} {'Bid':>9} {'Ask':>9} {'Mid':>9} "
        f"{'IV (Ours)':>10} {'IV (Yahoo)':>11} {'Delta':>8} {'Vega':>8} {'Volume':>8} {'OI':>8}"
    )
    print("-" * 110)

    for quote, iv in quotes_with_iv[:max_rows]:
        mid = quote.mid()
        iv_ours = f"{iv * 100:.2f}%" if iv is not None else "N/A"
        iv_yahoo = f"{quote.iv_yahoo * 100:.2f}%" if quote.iv_yahoo is not None else "N/A"
        volume = str(quote.volume) if quote.volume is not None else "N/A"
        oi = str(quote.open_interest) if quote.open_interest is not None else "N/A"

        if iv is not None:
            g = price_with_greeks(quote.underlying_spot, quote.strike, T, r, iv, quote.option_type, q)
            delta, vega = f"{g.delta:.3f}", f"{g.vega:.3f}"
        else:
            delta = vega = "N/A"

        print(
            f"{quote.strike:>10.2f} {quote.bid:>9.2f} {quote.ask:>9.2f} {mid:>9.2f} "
            f"{iv_ours:>10} {iv_yahoo:>11} {delta:>8} {vega:>8} {volume:>8} {oi:>8}"
        )

    if len(quotes_with_iv) > max_rows:
        print(f"... ({len(quotes_with_iv) - max_rows} more rows omitted)")

    print("=" * 110)


def print_diagnostics(
    quotes_raw: list,
    quotes_filtered: list,
    quotes_with_iv: list[tuple],
    spot: float,
) -> None:
    """Print summary diagnostics."""
    ivs = [iv for _, iv in quotes_with_iv if iv is not None]

    print("\n" + "=" * 110)
    print("DIAGNOSTICS")
    print("=" * 110)
    print(f"Underlying spot:      ${spot:.2f}")
    print(f"Quotes fetched:       {len(quotes_raw)}")
    print(f"Quotes after filter:  {len(quotes_filtered)}")
    print(f"Quotes with IV:       {len(ivs)}")

    if ivs:
        ivs_pct = [iv * 100 for iv in ivs]
        print(f"IV range:             {min(ivs_pct):.2f}% - {max(ivs_pct):.2f}%")
        print(f"IV mean:              {np.mean(ivs_pct):.2f}%")
        print(f"IV median:            {np.median(ivs_pct):.2f}%")

        strikes = [q.strike for q, iv in quotes_with_iv if iv is not None]
        atm_idx = np.argmin([abs(K - spot) for K in strikes])
        print(f"ATM IV (nearest):     {ivs[atm_idx] * 100:.2f}% at strike ${strikes[atm_idx]:.2f}")

        # OTM put IV - OTM call IV as a rough skew measure
        low_strikes = [K for K in strikes if K < spot * 0.95]
        high_strikes = [K for K in strikes if K > spot * 1.05]

        if low_strikes and high_strikes:
            low_idx = strikes.index(min(low_strikes, key=lambda k: abs(k - spot * 0.90)))
            high_idx = strikes.index(min(high_strikes, key=lambda k: abs(k - spot * 1.10)))
            skew = (ivs[low_idx] - ivs[high_idx]) * 100
            print(f"IV skew (10% OTM):    {skew:+.2f}% (low strike IV - high strike IV)")

    print("=" * 110)


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Fetch and analyze option smile from Yahoo Finance",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--ticker", type=str, default="SPY", help="Ticker symbol (default: SPY)")
    parser.add_argument(
        "--expiry",
        type=str,
        required=True,
        help="Expiry date in YYYY-MM-DD format (e.g., 2026-12-18)",
    )
    parser.add_argument(
        "--option_type",
        type=str,
        choices=["call", "put"],
        default="call",
        help="Option type (default: call)",
    )
    parser.add_argument("--r", type=float, default=0.05, help="Risk-free rate (default: 0.05)")
    parser.add_argument("--q", type=float, default=0.0, help="Dividend yield (default: 0.0)")
    parser.add_argument(
        "--max_rows", type=int, default=25, help="Max rows to display (default: 25)"
    )
    parser.add_argument(
        "--min_bid", type=float, default=0.05, help="Min bid price filter (default: 0.05)"
    )
    parser.add_argument(
        "--max_rel_spread",
        type=float,
        default=0.30,
        help="Max relative spread filter (default: 0.30)",
    )
    parser.add_argument("--min_volume", type=int, default=None, help="Min volume filter (optional)")
    parser.add_argument(
        "--min_oi", type=int, default=None, help="Min open interest filter (optional)"
    )

    args = parser.parse_args()

    print(f"Fetching options chain for {args.ticker} expiry {args.expiry}...")
    try:
        quotes_raw = fetch_options_chain(args.ticker, args.expiry)
        T = expiry_to_years(args.expiry)
    except (ImportError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not quotes_raw:
        print("No quotes found", file=sys.stderr)
        return 1

    spot = quotes_raw[0].underlying_spot
    print(f"Fetched {len(quotes_raw)} quotes (spot: ${spot:.2f})")

    quotes_type = [q for q in quotes_raw if q.option_type == args.option_type]
    print(f"Filtered to {len(quotes_type)} {args.option_type}s")

    quotes_filtered = filter_quotes(
        quotes_type,
        min_bid=args.min_bid,
        max_rel_spread=args.max_rel_spread,
        min_volume=args.min_volume,
        min_oi=args.min_oi,
    )
    print(f"After liquidity filters: {len(quotes_filtered)} quotes")

    quotes_filtered = compute_mids(quotes_filtered)

    if not quotes_filtered:
        print("No quotes remain after filtering", file=sys.stderr)
        return 1

    print(f"Time to maturity: {T:.4f} years")

    quotes_with_iv = [(quote, quote_to_iv(quote, r=args.r, T=T, q=args.q)) for quote in quotes_filtered]
    quotes_with_iv.sort(key=lambda x: x[0].strike)

    print_table(quotes_with_iv, T, args.r, args.q, max_rows=args.max_rows)
    print_diagnostics(quotes_raw, quotes_filtered, quotes_with_iv, spot)

    return 0


if __name__ == "__main__":
    sys.exit(main())
