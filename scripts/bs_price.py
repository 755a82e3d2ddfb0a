#!/usr/bin/env python
"""
Command-line interface for Black-Scholes option pricing.

This is a thin wrapper around bs_pricer.cli for running from a checkout.
Prefer using the installed 'bs-price' command or 'python -m bs_pricer.cli'.

Example usage:
    bs-price --S0 100 --K 100 --T 1.0 --r 0.05 --sigma 0.2
    python scripts/bs_price.py --S0 100 --K 100 --T 1.0 --r 0.05 --sigma 0.2 \
        --option_type put --market_price 5.6 --fd_check
"""

import sys
from pathlib import Path

# Add parent directory to path to allow running without installation
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bs_pricer.cli import main

if __name__ == "__main__":
    sys.exit(main())
