"""
Tests for the bs-price command-line interface.
"""

import json

import pytest

from bs_pricer.cli import main, parse_args

BASE_ARGS = ["--S0", "100", "--K", "100", "--T", "1.0", "--r", "0.05", "--sigma", "0.2"]


class TestParseArgs:
    """Test argument parsing."""

    def test_defaults(self):
        args = parse_args(BASE_ARGS)
        assert args.S0 == 100.0
        assert args.q == 0.0
        assert args.option_type == "call"
        assert args.market_price is None
        assert args.initial_guess == 0.30
        assert args.fd_check is False
        assert args.strategy is None
        assert args.config is None

    def test_invalid_option_type_exits(self):
        with pytest.raises(SystemExit):
            parse_args([*BASE_ARGS, "--option_type", "straddle"])

    def test_unknown_strategy_exits(self):
        with pytest.raises(SystemExit):
            parse_args([*BASE_ARGS, "--strategy", "butterfly_effect"])


class TestMain:
    """Test CLI runs end to end."""

    def test_price_call(self, capsys):
        assert main(BASE_ARGS) == 0

        out = capsys.readouterr().out
        assert "Black-Scholes Option Pricing Engine" in out
        assert "Price:" in out
        assert "10.45" in out

    def test_implied_vol(self, capsys):
        assert main([*BASE_ARGS, "--option_type", "put", "--market_price", "9.3"]) == 0
        assert "Implied Volatility:" in capsys.readouterr().out

    def test_fd_check(self, capsys):
        assert main([*BASE_ARGS, "--q", "0.02", "--fd_check"]) == 0
        out = capsys.readouterr().out
        assert "Analytic vs Finite Difference" in out
        assert "gamma" in out

    def test_strategy(self, capsys):
        assert main([*BASE_ARGS, "--strategy", "iron_condor"]) == 0
        out = capsys.readouterr().out
        assert "Strategy: Iron Condor" in out
        assert "Breakevens:" in out
        assert "Position Greeks" in out

    def test_strategy_with_negative_spot(self, capsys):
        args = ["--S0", "-5", "--K", "100", "--T", "1.0", "--r", "0.05", "--sigma", "0.2"]
        assert main([*args, "--strategy", "long_straddle"]) == 1
        assert "Error: spot must be positive" in capsys.readouterr().out

    def test_strategy_with_negative_strike(self, capsys):
        args = ["--S0", "100", "--K", "-5", "--T", "1.0", "--r", "0.05", "--sigma", "0.2"]
        assert main([*args, "--strategy", "bull_call_spread"]) == 1
        assert "Error: strike must be positive" in capsys.readouterr().out

    def test_missing_inputs(self, capsys):
        assert main(["--S0", "100"]) == 1
        assert "--K" in capsys.readouterr().out

    def test_batch(self, tmp_path, capsys):
        config_path = tmp_path / "runs.json"
        config_path.write_text(json.dumps([
            {"name": "atm", "option_type": "call", "S0": 100, "K": 100, "T": 1, "r": 0.05,
             "sigma": 0.2, "compute_fd_greeks": True},
        ]))
        out_dir = tmp_path / "out"

        assert main(["--config", str(config_path), "--out", str(out_dir)]) == 0
        assert (out_dir / "results.json").exists()
        assert (out_dir / "summary.txt").exists()

    def test_batch_with_invalid_run(self, tmp_path):
        config_path = tmp_path / "runs.json"
        config_path.write_text(json.dumps([
            {"name": "ok", "option_type": "call", "S0": 100, "K": 100, "T": 1, "r": 0.05,
             "sigma": 0.2},
            {"name": "bad", "option_type": "swap", "S0": 100, "K": 100, "T": 1, "r": 0.05,
             "sigma": 0.2},
        ]))

        assert main(["--config", str(config_path), "--out", str(tmp_path / "out")]) == 1

    def test_batch_unreadable_config(self, tmp_path, capsys):
        assert main(["--config", str(tmp_path / "missing.json")]) == 1
        assert "could not load" in capsys.readouterr().out
