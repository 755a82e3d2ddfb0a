"""
Tests for batch pricing infrastructure.
"""

import json

import pytest

from bs_pricer.experiments import (
    PricingConfig,
    format_summary_table,
    load_configs,
    load_results,
    run_config,
    run_configs,
    save_artifact,
    save_results,
)
from bs_pricer.experiments.artifacts import collect_metadata


def make_config(**overrides) -> PricingConfig:
    params = {
        "name": "atm_call",
        "option_type": "call",
        "S0": 100.0,
        "K": 100.0,
        "T": 1.0,
        "r": 0.05,
        "sigma": 0.2,
    }
    params.update(overrides)
    return PricingConfig(**params)


class TestPricingConfig:
    """Test configuration defaults and loading."""

    def test_defaults(self):
        config = make_config()
        assert config.q == 0.0
        assert config.market_price is None
        assert config.initial_guess == 0.30
        assert config.compute_fd_greeks is False
        assert config.vol_shifts == []

    def test_load_list(self, tmp_path):
        path = tmp_path / "configs.json"
        path.write_text(json.dumps([
            {"name": "a", "option_type": "call", "S0": 100, "K": 100, "T": 1, "r": 0.05,
             "sigma": 0.2},
            {"name": "b", "option_type": "put", "S0": 100, "K": 90, "T": 0.5, "r": 0.05,
             "sigma": 0.3, "q": 0.01, "vol_shifts": [-0.05, 0.05]},
        ]))

        configs = load_configs(path)

        assert [c.name for c in configs] == ["a", "b"]
        assert configs[1].q == 0.01
        assert configs[1].vol_shifts == [-0.05, 0.05]

    def test_load_wrapped(self, tmp_path):
        path = tmp_path / "configs.json"
        path.write_text(json.dumps({"configs": [
            {"name": "a", "option_type": "call", "S0": 100, "K": 100, "T": 1, "r": 0.05,
             "sigma": 0.2},
        ]}))
        assert len(load_configs(path)) == 1

    def test_unknown_keys_rejected(self, tmp_path):
        path = tmp_path / "configs.json"
        path.write_text(json.dumps([
            {"name": "a", "option_type": "call", "S0": 100, "K": 100, "T": 1, "r": 0.05,
             "sigma": 0.2, "n_paths": 1000},
        ]))
        with pytest.raises(ValueError, match="Unknown config keys: n_paths"):
            load_configs(path)

    def test_missing_keys_rejected(self, tmp_path):
        path = tmp_path / "configs.json"
        path.write_text(json.dumps([{"name": "a", "option_type": "call"}]))
        with pytest.raises(ValueError, match="Invalid pricing config"):
            load_configs(path)

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "configs.json"
        path.write_text(json.dumps({"name": "a"}))
        with pytest.raises(ValueError, match="expected a list"):
            load_configs(path)


class TestRunConfig:
    """Test single-run execution."""

    def test_price_only(self):
        result = run_config(make_config())

        assert result.config_name == "atm_call"
        assert result.greeks.price == pytest.approx(10.4506, abs=0.05)
        assert result.implied_vol is None
        assert result.fd_greeks is None
        assert result.notes == "BS"
        assert result.runtime_seconds >= 0

    def test_full_run(self):
        config = make_config(
            market_price=14.23,
            compute_fd_greeks=True,
            vol_shifts=[-0.05, 0.0, 0.05],
        )
        result = run_config(config)

        assert result.implied_vol == pytest.approx(0.30, abs=1e-2)
        assert result.fd_greeks is not None
        assert result.max_fd_deviation < 1e-2
        assert list(result.vol_ladder) == [-0.05, 0.0, 0.05]
        assert result.vol_ladder[0.0] == pytest.approx(result.greeks.price)
        assert result.vol_ladder[-0.05] < result.vol_ladder[0.05]
        assert result.notes == "BS+IV+FD+ladder"

    def test_degenerate_inputs_price_at_intrinsic(self):
        result = run_config(make_config(K=90.0, T=0.0))
        assert result.greeks.price == pytest.approx(10.0)
        assert result.greeks.delta == 0.0

    def test_invalid_option_type(self):
        with pytest.raises(ValueError, match="option_type"):
            run_config(make_config(option_type="digital"))

    def test_non_numeric_field(self):
        with pytest.raises(ValueError, match="sigma must be a number"):
            run_config(make_config(sigma="high"))

    def test_fd_on_degenerate_input(self):
        with pytest.raises(ValueError, match="Finite-difference"):
            run_config(make_config(T=0.0, compute_fd_greeks=True))

    def test_batch_skips_invalid(self, capsys):
        configs = [make_config(), make_config(name="bad", option_type="swap")]
        results = run_configs(configs)

        assert len(results) == 1
        assert "Error in run bad" in capsys.readouterr().out

    def test_malformed_entry_loads_and_fails_at_run(self, tmp_path, capsys):
        path = tmp_path / "configs.json"
        path.write_text(json.dumps([
            {"name": "good", "option_type": "call", "S0": 100, "K": 100, "T": 1, "r": 0.05,
             "sigma": 0.2},
            {"name": "bad", "option_type": "swap", "S0": 100, "K": 100, "T": 1, "r": 0.05,
             "sigma": "high"},
        ]))

        configs = load_configs(path)
        assert [c.name for c in configs] == ["good", "bad"]

        results = run_configs(configs)
        assert [r.config_name for r in results] == ["good"]
        assert "Error in run bad" in capsys.readouterr().out


class TestArtifacts:
    """Test result persistence."""

    def test_save_and_load_results(self, tmp_path):
        results = run_configs([make_config(), make_config(name="put", option_type="put")])
        save_results(results, tmp_path, "smoke")

        assert (tmp_path / "summary.txt").exists()
        summary = (tmp_path / "summary.txt").read_text()
        assert "Run: smoke" in summary
        assert "atm_call" in summary

        data = load_results(tmp_path)
        assert data["run_name"] == "smoke"
        assert data["n_results"] == 2
        assert data["results"][1]["option_type"] == "put"
        assert set(data["results"][0]["greeks"]) == {
            "price", "delta", "gamma", "theta", "vega", "rho"
        }

    def test_metadata(self):
        meta = collect_metadata()
        assert meta.timestamp
        assert meta.python_version
        assert meta.numpy_version
        assert isinstance(meta.git_dirty, bool)

    def test_save_artifact(self, tmp_path):
        path = tmp_path / "nested" / "artifact.json"
        save_artifact({"price": 10.45}, path)

        artifact = json.loads(path.read_text())
        assert artifact["data"] == {"price": 10.45}
        assert "python_version" in artifact["metadata"]

    def test_save_artifact_without_metadata(self, tmp_path):
        path = tmp_path / "artifact.json"
        save_artifact({"price": 10.45}, path, include_metadata=False)
        assert "metadata" not in json.loads(path.read_text())

    def test_format_summary_table(self):
        table = format_summary_table(["K", "Price"], [[100, 10.45]], title="Prices")
        assert "### Prices" in table
        assert "| K | Price |" in table
        assert "| 100 | 10.45 |" in table
