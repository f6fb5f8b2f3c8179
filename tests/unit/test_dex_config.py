"""
Unit tests for dex/config.py

Verifies that configuration loading, contract parsing and strategy parsing
work correctly.
"""

import copy
import unittest
from pathlib import Path

import pytest

from dex.config import CONTRACT_KEYS, ConfigError, DexConfig, load_config

EXAMPLE_CONFIG = Path(__file__).resolve().parents[2] / "configs" / "delta_bot.example.yaml"

BASE_CONFIG = {
    "rpc_url": "http://localhost:8545",
    "contracts": {
        key: "0x" + str(i + 1).rjust(40, "0") for i, key in enumerate(CONTRACT_KEYS)
    },
}


def make_config_dict(**overrides):
    config_dict = copy.deepcopy(BASE_CONFIG)
    config_dict.update(overrides)
    return config_dict


class TestDexConfig(unittest.TestCase):
    def test_defaults(self):
        config = DexConfig(make_config_dict())

        self.assertEqual(config.poll_sec, 180)
        self.assertFalse(config.once)
        self.assertEqual(config.private_key_env, "DELTA_PRIVATE_KEY")
        self.assertIsNone(config.account_address)
        self.assertEqual(config.strategy.top_up_subunits, 2000 * 10**9)

    def test_gas_limits_by_hop_count(self):
        config = DexConfig(
            make_config_dict(
                gas={"default_limit": 1, "single_hop_limit": 2, "multi_hop_limit": 3}
            )
        )
        self.assertEqual(config.gas_limit, 1)
        self.assertEqual(config.swap_gas_limit(False), 2)
        self.assertEqual(config.swap_gas_limit(True), 3)

    def test_strategy_section(self):
        config = DexConfig(
            make_config_dict(strategy={"diff_threshold_pct": 4.0, "min_gain": 2.0})
        )
        self.assertEqual(config.strategy.diff_threshold_pct, 4.0)
        self.assertEqual(config.strategy.min_gain, 2.0)

    def test_invalid_strategy_raises_config_error(self):
        with self.assertRaises(ConfigError):
            DexConfig(make_config_dict(strategy={"top_up_amount": -1}))

    def test_missing_rpc_url(self):
        config_dict = make_config_dict()
        del config_dict["rpc_url"]
        with self.assertRaises(ConfigError):
            DexConfig(config_dict)

    def test_missing_contract(self):
        config_dict = make_config_dict()
        del config_dict["contracts"]["market"]
        with self.assertRaisesRegex(ConfigError, "contracts.market"):
            DexConfig(config_dict)

    def test_unknown_contract(self):
        config_dict = make_config_dict()
        config_dict["contracts"]["oracle"] = "0x" + "9" * 40
        with self.assertRaisesRegex(ConfigError, "oracle"):
            DexConfig(config_dict)

    def test_bad_address(self):
        config_dict = make_config_dict()
        config_dict["contracts"]["router"] = "router.eth"
        with self.assertRaises(ConfigError):
            DexConfig(config_dict)

    def test_non_positive_poll_sec(self):
        with self.assertRaises(ConfigError):
            DexConfig(make_config_dict(poll_sec=0))


def test_load_config_from_yaml(tmp_path):
    contracts = "\n".join(
        f"  {key}: \"{addr}\"" for key, addr in BASE_CONFIG["contracts"].items()
    )
    path = tmp_path / "bot.yaml"
    path.write_text(
        "rpc_url: http://localhost:8545\n"
        "poll_sec: 60\n"
        "once: true\n"
        f"contracts:\n{contracts}\n"
        "strategy:\n"
        "  single_hop_cost: 3.0\n"
    )

    config = load_config(str(path))

    assert config.poll_sec == 60
    assert config.once is True
    assert config.strategy.single_hop_cost == 3.0
    assert config.contracts["router"] == BASE_CONFIG["contracts"]["router"]


def test_load_config_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "missing.yaml"))


def test_load_config_not_a_mapping(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_load_config_invalid_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("rpc_url: [unclosed\n")
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_example_config_loads():
    config = load_config(str(EXAMPLE_CONFIG))
    assert config.poll_sec == 180
    assert config.strategy.multi_hop_cost == 12.5
