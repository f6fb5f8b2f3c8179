"""Tests for StrategyConfig validation and unit conversion."""

import pytest
from pydantic import ValidationError

from delta_arbitrage.config_schema import StrategyConfig


def test_defaults():
    config = StrategyConfig()
    assert config.diff_threshold_pct == 2.5
    assert config.min_gain == 1.0
    assert config.multi_hop_cost == 12.5
    assert config.single_hop_cost == 7.0
    assert config.top_up_subunits == 2000 * 10**9
    assert config.min_native_subunits == 100 * 10**9
    assert config.min_wrapped_subunits == 1500 * 10**9
    assert config.unwrap_subunits == 1500 * 10**9
    assert config.sell_slippage == 0.05


def test_hop_cost():
    config = StrategyConfig()
    assert config.hop_cost(True) == 12.5
    assert config.hop_cost(False) == 7.0


def test_from_dict_none_gives_defaults():
    assert StrategyConfig.from_dict(None) == StrategyConfig()


def test_from_dict_overrides():
    config = StrategyConfig.from_dict({"top_up_amount": 10, "unwrap_amount": 2.5})
    assert config.top_up_subunits == 10 * 10**9
    assert config.unwrap_subunits == 2_500_000_000


def test_decimals_is_not_configurable():
    with pytest.raises(ValidationError):
        StrategyConfig.from_dict({"decimals": 6})


def test_unknown_field_rejected():
    with pytest.raises(ValidationError):
        StrategyConfig.from_dict({"thresold": 3})


def test_multi_hop_cost_below_single_hop_rejected():
    with pytest.raises(ValidationError):
        StrategyConfig(multi_hop_cost=1.0, single_hop_cost=2.0)


def test_slippage_bounds():
    with pytest.raises(ValidationError):
        StrategyConfig(sell_slippage=1.0)
    with pytest.raises(ValidationError):
        StrategyConfig(sell_slippage=-0.1)


def test_config_is_frozen():
    config = StrategyConfig()
    with pytest.raises(ValidationError):
        config.min_gain = 5.0
