"""
Configuration loading and validation for the delta arbitrage bot.
"""

import os
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from delta_arbitrage.config_schema import StrategyConfig
from delta_arbitrage.constants import DEFAULT_POLL_INTERVAL_SEC
from delta_arbitrage.exceptions import ConfigurationError

CONTRACT_KEYS = (
    "router",
    "market",
    "wrapped_native",
    "long_token",
    "short_token",
    "long_pair",
    "short_pair",
)


class ConfigError(ConfigurationError):
    """Raised when config is invalid or missing required fields."""

    pass


class DexConfig:
    """
    Parsed and validated configuration for the bot.

    Attributes:
        rpc_url: HTTP(S) RPC endpoint
        private_key_env: Name of the env var holding the signing key
        account_address: Account to watch when running without a key (dry run)
        poll_sec: Seconds between decision cycles
        once: If True, run a single cycle and exit
        request_timeout_sec: HTTP timeout for RPC calls
        receipt_timeout_sec: How long to wait for a transaction receipt
        contracts: Dict of {name -> address} for CONTRACT_KEYS
        gas_limit: Gas limit for approvals, wraps, unwraps and deposits
        single_hop_gas_limit: Gas limit for 2-leg swaps
        multi_hop_gas_limit: Gas limit for 3-leg swaps
        strategy: Strategy thresholds, costs and quanta
    """

    def __init__(self, config_dict: Dict[str, Any]):
        """
        Parse and validate config from dictionary.

        Args:
            config_dict: Loaded YAML config

        Raises:
            ConfigError: If required fields missing or invalid
        """
        self.rpc_url: str = self._get_required(config_dict, "rpc_url", str)
        self.private_key_env: str = config_dict.get(
            "private_key_env", "DELTA_PRIVATE_KEY"
        )
        self.account_address: Optional[str] = config_dict.get("account_address")
        self.poll_sec: int = int(config_dict.get("poll_sec", DEFAULT_POLL_INTERVAL_SEC))
        self.once: bool = bool(config_dict.get("once", False))
        self.request_timeout_sec: float = float(
            config_dict.get("request_timeout_sec", 20)
        )
        self.receipt_timeout_sec: float = float(
            config_dict.get("receipt_timeout_sec", 120)
        )

        if self.poll_sec <= 0:
            raise ConfigError(f"poll_sec must be positive, got {self.poll_sec}")

        self.contracts: Dict[str, str] = self._parse_contracts(
            self._get_required(config_dict, "contracts", dict)
        )

        gas = config_dict.get("gas", {}) or {}
        if not isinstance(gas, dict):
            raise ConfigError("gas config must be a dict")
        self.gas_limit: int = int(gas.get("default_limit", 200_000))
        self.single_hop_gas_limit: int = int(gas.get("single_hop_limit", 250_000))
        self.multi_hop_gas_limit: int = int(gas.get("multi_hop_limit", 400_000))

        self.strategy: StrategyConfig = self._parse_strategy(
            config_dict.get("strategy")
        )

    @staticmethod
    def _get_required(d: Dict, key: str, expected_type: type) -> Any:
        """Get required config field with type validation."""
        if key not in d:
            raise ConfigError(f"Missing required config field: {key}")
        val = d[key]
        if not isinstance(val, expected_type):
            raise ConfigError(
                f"Config field '{key}' must be {expected_type.__name__}, got {type(val).__name__}"
            )
        return val

    @staticmethod
    def _parse_contracts(contracts_raw: Dict[str, Any]) -> Dict[str, str]:
        """Parse and validate contract addresses."""
        contracts = {}
        for key in CONTRACT_KEYS:
            address = contracts_raw.get(key)
            if not address:
                raise ConfigError(f"contracts.{key} is required")
            if not isinstance(address, str) or not address.startswith("0x"):
                raise ConfigError(f"contracts.{key} must be a 0x-prefixed address")
            contracts[key] = address

        unknown = set(contracts_raw) - set(CONTRACT_KEYS)
        if unknown:
            raise ConfigError(f"Unknown contracts: {', '.join(sorted(unknown))}")
        return contracts

    @staticmethod
    def _parse_strategy(strategy_raw: Optional[Dict[str, Any]]) -> StrategyConfig:
        """Validate the strategy section through its schema."""
        if strategy_raw is not None and not isinstance(strategy_raw, dict):
            raise ConfigError("strategy config must be a dict")
        try:
            return StrategyConfig.from_dict(strategy_raw)
        except ValidationError as e:
            raise ConfigError(f"Invalid strategy config: {e}") from e

    def swap_gas_limit(self, multi_hop: bool) -> int:
        """Gas limit for a swap along a route with the given hop count."""
        return self.multi_hop_gas_limit if multi_hop else self.single_hop_gas_limit


def load_config(config_path: str) -> DexConfig:
    """
    Load and validate config from YAML file.

    Args:
        config_path: Path to config YAML file

    Returns:
        Validated DexConfig instance

    Raises:
        ConfigError: If config invalid or file not found
    """
    if not os.path.exists(config_path):
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML: {e}") from e

    if not isinstance(config_dict, dict):
        raise ConfigError("Config file must contain a YAML dictionary")

    return DexConfig(config_dict)
