"""
Contract handles for the configured addresses.
"""

from typing import Dict

from web3 import Web3

from delta_arbitrage.constants import Asset
from delta_arbitrage.exceptions import CapabilityError
from delta_arbitrage.utils import get_logger

from .abi import ERC20_ABI, MARKET_ABI, PAIR_ABI, ROUTER_ABI, WRAPPED_NATIVE_ABI
from .config import ConfigError, DexConfig

logger = get_logger(__name__)

_ASSET_KEYS = {
    Asset.WRAPPED_NATIVE: "wrapped_native",
    Asset.LONG: "long_token",
    Asset.SHORT: "short_token",
}


class ContractRefs:
    """
    Checksummed addresses and web3 contract objects for the bot's venue.

    Also serves as the token directory used to turn routes into swap legs.
    """

    def __init__(self, web3: Web3, config: DexConfig):
        self.web3 = web3
        self.addresses: Dict[str, str] = {}
        for name, addr in config.contracts.items():
            try:
                self.addresses[name] = Web3.to_checksum_address(addr)
            except ValueError as e:
                raise ConfigError(f"Invalid address for contracts.{name}: {addr}") from e

    def address_of(self, asset: Asset) -> str:
        """Token address for ``asset``. Native currency has no token; it trades as wrapped."""
        if asset is Asset.NATIVE:
            asset = Asset.WRAPPED_NATIVE
        return self.addresses[_ASSET_KEYS[asset]]

    def _contract(self, name: str, abi: list):
        return self.web3.eth.contract(address=self.addresses[name], abi=abi)

    def router(self):
        return self._contract("router", ROUTER_ABI)

    def market(self):
        return self._contract("market", MARKET_ABI)

    def wrapped_native(self):
        return self._contract("wrapped_native", WRAPPED_NATIVE_ABI)

    def long_token(self):
        return self._contract("long_token", ERC20_ABI)

    def short_token(self):
        return self._contract("short_token", ERC20_ABI)

    def long_pair(self):
        return self._contract("long_pair", PAIR_ABI)

    def short_pair(self):
        return self._contract("short_pair", PAIR_ABI)


def connect(config: DexConfig) -> Web3:
    """
    Connect to the configured RPC endpoint and check that it answers.

    Raises:
        ConfigError: If the RPC URL is not an HTTP(S) URL
        CapabilityError: If the endpoint cannot be queried
    """
    rpc_url = config.rpc_url
    if not rpc_url.startswith(("http://", "https://")):
        raise ConfigError(f"Invalid RPC URL format: {rpc_url}")

    logger.info(f"Connecting to RPC: {rpc_url}")
    web3 = Web3(
        Web3.HTTPProvider(
            rpc_url, request_kwargs={"timeout": config.request_timeout_sec}
        )
    )
    try:
        chain_id = web3.eth.chain_id
        block = web3.eth.block_number
    except Exception as e:
        raise CapabilityError(
            f"Failed to connect to {rpc_url}: {e}", operation="connect"
        ) from e

    logger.info(f"Connected to chain {chain_id} (block #{block:,})")
    return web3
