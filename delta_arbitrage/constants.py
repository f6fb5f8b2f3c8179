"""
Constants for the delta arbitrage bot.

Centralizes unit scales, contract-level limits and the default strategy
parameters. The defaults are only used to seed ``StrategyConfig``; the
decision code receives them through that object.
"""

from enum import Enum

# Units
DECIMAL_PLACES = 9
SUBUNITS_PER_UNIT = 10**DECIMAL_PLACES
PRICE_PRECISION = 1_000_000
MARKET_PRICE_SCALE = 100_000.0

# uint256 ceiling, used for unlimited approvals and the swap deadline
MAX_UINT256 = 2**256 - 1

# Event loop
DEFAULT_POLL_INTERVAL_SEC = 180

# Strategy defaults, whole native-currency units unless noted
DEFAULT_DIFF_THRESHOLD_PCT = 2.5
DEFAULT_MIN_GAIN = 1.0
DEFAULT_MULTI_HOP_COST = 12.5
DEFAULT_SINGLE_HOP_COST = 7.0
DEFAULT_TOP_UP_AMOUNT = 2_000.0
DEFAULT_MIN_NATIVE_BALANCE = 100.0
DEFAULT_MIN_WRAPPED_BALANCE = 1_500.0
DEFAULT_UNWRAP_AMOUNT = 1_500.0
DEFAULT_SELL_SLIPPAGE = 0.05


class Asset(Enum):
    """The four assets the bot holds."""

    NATIVE = "native"
    WRAPPED_NATIVE = "wrapped_native"
    LONG = "long"
    SHORT = "short"
