"""
Delta Arbitrage Bot.

Watches the long and short position tokens of a delta-neutral market, compares
their swap-venue prices with the fair prices implied by the market contract,
and swaps through wrapped native currency when the spread pays for the
transaction cost.
"""

PROJECT_NAME = "Delta-Arbitrage-Bot"

from delta_arbitrage.version import __version__  # noqa: E402

VERSION = __version__

from delta_arbitrage.asset_manager import AssetManager, DryRunTokenManager  # noqa: E402
from delta_arbitrage.config_schema import StrategyConfig  # noqa: E402
from delta_arbitrage.engine import BotEngine, run_event_loop  # noqa: E402
from delta_arbitrage.events import BotEvent, EventKind, TimerEventSource  # noqa: E402
from delta_arbitrage.gains import estimate_gain  # noqa: E402
from delta_arbitrage.price_data import PriceSnapshot  # noqa: E402
from delta_arbitrage.routes import Route, select_route  # noqa: E402

__all__ = [
    "PROJECT_NAME",
    "VERSION",
    "AssetManager",
    "DryRunTokenManager",
    "StrategyConfig",
    "BotEngine",
    "run_event_loop",
    "BotEvent",
    "EventKind",
    "TimerEventSource",
    "estimate_gain",
    "PriceSnapshot",
    "Route",
    "select_route",
]
