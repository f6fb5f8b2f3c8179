"""
Bot engine: one price-check-and-trade cycle per event, plus the event loop.
"""

from typing import Optional, Tuple

from .asset_manager import AssetManager
from .config_schema import StrategyConfig
from .events import BotEvent, EventSource
from .exceptions import (
    DeltaArbitrageError,
    MalformedVenueResponseError,
    PreconditionViolation,
)
from .gains import estimate_gain
from .interfaces import PriceSource, TokenDirectory
from .price_data import PriceSnapshot
from .routes import Route, select_route
from .utils import get_logger

logger = get_logger(__name__)


class BotEngine:
    """
    The core bot logic, decoupled from the event loop.

    Cycles are strictly sequential; a swap finishes before the next event is
    read, so at most one swap is ever in flight.
    """

    def __init__(
        self,
        price_source: PriceSource,
        asset_manager: AssetManager,
        directory: TokenDirectory,
        caller: str,
        config: Optional[StrategyConfig] = None,
        dry_run: bool = False,
    ):
        """
        Args:
            price_source: Venue reads (pool reserves, market state, quotes)
            asset_manager: Provisioning and rebalancing of the wallet
            directory: Token addresses used to build swap legs
            caller: Bot account, recipient of swap outputs
            config: Strategy thresholds and costs
            dry_run: If True, stop every cycle before funds are provisioned
        """
        self.price_source = price_source
        self.asset_manager = asset_manager
        self.directory = directory
        self.caller = caller
        self.config = config or StrategyConfig()
        self.dry_run = dry_run

    def handle_event(self, event: BotEvent) -> bool:
        """Handle a single event. Returns True to continue, False to stop."""
        if event.triggers_cycle:
            self.check_and_trade()
            return True
        logger.info("Shutdown event received")
        return False

    def check_and_trade(self) -> Optional[float]:
        """
        Fetch prices, find an arbitrage route, execute the swap if profitable.

        Returns:
            Realized gain of the executed swap, or None if nothing was executed
        """
        snapshot = self.get_price_snapshot()
        logger.info(f"Prices:\n{snapshot}")

        self.asset_manager.manage_asset_levels(snapshot, self.caller)

        route = select_route(snapshot, self.config.diff_threshold_pct)
        logger.info(f"Swap route: {route.value}")
        if route is Route.EMPTY:
            logger.info("No arbitrage route found")
            return None

        amounts = self.get_swap_amounts(snapshot, route)
        if amounts is None:
            logger.info("No valid swap amounts found")
            return None
        amount_in, amount_out = amounts

        gain = estimate_gain(amount_in, amount_out, snapshot, route, self.config)
        logger.info(f"Gain: {gain:<10.4f} native")
        if gain < self.config.min_gain:
            logger.info("Gain below threshold, skipping")
            return None

        if self.dry_run:
            logger.info(
                f"[DRY RUN] Would swap {route.value}: in={amount_in} out={amount_out}"
            )
            return None

        actual_in, actual_out = self.swap(route, amount_in, amount_out)
        actual_gain = estimate_gain(actual_in, actual_out, snapshot, route, self.config)
        logger.info(f"Actual gain: {actual_gain:<10.4f} native")
        return actual_gain

    def get_price_snapshot(self) -> PriceSnapshot:
        long_price, short_price = self.price_source.market_prices()
        long_fair_price, short_fair_price, native_usd_price = (
            self.price_source.fair_prices()
        )
        return PriceSnapshot.create(
            long_price,
            short_price,
            native_usd_price,
            long_fair_price,
            short_fair_price,
        )

    def get_swap_amounts(
        self, snapshot: PriceSnapshot, route: Route
    ) -> Optional[Tuple[int, int]]:
        """Quote the route for one USD worth of input; None if the quote is malformed."""
        amount_in = snapshot.amount_per_one_usd(route)
        legs = route.to_swap_legs(self.directory)
        amounts = self.price_source.quote_amounts_out(amount_in, legs)
        if amounts is None or len(amounts) != route.leg_count:
            logger.warning(f"Malformed quote for {route.value}: {amounts!r}")
            return None
        return amounts[0], amounts[-1]

    def swap(self, route: Route, amount_in: int, amount_out: int) -> Tuple[int, int]:
        """
        Provision funds and execute; returns the executed (amount_in, amount_out).

        Raises:
            MalformedVenueResponseError: If the venue result has fewer than 2 amounts
        """
        logger.info("Preparing swap...")
        result = self.asset_manager.swap(route, amount_in, amount_out, self.caller)
        logger.info("Arbitrage swap completed")
        self.asset_manager.print_balances()

        if result is None or len(result) < 2:
            raise MalformedVenueResponseError(
                "Invalid swap result", operation="swap", response=result
            )
        return result[0], result[-1]


def run_event_loop(engine: BotEngine, event_source: EventSource) -> None:
    """
    Feed events to the engine until SHUTDOWN or the source runs dry.

    Errors from a cycle are logged and the loop waits for the next event;
    PreconditionViolation is a programming error and propagates.
    """
    while True:
        event = event_source.next_event()
        if event is None:
            break
        logger.info(f"Event: {event.kind.value}")
        try:
            if not engine.handle_event(event):
                break
        except PreconditionViolation:
            raise
        except DeltaArbitrageError as e:
            logger.error(f"Error handling event: {type(e).__name__}: {e}")
