"""
Keeps the wallet provisioned for swaps.

Two jobs:
- before a trade, make sure the route's input asset is held (one bounded
  top-up: native -> wrapped native -> position token);
- once per cycle, rebalance so native covers fees and wrapped native stays
  available for native-first routes.
"""

from typing import List, Optional

from .config_schema import StrategyConfig
from .constants import Asset
from .exceptions import InsufficientFundsError, PreconditionViolation
from .interfaces import Balances, TokenManager
from .price_data import PriceSnapshot
from .routes import Route
from .utils import get_logger, humanize_balance, log_humanized

logger = get_logger(__name__)


class DryRunTokenManager:
    """Token manager that performs no writes; swaps echo the requested amounts."""

    def approve_markets(self) -> None:
        pass

    def wrap_native(self) -> None:
        pass

    def unwrap_native(self, amount: int) -> None:
        pass

    def buy_longs(self) -> None:
        pass

    def buy_shorts(self) -> None:
        pass

    def swap(
        self, route: Route, amount_in_max: int, amount_out: int, recipient: str
    ) -> List[int]:
        logger.info("Dry run - swap skipped")
        return [amount_in_max, amount_out]


class AssetManager:
    """
    Provisions balances for routes and rebalances asset levels.

    Balances are re-read on every check; nothing is cached between calls.
    """

    def __init__(
        self,
        balances: Balances,
        token_manager: TokenManager,
        config: Optional[StrategyConfig] = None,
    ):
        self.balances = balances
        self.token_manager = token_manager
        self.config = config or StrategyConfig()

    def swap(
        self, route: Route, amount_in: int, amount_out: int, recipient: str
    ) -> List[int]:
        """Ensure funds for ``route`` and swap at most ``amount_in`` for ``amount_out``."""
        self.ensure_funds(route, amount_in)
        return self.token_manager.swap(route, amount_in, amount_out, recipient)

    def manage_asset_levels(self, snapshot: PriceSnapshot, recipient: str) -> None:
        """
        Rebalance once per cycle, independent of the selected route.

        A native shortage is handled first and ends the rebalance for this
        cycle; otherwise a wrapped native shortage is covered by selling
        whichever position is worth more at fair price.
        """
        config = self.config

        native_balance = self.balances.native_balance()
        if native_balance < config.min_native_subunits:
            logger.warning(
                f"Native balance low ({humanize_balance(native_balance):.2f}), "
                f"unwrapping {humanize_balance(config.unwrap_subunits):.2f} wrapped native"
            )
            self.token_manager.unwrap_native(config.unwrap_subunits)
            return

        wrapped_balance = self.balances.wrapped_balance()
        if wrapped_balance >= config.min_wrapped_subunits:
            return

        logger.warning(
            f"Wrapped native balance low ({humanize_balance(wrapped_balance):.2f}), "
            "selling positions for wrapped native"
        )
        long_value = self.balances.long_balance() * snapshot.long_fair_price
        short_value = self.balances.short_balance() * snapshot.short_fair_price

        if long_value >= short_value:
            logger.info("Selling longs for wrapped native")
            route, fair_price = Route.LONG_NATIVE, snapshot.long_fair_price
        else:
            logger.info("Selling shorts for wrapped native")
            route, fair_price = Route.SHORT_NATIVE, snapshot.short_fair_price

        amount_out = config.unwrap_subunits
        amount_in_max = round(amount_out / fair_price * (1.0 + config.sell_slippage))
        self.token_manager.swap(route, amount_in_max, amount_out, recipient)

    def ensure_funds(self, route: Route, amount_in: int) -> None:
        """
        Make one attempt to hold ``amount_in`` of the route's input asset.

        Raises:
            PreconditionViolation: For the empty route
            InsufficientFundsError: If native currency is needed and missing
        """
        if route is Route.EMPTY:
            raise PreconditionViolation(
                "Cannot provision funds for the empty route", route=route.name
            )

        asset = route.input_asset
        if asset is Asset.LONG:
            self._top_up_position_if_required(Asset.LONG, amount_in)
        elif asset is Asset.SHORT:
            self._top_up_position_if_required(Asset.SHORT, amount_in)
        else:
            self._top_up_wrapped_if_required(amount_in)
        logger.info("Funds for swap ready!")

    def print_balances(self) -> None:
        log_humanized(logger, "Native balance", self.balances.native_balance())
        log_humanized(logger, "Wrapped native balance", self.balances.wrapped_balance())
        log_humanized(logger, "Long balance", self.balances.long_balance())
        log_humanized(logger, "Short balance", self.balances.short_balance())

    def _top_up_position_if_required(self, asset: Asset, required_balance: int) -> None:
        if asset is Asset.LONG:
            label = "LONG"
            read_balance = self.balances.long_balance
            buy = self.token_manager.buy_longs
        else:
            label = "SHORT"
            read_balance = self.balances.short_balance
            buy = self.token_manager.buy_shorts

        balance = read_balance()
        log_humanized(logger, "Required balance", required_balance)
        log_humanized(logger, f"{label} balance", balance)
        if balance >= required_balance:
            return

        logger.warning(f"Not enough {label.lower()}s, topping up")
        if self.balances.wrapped_balance() < self.config.top_up_subunits:
            logger.warning(
                f"Not enough wrapped native to top up {label.lower()}s, wrapping native"
            )
            self._wrap_native()
        buy()
        log_humanized(logger, f"New {label} balance", read_balance())

    def _top_up_wrapped_if_required(self, required_balance: int) -> None:
        wrapped_balance = self.balances.wrapped_balance()
        log_humanized(logger, "Required wrapped native balance", required_balance)
        log_humanized(logger, "Current wrapped native balance", wrapped_balance)
        if wrapped_balance >= required_balance:
            return

        logger.warning("Not enough wrapped native, topping up")
        self._wrap_native()
        log_humanized(logger, "New wrapped native balance", self.balances.wrapped_balance())

    def _wrap_native(self) -> None:
        native_balance = self.balances.native_balance()
        required = self.config.top_up_subunits
        if native_balance < required:
            raise InsufficientFundsError(
                "Not enough native currency to wrap",
                required=required,
                available=native_balance,
            )
        self.token_manager.wrap_native()
