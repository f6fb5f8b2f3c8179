"""
Swap routes and the decision table that picks one from a price snapshot.
"""

from enum import Enum
from typing import TYPE_CHECKING, List, Tuple

from .constants import DEFAULT_DIFF_THRESHOLD_PCT, Asset
from .exceptions import PreconditionViolation

if TYPE_CHECKING:
    from .interfaces import TokenDirectory
    from .price_data import PriceSnapshot


class Route(Enum):
    """
    Ordered sequence of assets a swap goes through.

    Multi-hop routes pass through wrapped native (3 legs); single-hop routes
    trade directly against it (2 legs). EMPTY means no opportunity.
    """

    LONG_NATIVE_SHORT = "long->native->short"
    SHORT_NATIVE_LONG = "short->native->long"
    LONG_NATIVE = "long->native"
    SHORT_NATIVE = "short->native"
    NATIVE_LONG = "native->long"
    NATIVE_SHORT = "native->short"
    EMPTY = "empty"

    @property
    def assets(self) -> Tuple[Asset, ...]:
        return _ROUTE_ASSETS[self]

    @property
    def is_multi_hop(self) -> bool:
        return len(self.assets) == 3

    @property
    def leg_count(self) -> int:
        return len(self.assets)

    @property
    def input_asset(self) -> Asset:
        """Asset the wallet spends on this route."""
        if self is Route.EMPTY:
            raise PreconditionViolation("Empty route has no input asset", route=self.name)
        return self.assets[0]

    def to_swap_legs(self, directory: "TokenDirectory") -> List[str]:
        """
        Resolve the route to token addresses for a router call.

        Raises:
            PreconditionViolation: For the empty route
        """
        if self is Route.EMPTY:
            raise PreconditionViolation("Empty route cannot be built", route=self.name)
        return [directory.address_of(asset) for asset in self.assets]


_ROUTE_ASSETS = {
    Route.LONG_NATIVE_SHORT: (Asset.LONG, Asset.WRAPPED_NATIVE, Asset.SHORT),
    Route.SHORT_NATIVE_LONG: (Asset.SHORT, Asset.WRAPPED_NATIVE, Asset.LONG),
    Route.LONG_NATIVE: (Asset.LONG, Asset.WRAPPED_NATIVE),
    Route.SHORT_NATIVE: (Asset.SHORT, Asset.WRAPPED_NATIVE),
    Route.NATIVE_LONG: (Asset.WRAPPED_NATIVE, Asset.LONG),
    Route.NATIVE_SHORT: (Asset.WRAPPED_NATIVE, Asset.SHORT),
    Route.EMPTY: (),
}


def select_route(
    snapshot: "PriceSnapshot", threshold_pct: float = DEFAULT_DIFF_THRESHOLD_PCT
) -> Route:
    """
    Map a price snapshot to the route that sells the overvalued token and/or
    buys the undervalued one.

    Rules are checked in order and the first match wins. When both tokens
    deviate in the same direction the paired rules do not fire and the long
    single-hop rule is reached before the short one.
    """
    long_diff = abs(snapshot.long_diff)
    short_diff = abs(snapshot.short_diff)
    long_delta = snapshot.long_price - snapshot.long_fair_price
    short_delta = snapshot.short_price - snapshot.short_fair_price

    if (
        long_delta > 0
        and short_delta < 0
        and long_diff > threshold_pct
        and short_diff > threshold_pct
    ):
        return Route.LONG_NATIVE_SHORT
    if (
        short_delta > 0
        and long_delta < 0
        and long_diff > threshold_pct
        and short_diff > threshold_pct
    ):
        return Route.SHORT_NATIVE_LONG
    if long_delta > 0 and long_diff > threshold_pct:
        return Route.LONG_NATIVE
    if short_delta > 0 and short_diff > threshold_pct:
        return Route.SHORT_NATIVE
    if long_delta < 0 and long_diff > threshold_pct:
        return Route.NATIVE_LONG
    if short_delta < 0 and short_diff > threshold_pct:
        return Route.NATIVE_SHORT
    return Route.EMPTY
