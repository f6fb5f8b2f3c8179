"""
Net gain estimate of a swap along a route, in whole native units.
"""

from typing import Optional

from .config_schema import StrategyConfig
from .constants import SUBUNITS_PER_UNIT
from .price_data import PriceSnapshot
from .routes import Route

_DEFAULT_CONFIG = StrategyConfig()


def estimate_gain(
    amount_in: int,
    amount_out: int,
    snapshot: PriceSnapshot,
    route: Route,
    config: Optional[StrategyConfig] = None,
) -> float:
    """
    Estimate the net profit of swapping ``amount_in`` for ``amount_out``.

    Both legs are valued at the fair price of the asset they represent
    (wrapped native passes through unchanged), and a flat transaction cost is
    subtracted: the multi-hop cost for 3-leg routes, the single-hop cost for
    2-leg routes.

    Args:
        amount_in: Input amount in subunits of the route's first asset
        amount_out: Output amount in subunits of the route's last asset
        snapshot: Prices of the current cycle
        route: Route the swap goes through
        config: Strategy parameters (cost constants); defaults if omitted

    Returns:
        Net gain in native units; 0.0 for the empty route
    """
    if route is Route.EMPTY:
        return 0.0
    config = config or _DEFAULT_CONFIG

    amount_in_native = amount_in * snapshot.fair_price_of(route.assets[0])
    amount_out_native = amount_out * snapshot.fair_price_of(route.assets[-1])
    transaction_cost = config.hop_cost(route.is_multi_hop)

    return (amount_out_native - amount_in_native) / float(
        SUBUNITS_PER_UNIT
    ) - transaction_cost
