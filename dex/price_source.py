"""
Web3-backed price source: pool reserves, market fair-value state, router quotes.
"""

from typing import List, Tuple

from delta_arbitrage.constants import MARKET_PRICE_SCALE, Asset
from delta_arbitrage.exceptions import CapabilityError, MalformedVenueResponseError
from delta_arbitrage.utils import calculate_price, get_logger

from .adapters.v2 import get_amounts_out, reserves_for
from .contracts import ContractRefs

logger = get_logger(__name__)


class Web3PriceSource:
    """Reads everything a PriceSnapshot is built from."""

    def __init__(self, contracts: ContractRefs):
        self.contracts = contracts
        self.web3 = contracts.web3

    def market_prices(self) -> Tuple[float, float]:
        """Pool prices of one long and one short token, in wrapped native."""
        wrapped = self.contracts.address_of(Asset.WRAPPED_NATIVE)
        addresses = self.contracts.addresses

        wrapped_l, long_reserve = reserves_for(
            self.web3, addresses["long_pair"], wrapped
        )
        wrapped_s, short_reserve = reserves_for(
            self.web3, addresses["short_pair"], wrapped
        )
        if long_reserve == 0 or short_reserve == 0:
            raise MalformedVenueResponseError(
                "Pool has zero token reserve",
                operation="get_reserves",
                response=(long_reserve, short_reserve),
            )

        long_price = calculate_price(wrapped_l, long_reserve)
        short_price = calculate_price(wrapped_s, short_reserve)
        logger.debug(f"Pool prices: long={long_price} short={short_price}")
        return long_price, short_price

    def fair_prices(self) -> Tuple[float, float, float]:
        """Fair prices implied by the market state, plus the native/USD price."""
        try:
            state = self.contracts.market().functions.getMarketState().call()
        except Exception as e:
            raise CapabilityError(
                f"Failed to read market state: {e}", operation="get_market_state"
            ) from e

        if len(state) != 5:
            raise MalformedVenueResponseError(
                "Unexpected market state shape",
                operation="get_market_state",
                response=state,
            )
        long_liquidity, long_supply, short_liquidity, short_supply, price = state
        if long_supply == 0 or short_supply == 0 or price == 0:
            raise MalformedVenueResponseError(
                "Market state has zero supply or price",
                operation="get_market_state",
                response=state,
            )

        long_fair_price = calculate_price(long_liquidity, long_supply)
        short_fair_price = calculate_price(short_liquidity, short_supply)
        if long_fair_price <= 0 or short_fair_price <= 0:
            raise MalformedVenueResponseError(
                "Market state implies a zero fair price",
                operation="get_market_state",
                response=state,
            )
        native_usd_price = price / MARKET_PRICE_SCALE
        return long_fair_price, short_fair_price, native_usd_price

    def quote_amounts_out(self, amount_in: int, legs: List[str]) -> List[int]:
        return get_amounts_out(
            self.web3, self.contracts.addresses["router"], amount_in, legs
        )
