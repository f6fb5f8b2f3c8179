"""
Normalized view of one cycle's market and fair prices.
"""

from dataclasses import dataclass

from .constants import SUBUNITS_PER_UNIT, Asset
from .routes import Route


@dataclass(frozen=True)
class PriceSnapshot:
    """
    Market and fair prices of the long and short tokens, in native currency.

    Attributes:
        long_price: Long token price on the swap venue
        short_price: Short token price on the swap venue
        native_usd_price: USD price of one native unit
        long_fair_price: Model-implied long price from the market contract
        short_fair_price: Model-implied short price from the market contract
        long_diff: Market vs fair deviation of long, in percent
        short_diff: Market vs fair deviation of short, in percent
        longs_for_one_usd: Whole long tokens worth one USD at fair price
        shorts_for_one_usd: Whole short tokens worth one USD at fair price
        native_for_one_usd: Whole native units worth one USD
    """

    long_price: float
    short_price: float
    native_usd_price: float
    long_fair_price: float
    short_fair_price: float
    long_diff: float
    short_diff: float
    longs_for_one_usd: int
    shorts_for_one_usd: int
    native_for_one_usd: int

    @classmethod
    def create(
        cls,
        long_price: float,
        short_price: float,
        native_usd_price: float,
        long_fair_price: float,
        short_fair_price: float,
    ) -> "PriceSnapshot":
        """Build a snapshot from raw prices; fair and USD prices must be positive."""
        return cls(
            long_price=long_price,
            short_price=short_price,
            native_usd_price=native_usd_price,
            long_fair_price=long_fair_price,
            short_fair_price=short_fair_price,
            long_diff=(long_price / long_fair_price) * 100.0 - 100.0,
            short_diff=(short_price / short_fair_price) * 100.0 - 100.0,
            longs_for_one_usd=int(1.0 / native_usd_price / long_fair_price),
            shorts_for_one_usd=int(1.0 / native_usd_price / short_fair_price),
            native_for_one_usd=int(1.0 / native_usd_price),
        )

    def fair_price_of(self, asset: Asset) -> float:
        """Fair price in native units; native assets are worth 1."""
        if asset is Asset.LONG:
            return self.long_fair_price
        if asset is Asset.SHORT:
            return self.short_fair_price
        return 1.0

    def amount_per_one_usd(self, route: Route) -> int:
        """Subunits of the route's input asset worth one USD; 0 for EMPTY."""
        if route is Route.EMPTY:
            return 0
        asset = route.input_asset
        if asset is Asset.LONG:
            whole_units = self.longs_for_one_usd
        elif asset is Asset.SHORT:
            whole_units = self.shorts_for_one_usd
        else:
            whole_units = self.native_for_one_usd
        return whole_units * SUBUNITS_PER_UNIT

    def __str__(self) -> str:
        lines = [
            "======================",
            f"Long price: {self.long_price} native",
            f"Short price: {self.short_price} native",
            f"Native price: {self.native_usd_price} USD",
            f"Long fair price: {self.long_fair_price} native",
            f"Short fair price: {self.short_fair_price} native",
        ]
        for label, diff in (("Long", self.long_diff), ("Short", self.short_diff)):
            if diff > 0:
                lines.append(f"{label} diff overvalued by {diff:.2f}%")
            else:
                lines.append(f"{label} diff undervalued by {abs(diff):.2f}%")
        lines.append(f"Long/USD: {self.longs_for_one_usd}")
        lines.append(f"Short/USD: {self.shorts_for_one_usd}")
        lines.append("======================")
        return "\n".join(lines)
