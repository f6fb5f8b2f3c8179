"""
Dependency injection interfaces for the venue capabilities and the clock.

The core only talks to these protocols. ``dex`` provides the web3-backed
implementations, ``asset_manager`` the dry-run token manager, and tests use
plain mocks.
"""

import time
from typing import TYPE_CHECKING, List, Protocol, Tuple, runtime_checkable

from .constants import Asset

if TYPE_CHECKING:
    from .routes import Route


@runtime_checkable
class TokenDirectory(Protocol):
    """Resolves assets to on-chain token addresses."""

    def address_of(self, asset: Asset) -> str:
        """Address of the token contract for ``asset``."""
        ...


@runtime_checkable
class Balances(Protocol):
    """Balances of the bot's own account, in subunits. Every call is a fresh read."""

    def native_balance(self) -> int:
        ...

    def wrapped_balance(self) -> int:
        ...

    def long_balance(self) -> int:
        ...

    def short_balance(self) -> int:
        ...


@runtime_checkable
class TokenManager(Protocol):
    """Write side of the venue: approvals, wrapping, position buys and swaps."""

    def approve_markets(self) -> None:
        """Let the router and the market spend the bot's tokens."""
        ...

    def wrap_native(self) -> None:
        """Wrap one top-up quantum of native currency."""
        ...

    def unwrap_native(self, amount: int) -> None:
        """Unwrap ``amount`` subunits of wrapped native."""
        ...

    def buy_longs(self) -> None:
        """Spend one top-up quantum of wrapped native on long tokens."""
        ...

    def buy_shorts(self) -> None:
        """Spend one top-up quantum of wrapped native on short tokens."""
        ...

    def swap(
        self, route: "Route", amount_in_max: int, amount_out: int, recipient: str
    ) -> List[int]:
        """Swap at most ``amount_in_max`` for exactly ``amount_out``; returns leg amounts."""
        ...


@runtime_checkable
class PriceSource(Protocol):
    """Read side of the venue used to build a price snapshot and quote swaps."""

    def market_prices(self) -> Tuple[float, float]:
        """(long_price, short_price) from the venue pools, in native units."""
        ...

    def fair_prices(self) -> Tuple[float, float, float]:
        """(long_fair_price, short_fair_price, native_usd_price) from the market."""
        ...

    def quote_amounts_out(self, amount_in: int, legs: List[str]) -> List[int]:
        """Router quote for ``amount_in`` along ``legs``."""
        ...


@runtime_checkable
class TimeProvider(Protocol):
    """Waits between timer ticks."""

    def sleep(self, duration: float) -> None:
        """Sleep for specified duration in seconds."""
        ...


class SystemTimeProvider:
    """Production time provider using system time."""

    def sleep(self, duration: float) -> None:
        time.sleep(duration)


class DeterministicTimeProvider:
    """Deterministic time provider for testing; records sleeps instead of waiting."""

    def __init__(self):
        self.sleeps: List[float] = []

    def sleep(self, duration: float) -> None:
        self.sleeps.append(duration)
