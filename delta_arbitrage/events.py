"""
Events that drive the bot, and the sources that produce them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional, Protocol

from .constants import DEFAULT_POLL_INTERVAL_SEC
from .interfaces import SystemTimeProvider, TimeProvider
from .utils import format_duration, get_logger

logger = get_logger(__name__)


class EventKind(Enum):
    """What triggered the event."""

    TIMER_TICK = "timer_tick"
    # Reserved for venue trade streams
    TRADE_EXECUTED = "trade_executed"
    # Reserved for on-chain price notifications
    PRICE_CHANGED = "price_changed"
    SHUTDOWN = "shutdown"


@dataclass(frozen=True)
class BotEvent:
    """
    A single trigger for the engine.

    Attributes:
        kind: Event variant
        subject: Pair for TRADE_EXECUTED, token for PRICE_CHANGED, else None
    """

    kind: EventKind
    subject: Optional[str] = None

    @classmethod
    def timer_tick(cls) -> "BotEvent":
        return cls(EventKind.TIMER_TICK)

    @classmethod
    def trade_executed(cls, pair: str) -> "BotEvent":
        return cls(EventKind.TRADE_EXECUTED, pair)

    @classmethod
    def price_changed(cls, token: str) -> "BotEvent":
        return cls(EventKind.PRICE_CHANGED, token)

    @classmethod
    def shutdown(cls) -> "BotEvent":
        return cls(EventKind.SHUTDOWN)

    @property
    def triggers_cycle(self) -> bool:
        return self.kind is not EventKind.SHUTDOWN


class EventSource(Protocol):
    """A source of events. Returning None means there are no more events."""

    def next_event(self) -> Optional[BotEvent]:
        ...


class TimerEventSource:
    """
    Emits TIMER_TICK at a fixed interval; the first tick is immediate.

    With ``max_ticks`` set, a SHUTDOWN follows the last tick. A Ctrl-C while
    waiting is turned into a SHUTDOWN event.
    """

    def __init__(
        self,
        interval_sec: float = DEFAULT_POLL_INTERVAL_SEC,
        max_ticks: Optional[int] = None,
        time_provider: Optional[TimeProvider] = None,
    ):
        self.interval_sec = interval_sec
        self.max_ticks = max_ticks
        self.time_provider = time_provider or SystemTimeProvider()
        self.ticks = 0
        self._stopped = False

    def next_event(self) -> Optional[BotEvent]:
        if self._stopped:
            return None
        if self.max_ticks is not None and self.ticks >= self.max_ticks:
            self._stopped = True
            return BotEvent.shutdown()

        if self.ticks > 0:
            logger.info(f"Sleeping for {format_duration(self.interval_sec)}...")
            try:
                self.time_provider.sleep(self.interval_sec)
            except KeyboardInterrupt:
                self._stopped = True
                return BotEvent.shutdown()

        self.ticks += 1
        return BotEvent.timer_tick()


class IterableEventSource:
    """Replays a fixed sequence of events, then reports exhaustion."""

    def __init__(self, events: Iterable[BotEvent]):
        self._events: Iterator[BotEvent] = iter(events)

    def next_event(self) -> Optional[BotEvent]:
        return next(self._events, None)
