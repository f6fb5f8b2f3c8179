"""Tests for the decision cycle and the event loop."""

import unittest
from unittest.mock import MagicMock

import pytest

from delta_arbitrage.engine import BotEngine, run_event_loop
from delta_arbitrage.events import BotEvent, IterableEventSource
from delta_arbitrage.exceptions import (
    CapabilityError,
    InsufficientFundsError,
    MalformedVenueResponseError,
    PreconditionViolation,
)
from delta_arbitrage.routes import Route

UNIT = 10**9
CALLER = "0xbot"


def make_price_source(long_price=1.0, short_price=1.0, quote=None):
    price_source = MagicMock()
    price_source.market_prices.return_value = (long_price, short_price)
    # long fair, short fair, native/USD
    price_source.fair_prices.return_value = (1.0, 1.0, 0.02)
    price_source.quote_amounts_out.return_value = quote or [50 * UNIT, 70 * UNIT]
    return price_source


def make_directory():
    directory = MagicMock()
    directory.address_of.side_effect = lambda asset: f"0x{asset.value}"
    return directory


class TestCheckAndTrade(unittest.TestCase):
    def setUp(self):
        self.asset_manager = MagicMock()
        self.asset_manager.swap.return_value = [50 * UNIT, 70 * UNIT]

    def make_engine(self, price_source, dry_run=False):
        return BotEngine(
            price_source=price_source,
            asset_manager=self.asset_manager,
            directory=make_directory(),
            caller=CALLER,
            dry_run=dry_run,
        )

    def test_no_route_ends_cycle_after_rebalance(self):
        price_source = make_price_source()
        engine = self.make_engine(price_source)

        self.assertIsNone(engine.check_and_trade())

        self.asset_manager.manage_asset_levels.assert_called_once()
        price_source.quote_amounts_out.assert_not_called()
        self.asset_manager.swap.assert_not_called()

    def test_profitable_single_hop_swaps(self):
        price_source = make_price_source(long_price=1.1)
        engine = self.make_engine(price_source)

        gain = engine.check_and_trade()

        price_source.quote_amounts_out.assert_called_once_with(
            50 * UNIT, ["0xlong", "0xwrapped_native"]
        )
        self.asset_manager.swap.assert_called_once_with(
            Route.LONG_NATIVE, 50 * UNIT, 70 * UNIT, CALLER
        )
        self.assertAlmostEqual(gain, 20.0 - 7.0)
        self.asset_manager.print_balances.assert_called_once_with()

    def test_gain_below_threshold_skips(self):
        price_source = make_price_source(
            long_price=1.1, quote=[50 * UNIT, 57 * UNIT + UNIT // 2]
        )
        engine = self.make_engine(price_source)

        self.assertIsNone(engine.check_and_trade())
        self.asset_manager.swap.assert_not_called()

    def test_dry_run_stops_before_swap(self):
        price_source = make_price_source(long_price=1.1)
        engine = self.make_engine(price_source, dry_run=True)

        self.assertIsNone(engine.check_and_trade())

        price_source.quote_amounts_out.assert_called_once()
        self.asset_manager.manage_asset_levels.assert_called_once()
        self.asset_manager.swap.assert_not_called()

    def test_malformed_quote_ends_cycle_quietly(self):
        price_source = make_price_source(long_price=1.1, quote=[50 * UNIT])
        engine = self.make_engine(price_source)

        self.assertIsNone(engine.check_and_trade())
        self.asset_manager.swap.assert_not_called()

    def test_quote_shorter_than_route_ends_cycle(self):
        # Multi-hop route needs one amount per leg
        price_source = make_price_source(
            long_price=1.1, short_price=0.9, quote=[50 * UNIT, 80 * UNIT]
        )
        engine = self.make_engine(price_source)

        self.assertIsNone(engine.check_and_trade())
        self.asset_manager.swap.assert_not_called()

    def test_quote_longer_than_route_ends_cycle(self):
        price_source = make_price_source(
            long_price=1.1, quote=[50 * UNIT, 60 * UNIT, 70 * UNIT]
        )
        engine = self.make_engine(price_source)

        self.assertIsNone(engine.check_and_trade())
        self.asset_manager.swap.assert_not_called()

    def test_malformed_swap_result_raises(self):
        price_source = make_price_source(long_price=1.1)
        self.asset_manager.swap.return_value = [1]
        engine = self.make_engine(price_source)

        with self.assertRaises(MalformedVenueResponseError):
            engine.check_and_trade()

    def test_multi_hop_quote_uses_three_legs(self):
        price_source = make_price_source(
            long_price=1.1, short_price=0.9, quote=[50 * UNIT, 55 * UNIT, 80 * UNIT]
        )
        self.asset_manager.swap.return_value = [50 * UNIT, 55 * UNIT, 80 * UNIT]
        engine = self.make_engine(price_source)

        gain = engine.check_and_trade()

        legs = price_source.quote_amounts_out.call_args[0][1]
        self.assertEqual(legs, ["0xlong", "0xwrapped_native", "0xshort"])
        self.asset_manager.swap.assert_called_once_with(
            Route.LONG_NATIVE_SHORT, 50 * UNIT, 80 * UNIT, CALLER
        )
        self.assertAlmostEqual(gain, 30.0 - 12.5)

    def test_snapshot_built_from_price_source(self):
        price_source = make_price_source(long_price=1.2, short_price=0.8)
        snapshot = self.make_engine(price_source).get_price_snapshot()

        self.assertEqual(snapshot.long_price, 1.2)
        self.assertEqual(snapshot.short_price, 0.8)
        self.assertEqual(snapshot.native_usd_price, 0.02)
        self.assertAlmostEqual(snapshot.long_diff, 20.0)


def make_engine_mock(side_effect=None):
    engine = MagicMock()
    engine.handle_event.side_effect = side_effect
    return engine


def test_loop_stops_on_exhausted_source():
    engine = make_engine_mock(side_effect=lambda event: True)
    run_event_loop(engine, IterableEventSource([BotEvent.timer_tick()] * 3))
    assert engine.handle_event.call_count == 3


def test_loop_stops_on_shutdown():
    engine = BotEngine(MagicMock(), MagicMock(), MagicMock(), CALLER)
    engine.check_and_trade = MagicMock()
    events = [BotEvent.timer_tick(), BotEvent.shutdown(), BotEvent.timer_tick()]

    run_event_loop(engine, IterableEventSource(events))

    assert engine.check_and_trade.call_count == 1


def test_all_trigger_events_run_a_cycle():
    engine = BotEngine(MagicMock(), MagicMock(), MagicMock(), CALLER)
    engine.check_and_trade = MagicMock()
    events = [
        BotEvent.timer_tick(),
        BotEvent.trade_executed("0xpair"),
        BotEvent.price_changed("0xtoken"),
    ]

    run_event_loop(engine, IterableEventSource(events))

    assert engine.check_and_trade.call_count == 3


@pytest.mark.parametrize(
    "error",
    [
        InsufficientFundsError("no native"),
        CapabilityError("rpc down"),
        MalformedVenueResponseError("bad swap result"),
    ],
)
def test_loop_survives_cycle_errors(error):
    engine = make_engine_mock(side_effect=[error, True])
    run_event_loop(
        engine, IterableEventSource([BotEvent.timer_tick(), BotEvent.timer_tick()])
    )
    assert engine.handle_event.call_count == 2


def test_loop_propagates_precondition_violation():
    engine = make_engine_mock(side_effect=PreconditionViolation("empty route"))
    with pytest.raises(PreconditionViolation):
        run_event_loop(engine, IterableEventSource([BotEvent.timer_tick()]))
