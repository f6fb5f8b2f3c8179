"""Tests for dependency injection interfaces."""

import time
from unittest.mock import MagicMock

from delta_arbitrage.asset_manager import DryRunTokenManager
from delta_arbitrage.interfaces import (
    Balances,
    DeterministicTimeProvider,
    PriceSource,
    SystemTimeProvider,
    TimeProvider,
    TokenDirectory,
    TokenManager,
)


def test_system_time_provider_sleeps():
    provider = SystemTimeProvider()
    start = time.monotonic()
    provider.sleep(0.01)
    assert time.monotonic() - start >= 0.01


def test_deterministic_time_provider_records_sleeps():
    provider = DeterministicTimeProvider()
    provider.sleep(5.5)
    provider.sleep(1.0)
    assert provider.sleeps == [5.5, 1.0]


def test_time_providers_satisfy_protocol():
    assert isinstance(SystemTimeProvider(), TimeProvider)
    assert isinstance(DeterministicTimeProvider(), TimeProvider)


def test_dry_run_token_manager_satisfies_protocol():
    assert isinstance(DryRunTokenManager(), TokenManager)


def test_mocks_satisfy_venue_protocols():
    mock = MagicMock()
    assert isinstance(mock, Balances)
    assert isinstance(mock, PriceSource)
    assert isinstance(mock, TokenDirectory)


def test_plain_object_is_not_a_price_source():
    assert not isinstance(object(), PriceSource)
