#!/usr/bin/env python3
"""
Delta arbitrage bot CLI.

Watches the long/short pools against the market's fair prices and swaps when
the spread pays for the trade.

Usage:
    python3 run_bot.py --config configs/delta_bot.example.yaml
    python3 run_bot.py --config configs/delta_bot.example.yaml --dry-run --once
"""

import argparse
import logging
import os
import sys
from typing import Optional, Tuple

from dotenv import load_dotenv
from eth_account import Account
from eth_account.signers.local import LocalAccount

import logging_config
from delta_arbitrage import AssetManager, BotEngine, TimerEventSource, run_event_loop
from delta_arbitrage.exceptions import DeltaArbitrageError
from delta_arbitrage.utils import get_logger
from delta_arbitrage.version import get_version
from dex.config import ConfigError, DexConfig, load_config
from dex.contracts import ContractRefs, connect
from dex.price_source import Web3PriceSource
from dex.token_manager import Web3Balances, build_token_manager

logger = get_logger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Delta arbitrage bot for long/short position tokens",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run against the configured venue
  python3 run_bot.py --config configs/delta_bot.yaml

  # Log decisions without trading
  python3 run_bot.py --config configs/delta_bot.yaml --dry-run

  # Single cycle (for testing/CI)
  python3 run_bot.py --config configs/delta_bot.yaml --dry-run --once
        """,
    )

    parser.add_argument(
        "--config",
        default="configs/delta_bot.yaml",
        help="Path to config YAML file (default: configs/delta_bot.yaml)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Evaluate routes and gains but send no transactions",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single cycle and exit (overrides config setting)",
    )
    parser.add_argument(
        "--interval",
        type=int,
        default=None,
        help="Seconds between cycles (overrides poll_sec)",
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument(
        "--quiet", action="store_true", help="Only warnings and errors"
    )

    return parser.parse_args(argv)


def load_account(
    config: DexConfig, dry_run: bool
) -> Tuple[Optional[LocalAccount], str]:
    """
    Signing account and the address it trades from.

    A dry run may go without a key if ``account_address`` is configured.
    """
    private_key = os.getenv(config.private_key_env)
    if private_key:
        try:
            account = Account.from_key(private_key)
        except ValueError as e:
            raise ConfigError(f"Invalid private key in {config.private_key_env}") from e
        return account, account.address

    if dry_run and config.account_address:
        return None, config.account_address

    raise ConfigError(
        f"Set {config.private_key_env} (or account_address for --dry-run)"
    )


def build_engine(config: DexConfig, dry_run: bool) -> BotEngine:
    """Wire the venue collaborators into an engine; approves markets and logs balances."""
    web3 = connect(config)
    contracts = ContractRefs(web3, config)
    account, caller = load_account(config, dry_run)

    token_manager = build_token_manager(contracts, config, account, dry_run)
    balances = Web3Balances(contracts, caller)
    asset_manager = AssetManager(balances, token_manager, config.strategy)

    token_manager.approve_markets()
    asset_manager.print_balances()

    return BotEngine(
        price_source=Web3PriceSource(contracts),
        asset_manager=asset_manager,
        directory=contracts,
        caller=caller,
        config=config.strategy,
        dry_run=dry_run,
    )


def main(argv=None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = parse_args(argv)

    if args.verbose:
        logging_config.setup_debug()
    elif args.quiet:
        logging_config.setup_minimal()
    else:
        logging_config.setup(logging.INFO)

    load_dotenv()

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error(f"Config error: {e}")
        return 1

    if args.once:
        config.once = True
    if args.interval is not None:
        if args.interval <= 0:
            logger.error("--interval must be positive")
            return 1
        config.poll_sec = args.interval

    mode = "dry run" if args.dry_run else "live"
    logger.info(
        f"Delta arbitrage bot v{get_version()} ({mode}, every {config.poll_sec}s)"
    )
    try:
        engine = build_engine(config, args.dry_run)
    except DeltaArbitrageError as e:
        logger.error(f"Initialization failed: {e}")
        return 1

    events = TimerEventSource(
        interval_sec=config.poll_sec, max_ticks=1 if config.once else None
    )
    try:
        run_event_loop(engine, events)
    except KeyboardInterrupt:
        logger.info("Stopped by user")
    return 0


if __name__ == "__main__":
    sys.exit(main())
