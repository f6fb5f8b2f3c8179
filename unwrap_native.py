#!/usr/bin/env python3
"""
Unwrap the bot's wrapped native balance back to native currency.

Usage:
    python3 unwrap_native.py --config configs/delta_bot.yaml
    python3 unwrap_native.py --config configs/delta_bot.yaml --amount 250
"""

import argparse
import sys
from typing import Optional

from dotenv import load_dotenv

import logging_config
from delta_arbitrage.exceptions import DeltaArbitrageError
from delta_arbitrage.utils import get_logger, log_humanized, to_subunits
from dex.config import ConfigError, load_config
from dex.contracts import ContractRefs, connect
from dex.token_manager import Web3Balances, Web3TokenManager
from run_bot import load_account

logger = get_logger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Unwrap wrapped native currency held by the bot account"
    )
    parser.add_argument(
        "--config",
        default="configs/delta_bot.yaml",
        help="Path to config YAML file (default: configs/delta_bot.yaml)",
    )
    parser.add_argument(
        "--amount",
        type=float,
        default=None,
        help="Whole units to unwrap (default: the full wrapped balance)",
    )
    return parser.parse_args(argv)


def unwrap(
    balances: Web3Balances,
    token_manager: Web3TokenManager,
    amount: Optional[int] = None,
) -> int:
    """
    Unwrap ``amount`` subunits, or everything held when amount is None.

    Returns:
        Subunits unwrapped (0 when there was nothing to do)
    """
    balance = balances.wrapped_balance()
    log_humanized(logger, "Wrapped native balance", balance)

    to_unwrap = balance if amount is None else min(amount, balance)
    if to_unwrap <= 0:
        logger.info("Nothing to unwrap")
        return 0

    token_manager.unwrap_native(to_unwrap)
    log_humanized(logger, "Native balance", balances.native_balance())
    return to_unwrap


def main(argv=None) -> int:
    args = parse_args(argv)
    logging_config.setup()
    load_dotenv()

    try:
        config = load_config(args.config)
        web3 = connect(config)
        contracts = ContractRefs(web3, config)
        account, address = load_account(config, dry_run=False)
        balances = Web3Balances(contracts, address)
        token_manager = Web3TokenManager(contracts, account, config)

        amount = None
        if args.amount is not None:
            amount = to_subunits(args.amount)
        unwrap(balances, token_manager, amount)
    except ConfigError as e:
        logger.error(f"Config error: {e}")
        return 1
    except DeltaArbitrageError as e:
        logger.error(f"Unwrap failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
