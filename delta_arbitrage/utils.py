"""
Common utilities and helper functions for the delta arbitrage bot.

Logging setup plus the unit conversions shared by the core and the venue
adapters (subunits <-> whole units, six-decimal reserve prices).
"""

import logging
from typing import Union

from .constants import PRICE_PRECISION, SUBUNITS_PER_UNIT


# Unit utilities
def to_subunits(units: float) -> int:
    """Convert whole units (e.g. 1500.0) to integer subunits."""
    return int(round(units * SUBUNITS_PER_UNIT))


def humanize_balance(balance: int) -> float:
    """Convert a subunit amount to whole units for display."""
    return balance / float(SUBUNITS_PER_UNIT)


def log_humanized(logger: logging.Logger, label: str, balance: int) -> None:
    """Log a subunit amount as whole units with two decimals."""
    logger.info(f"{label}: {humanize_balance(balance):.2f}")


def calculate_price(amount0: int, amount1: int) -> float:
    """
    Price of one unit of the asset held in ``amount1`` expressed in the asset
    held in ``amount0``, with six decimals of integer precision.

    Args:
        amount0: Reserve (or liquidity) of the pricing asset
        amount1: Reserve (or supply) of the priced asset

    Returns:
        amount0 / amount1 truncated to six decimals

    Raises:
        ValueError: If amount1 is zero
    """
    if amount1 == 0:
        raise ValueError("Cannot price against an empty reserve")
    return (amount0 * PRICE_PRECISION // amount1) / float(PRICE_PRECISION)


def format_duration(seconds: float) -> str:
    """Format duration in seconds to human-readable string."""
    if seconds < 60:
        return f"{seconds:.2f}s"
    elif seconds < 3600:
        minutes = seconds / 60
        return f"{minutes:.1f}m"
    else:
        hours = seconds / 3600
        return f"{hours:.1f}h"


# Logging utilities
def get_logger(name: str, level: Union[str, int] = logging.INFO) -> logging.Logger:
    """
    Get a structured logger with consistent formatting.

    Args:
        name: Logger name (typically __name__)
        level: Logging level

    Returns:
        Configured logger with structured output
    """
    logger = logging.getLogger(name)

    if logger.level == logging.NOTSET:
        logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        # Has its own handler, keep records off the root handler
        logger.propagate = False

    return logger
