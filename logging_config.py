"""
Logging configuration for the bot entry points.

Usage:
    import logging_config
    logging_config.setup()
"""

import logging
import sys

APP_LOGGERS = ("delta_arbitrage", "dex")

def setup(level=logging.INFO):
    """
    Configure root logging for the command line scripts.

    - Suppresses per-request logs from web3 and urllib3
    - Uses shorter timestamp format (HH:MM:SS instead of full datetime)
    - Applies the level to the bot's own loggers too
    """

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-7s | %(message)s", datefmt="%H:%M:%S"
    )
    console.setFormatter(formatter)
    root.addHandler(console)

    # Suppress noisy loggers
    logging.getLogger("web3").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    logging.getLogger("__main__").setLevel(level)
    for name in list(logging.root.manager.loggerDict):
        if name.split(".")[0] in APP_LOGGERS:
            logging.getLogger(name).setLevel(level)


def setup_minimal():
    """
    Only warnings and errors.
    Good for production or when you only care about problems.
    """
    setup(level=logging.WARNING)


def setup_debug():
    """
    Verbose logging for debugging, RPC request logs included.
    """
    setup(level=logging.DEBUG)
    logging.getLogger("web3").setLevel(logging.DEBUG)
