"""
DEX adapter modules for the AMM venue.
"""

from .v2 import fetch_pool, get_amounts_out, reserves_for

__all__ = ["fetch_pool", "reserves_for", "get_amounts_out"]
