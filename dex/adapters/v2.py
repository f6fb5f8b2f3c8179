"""
Uniswap V2 style adapter for the pools and router the bot trades through.

Reads pair reserves oriented to a given token and asks the router for
multi-leg quotes. RPC failures surface as CapabilityError.
"""

import time
from typing import List, Tuple

from web3 import Web3

from delta_arbitrage.exceptions import CapabilityError

from ..abi import PAIR_ABI, ROUTER_ABI


def _is_rate_limit(error: Exception) -> bool:
    msg = str(error)
    return (
        "429" in msg
        or "Too Many Requests" in msg
        or "-32005" in msg
        or "limit exceeded" in msg.lower()
    )


def fetch_pool(
    web3: Web3, pair_addr: str, max_retries: int = 3
) -> Tuple[str, str, int, int]:
    """
    Fetch token addresses and reserves from a Uniswap V2 style pair.

    Args:
        web3: Web3 instance connected to the chain
        pair_addr: Checksummed address of the pair contract
        max_retries: Maximum number of attempts on rate limit errors

    Returns:
        Tuple of (token0_addr, token1_addr, reserve0, reserve1)

    Raises:
        CapabilityError: If RPC calls fail after all retries
        ValueError: If pair address is invalid
    """
    if not Web3.is_checksum_address(pair_addr):
        raise ValueError(f"Invalid pair address: {pair_addr}")

    pair = web3.eth.contract(address=pair_addr, abi=PAIR_ABI)

    last_error = None
    for attempt in range(max_retries):
        try:
            token0 = pair.functions.token0().call()
            token1 = pair.functions.token1().call()
            reserves = pair.functions.getReserves().call()
            return (
                Web3.to_checksum_address(token0),
                Web3.to_checksum_address(token1),
                int(reserves[0]),
                int(reserves[1]),
            )
        except Exception as e:
            last_error = e
            if _is_rate_limit(e) and attempt < max_retries - 1:
                # Exponential backoff: 1s, 2s, 4s
                time.sleep(2**attempt)
                continue
            raise CapabilityError(
                f"Failed to fetch pool {pair_addr}: {e}", operation="get_reserves"
            ) from e

    raise CapabilityError(
        f"Failed to fetch pool {pair_addr} after {max_retries} retries: {last_error}",
        operation="get_reserves",
    ) from last_error


def reserves_for(
    web3: Web3, pair_addr: str, token_in: str, max_retries: int = 3
) -> Tuple[int, int]:
    """
    Reserves of a pair ordered as (reserve of token_in, reserve of the other token).

    Raises:
        CapabilityError: If the pair cannot be read or does not hold token_in
    """
    token0, token1, r0, r1 = fetch_pool(web3, pair_addr, max_retries)
    token_in = Web3.to_checksum_address(token_in)
    if token_in == token0:
        return r0, r1
    if token_in == token1:
        return r1, r0
    raise CapabilityError(
        f"Pair {pair_addr} does not hold token {token_in}", operation="get_reserves"
    )


def get_amounts_out(
    web3: Web3, router_addr: str, amount_in: int, path: List[str]
) -> List[int]:
    """
    Router quote for ``amount_in`` along ``path``; one amount per token in the path.

    Raises:
        CapabilityError: If the router call fails
    """
    router = web3.eth.contract(address=router_addr, abi=ROUTER_ABI)
    try:
        amounts = router.functions.getAmountsOut(int(amount_in), path).call()
    except Exception as e:
        raise CapabilityError(
            f"Router quote failed for path {path}: {e}", operation="get_amounts_out"
        ) from e
    return [int(a) for a in amounts]
