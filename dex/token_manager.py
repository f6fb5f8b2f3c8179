"""
Web3-backed balances and token writes for the bot account.

Every write is a signed transaction sent directly and waited on; a reverted
or failed transaction surfaces as CapabilityError.
"""

from typing import Any, Dict, List, Optional

from eth_account.signers.local import LocalAccount
from web3.types import TxParams, Wei

from delta_arbitrage.asset_manager import DryRunTokenManager
from delta_arbitrage.config_schema import StrategyConfig
from delta_arbitrage.constants import MAX_UINT256
from delta_arbitrage.exceptions import CapabilityError, MalformedVenueResponseError
from delta_arbitrage.routes import Route
from delta_arbitrage.utils import get_logger, humanize_balance

from .config import DexConfig
from .contracts import ContractRefs

logger = get_logger(__name__)


class Web3Balances:
    """Fresh balance reads for ``owner``; nothing is cached."""

    def __init__(self, contracts: ContractRefs, owner: str):
        self.contracts = contracts
        self.owner = owner

    def _read(self, label: str, read) -> int:
        try:
            return int(read())
        except Exception as e:
            raise CapabilityError(
                f"Failed to read {label} balance: {e}", operation="balance_of"
            ) from e

    def native_balance(self) -> int:
        return self._read(
            "native", lambda: self.contracts.web3.eth.get_balance(self.owner)
        )

    def wrapped_balance(self) -> int:
        token = self.contracts.wrapped_native()
        return self._read(
            "wrapped native", token.functions.balanceOf(self.owner).call
        )

    def long_balance(self) -> int:
        token = self.contracts.long_token()
        return self._read("long", token.functions.balanceOf(self.owner).call)

    def short_balance(self) -> int:
        token = self.contracts.short_token()
        return self._read("short", token.functions.balanceOf(self.owner).call)


class Web3TokenManager:
    """Signs and sends the bot's token operations."""

    def __init__(
        self,
        contracts: ContractRefs,
        account: LocalAccount,
        config: DexConfig,
    ):
        self.contracts = contracts
        self.web3 = contracts.web3
        self.account = account
        self.config = config
        self.strategy: StrategyConfig = config.strategy

    def approve_markets(self) -> None:
        """Approve the router for all three tokens and the market for wrapped native."""
        router = self.contracts.addresses["router"]
        market = self.contracts.addresses["market"]
        approvals = [
            ("wrapped native", self.contracts.wrapped_native(), router),
            ("long", self.contracts.long_token(), router),
            ("short", self.contracts.short_token(), router),
            ("wrapped native", self.contracts.wrapped_native(), market),
        ]
        for label, token, spender in approvals:
            self._approve_if_unset(label, token, spender)

    def wrap_native(self) -> None:
        amount = self.strategy.top_up_subunits
        logger.info(f"Wrapping {humanize_balance(amount):.2f} native")
        fn = self.contracts.wrapped_native().functions.deposit()
        self._transact(fn, self.config.gas_limit, value=amount)

    def unwrap_native(self, amount: int) -> None:
        logger.info(f"Unwrapping {humanize_balance(amount):.2f} wrapped native")
        fn = self.contracts.wrapped_native().functions.withdraw(int(amount))
        self._transact(fn, self.config.gas_limit)

    def buy_longs(self) -> None:
        amount = self.strategy.top_up_subunits
        logger.info(f"Buying longs for {humanize_balance(amount):.2f} wrapped native")
        fn = self.contracts.market().functions.depositLong(amount)
        self._transact(fn, self.config.gas_limit)

    def buy_shorts(self) -> None:
        amount = self.strategy.top_up_subunits
        logger.info(f"Buying shorts for {humanize_balance(amount):.2f} wrapped native")
        fn = self.contracts.market().functions.depositShort(amount)
        self._transact(fn, self.config.gas_limit)

    def swap(
        self, route: Route, amount_in_max: int, amount_out: int, recipient: str
    ) -> List[int]:
        """
        Swap at most ``amount_in_max`` of the first leg for exactly ``amount_out``
        of the last one. The call is simulated first to learn the leg amounts.
        """
        path = route.to_swap_legs(self.contracts)
        fn = self.contracts.router().functions.swapTokensForExactTokens(
            int(amount_out), int(amount_in_max), path, recipient, MAX_UINT256
        )
        try:
            amounts = fn.call({"from": self.account.address})
        except Exception as e:
            raise CapabilityError(
                f"Swap simulation failed for {route.value}: {e}", operation="swap"
            ) from e
        if not isinstance(amounts, (list, tuple)):
            raise MalformedVenueResponseError(
                "Swap simulation returned no amounts", operation="swap", response=amounts
            )

        self._transact(fn, self.config.swap_gas_limit(route.is_multi_hop))
        return [int(a) for a in amounts]

    def _approve_if_unset(self, label: str, token, spender: str) -> None:
        try:
            allowance = token.functions.allowance(self.account.address, spender).call()
        except Exception as e:
            raise CapabilityError(
                f"Failed to read {label} allowance: {e}", operation="allowance"
            ) from e
        if allowance != 0:
            return
        logger.info(f"Approving {spender} to spend {label}")
        self._transact(
            token.functions.approve(spender, MAX_UINT256), self.config.gas_limit
        )

    def _transact(self, fn, gas: int, value: int = 0) -> Dict[str, Any]:
        """Build, sign and send ``fn``; waits for the receipt and checks its status."""
        try:
            tx: TxParams = fn.build_transaction(
                {
                    "from": self.account.address,
                    "value": Wei(value),
                    "gas": gas,
                    "gasPrice": self.web3.eth.gas_price,
                    "nonce": self.web3.eth.get_transaction_count(self.account.address),
                    "chainId": self.web3.eth.chain_id,
                }
            )
            signed_tx = self.account.sign_transaction(tx)
            tx_hash = self.web3.eth.send_raw_transaction(signed_tx.raw_transaction)
            receipt = self.web3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.config.receipt_timeout_sec
            )
        except Exception as e:
            raise CapabilityError(
                f"Transaction failed: {e}", operation="transact"
            ) from e

        if receipt["status"] != 1:
            raise CapabilityError(
                f"Transaction {self.web3.to_hex(tx_hash)} reverted",
                operation="transact",
            )
        logger.debug(f"Transaction mined: {self.web3.to_hex(tx_hash)}")
        return receipt


def build_token_manager(
    contracts: ContractRefs,
    config: DexConfig,
    account: Optional[LocalAccount] = None,
    dry_run: bool = False,
):
    """Pick the token manager once at startup: live writes need an account."""
    if dry_run:
        logger.info("DRY RUN mode - no transactions will be sent")
        return DryRunTokenManager()
    if account is None:
        raise CapabilityError(
            "A signing account is required outside dry-run mode",
            operation="build_token_manager",
        )
    return Web3TokenManager(contracts, account, config)
