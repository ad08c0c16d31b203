"""Ledger clients: contract calls, transaction submission and receipts."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from eth_utils import to_checksum_address
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.logs import DISCARD

from daoarc.config import DEFAULT_RECEIPT_TIMEOUT, DEFAULT_WEB3_PROVIDER
from daoarc.exceptions import TransactionError

logger = logging.getLogger(__name__)


class Ledger(ABC):
    """Interface the SDK needs from a blockchain node.

    A *call* is a bound contract function, as returned by
    ``contract.functions.<name>(*args)``.
    """

    default_account: str | None = None

    @abstractmethod
    def contract(self, address: str, abi: list[dict[str, Any]]) -> Any:
        """Return a contract object for *address*."""

    @abstractmethod
    async def send(self, call: Any) -> str:
        """Submit *call* as a transaction and return its hash."""

    @abstractmethod
    async def wait_for_receipt(self, tx_hash: str) -> Any:
        """Wait until *tx_hash* is mined and return its receipt."""

    @abstractmethod
    async def call(self, call: Any) -> Any:
        """Execute *call* read-only against the latest block."""

    @abstractmethod
    async def block_number(self) -> int:
        """Return the current block height."""

    @abstractmethod
    def decode_events(self, contract: Any, receipt: Any, event_name: str) -> list[dict[str, Any]]:
        """Return the arguments of every *event_name* log in *receipt*."""


class Web3Ledger(Ledger):
    """Ledger backed by a web3.py ``AsyncWeb3`` instance."""

    def __init__(
        self,
        provider_url: str = DEFAULT_WEB3_PROVIDER,
        *,
        default_account: str | None = None,
        receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT,
        w3: AsyncWeb3 | None = None,
    ) -> None:
        self.w3 = w3 if w3 is not None else AsyncWeb3(AsyncHTTPProvider(provider_url))
        self.default_account = to_checksum_address(default_account) if default_account else None
        self.receipt_timeout = receipt_timeout

    def contract(self, address: str, abi: list[dict[str, Any]]) -> Any:
        return self.w3.eth.contract(address=to_checksum_address(address), abi=abi)

    async def _account(self) -> str:
        if self.default_account is None:
            accounts = await self.w3.eth.accounts
            if not accounts:
                raise TransactionError("The node has no unlocked accounts; pass default_account")
            self.default_account = accounts[0]
        return self.default_account

    async def send(self, call: Any) -> str:
        account = await self._account()
        logger.debug("Sending %s from %s", call.fn_name, account)
        tx_hash = await call.transact({"from": account})
        return self.w3.to_hex(tx_hash)

    async def wait_for_receipt(self, tx_hash: str) -> Any:
        return await self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout)

    async def call(self, call: Any) -> Any:
        return await call.call()

    async def block_number(self) -> int:
        return await self.w3.eth.block_number

    def decode_events(self, contract: Any, receipt: Any, event_name: str) -> list[dict[str, Any]]:
        event = getattr(contract.events, event_name)()
        return [dict(log["args"]) for log in event.process_receipt(receipt, errors=DISCARD)]

    async def aclose(self) -> None:
        disconnect = getattr(self.w3.provider, "disconnect", None)
        if disconnect is None:
            return
        try:
            await disconnect()
        except NotImplementedError:
            # provider keeps no persistent connection
            return
