"""Transaction operations: staged progress streams for ledger writes."""

from __future__ import annotations

import asyncio
import enum
import inspect
import logging
from collections.abc import Callable
from contextlib import aclosing
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from daoarc.exceptions import ArcError, TransactionError
from daoarc.ledger import Ledger
from daoarc.observable import Observable, Observer

logger = logging.getLogger(__name__)

T = TypeVar("T")

CreateTransaction = Callable[[], Any]
MapReceipt = Callable[[Any], T]


class TransactionState(enum.IntEnum):
    SENT = 1
    MINED = 2
    CONFIRMED = 3


@dataclass(frozen=True)
class TransactionUpdate(Generic[T]):
    state: TransactionState
    transaction_hash: str
    receipt: Any = None
    result: T | None = None
    confirmations: int = 0


class Operation(Observable[TransactionUpdate[T]]):
    """Stream of :class:`TransactionUpdate` for one transaction.

    Emits ``SENT``, ``MINED`` and a terminal ``CONFIRMED`` in that order.
    Nothing is submitted until the operation is subscribed to or sent.
    """

    async def send(self) -> T | None:
        """Submit the transaction and return the result once it is mined.

        Waiting for further confirmations is left to stream subscribers.
        """
        async with aclosing(self.values()) as updates:
            async for update in updates:
                if update.state >= TransactionState.MINED:
                    return update.result
        return None


def send_transaction(
    ledger: Ledger,
    create_transaction: CreateTransaction,
    map_receipt: MapReceipt[T],
    *,
    confirmations: int = 1,
    poll_interval: float = 1.0,
) -> Operation[T]:
    """Wrap a lazily built contract call in an :class:`Operation`.

    ``create_transaction`` is only invoked once a subscriber starts the
    operation and may return an awaitable. ``map_receipt`` turns the mined
    receipt into the operation's result. Errors are never retried.
    """

    async def producer(observer: Observer[TransactionUpdate[T]]) -> None:
        try:
            call = create_transaction()
            if inspect.isawaitable(call):
                call = await call

            tx_hash = await ledger.send(call)
            logger.info("Transaction sent: %s", tx_hash)
            observer.next(TransactionUpdate(TransactionState.SENT, tx_hash))

            receipt = await ledger.wait_for_receipt(tx_hash)
            if receipt["status"] == 0:
                raise TransactionError(
                    f"Transaction reverted: {tx_hash}", code="REVERTED", details=receipt
                )
            result = map_receipt(receipt)
            logger.info("Transaction mined: %s (block %s)", tx_hash, receipt["blockNumber"])
            observer.next(
                TransactionUpdate(TransactionState.MINED, tx_hash, receipt=receipt, result=result)
            )

            seen = 0
            while seen < confirmations:
                seen = await ledger.block_number() - receipt["blockNumber"]
                if seen < confirmations:
                    await asyncio.sleep(poll_interval)
            logger.info("Transaction confirmed: %s (%d confirmations)", tx_hash, max(seen, 0))
            observer.next(
                TransactionUpdate(
                    TransactionState.CONFIRMED,
                    tx_hash,
                    receipt=receipt,
                    result=result,
                    confirmations=max(seen, 0),
                )
            )
        except ArcError:
            raise
        except Exception as exc:
            raise TransactionError(str(exc) or type(exc).__name__, details=exc) from exc

    return Operation(producer)
