"""Top-level Arc connection context."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from daoarc.abis import ABIS
from daoarc.config import DEFAULT_CONFIRMATIONS, DEFAULT_POLL_INTERVAL, ArcConfig
from daoarc.exceptions import NotFoundError
from daoarc.http import DEFAULT_GRAPHQL_URL, DEFAULT_TIMEOUT, AsyncHttpClient
from daoarc.ledger import Ledger, Web3Ledger
from daoarc.observable import Observable, Observer
from daoarc.operation import CreateTransaction, MapReceipt, Operation, send_transaction
from daoarc.types import ContractInfo

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNSET = object()


class Arc:
    """Connection context shared by every entity.

    Holds the indexer client, the ledger and the contract registry.

    Usage::

        async with Arc(graphql_url, web3_provider=rpc_url, contract_infos=infos) as arc:
            schemes = await Scheme.search(arc, {"where": {"dao": dao}}).first()
    """

    def __init__(
        self,
        graphql_http_provider: str = DEFAULT_GRAPHQL_URL,
        *,
        web3_provider: str | None = None,
        ledger: Ledger | None = None,
        contract_infos: Iterable[ContractInfo] = (),
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        confirmations: int = DEFAULT_CONFIRMATIONS,
        timeout: float = DEFAULT_TIMEOUT,
        api_key: str | None = None,
        headers: dict[str, str] | None = None,
        default_account: str | None = None,
    ) -> None:
        self.indexer = AsyncHttpClient(
            graphql_http_provider, timeout=timeout, api_key=api_key, headers=headers
        )
        if ledger is None:
            kwargs: dict[str, Any] = {"default_account": default_account}
            if web3_provider is not None:
                kwargs["provider_url"] = web3_provider
            ledger = Web3Ledger(**kwargs)
        self.ledger = ledger
        self.contract_infos = list(contract_infos)
        self.poll_interval = poll_interval
        self.confirmations = confirmations

    @classmethod
    def from_config(cls, config: ArcConfig, **kwargs: Any) -> "Arc":
        ledger = kwargs.pop("ledger", None)
        if ledger is None:
            ledger = Web3Ledger(
                config.web3_provider,
                default_account=config.default_account,
                receipt_timeout=config.receipt_timeout,
            )
        return cls(
            config.graphql_http_provider,
            ledger=ledger,
            poll_interval=config.poll_interval,
            confirmations=config.confirmations,
            timeout=config.timeout,
            api_key=config.api_key,
            **kwargs,
        )

    # -- Contract registry ---------------------------------------------------

    def get_contract_info(self, address: str) -> ContractInfo:
        """Look up a registered contract by address (case-insensitive)."""
        address = address.lower()
        for info in self.contract_infos:
            if info.address.lower() == address:
                return info
        raise NotFoundError(f"No contract with address {address} is known", details=address)

    def get_contract_address(self, name: str) -> str:
        for info in self.contract_infos:
            if info.name == name:
                return info.address
        raise NotFoundError(f"No contract with name {name} is known", details=name)

    def get_contract(self, name: str, address: str | None = None) -> Any:
        """Build a ledger contract for *name*, at *address* or its registered address."""
        if name not in ABIS:
            raise NotFoundError(f"No ABI for contract {name}", details=name)
        return self.ledger.contract(address or self.get_contract_address(name), ABIS[name])

    # -- Indexer streams -----------------------------------------------------

    def get_observable(
        self,
        query: str,
        *,
        subscribe: bool = True,
        poll_interval: float | None = None,
    ) -> Observable[dict[str, Any]]:
        """Stream the ``data`` of *query*, re-emitting when it changes.

        With ``subscribe=False`` the query runs once and the stream completes.
        """
        interval = self.poll_interval if poll_interval is None else poll_interval

        async def producer(observer: Observer[dict[str, Any]]) -> None:
            last: Any = _UNSET
            while True:
                data = await self.indexer.query(query)
                if data != last:
                    last = data
                    observer.next(data)
                if not subscribe:
                    return
                await asyncio.sleep(interval)
                logger.debug("Polling indexer")

        return Observable(producer)

    def get_observable_list(
        self,
        query: str,
        item_map: Callable[[Any], T | None],
        **fetch_options: Any,
    ) -> Observable[list[T]]:
        """Stream the first root field of *query* as a list; ``None`` items are dropped."""

        def map_list(data: dict[str, Any]) -> list[T]:
            items = _root_field(data) or []
            return [mapped for mapped in map(item_map, items) if mapped is not None]

        return self.get_observable(query, **fetch_options).map(map_list)

    def get_observable_object(
        self,
        query: str,
        item_map: Callable[[Any], T],
        **fetch_options: Any,
    ) -> Observable[T]:
        """Stream the first root field of *query* as a single (nullable) record."""
        return self.get_observable(query, **fetch_options).map(lambda data: item_map(_root_field(data)))

    # -- Ledger --------------------------------------------------------------

    def watch_call(
        self,
        create_call: Callable[[], Any],
        *,
        subscribe: bool = True,
        poll_interval: float | None = None,
    ) -> Observable[Any]:
        """Stream the result of a read-only contract call, re-emitting on change."""
        interval = self.poll_interval if poll_interval is None else poll_interval

        async def producer(observer: Observer[Any]) -> None:
            last: Any = _UNSET
            while True:
                value = await self.ledger.call(create_call())
                if value != last:
                    last = value
                    observer.next(value)
                if not subscribe:
                    return
                await asyncio.sleep(interval)

        return Observable(producer)

    def send_transaction(
        self,
        create_transaction: CreateTransaction,
        map_receipt: MapReceipt[T],
    ) -> Operation[T]:
        return send_transaction(
            self.ledger,
            create_transaction,
            map_receipt,
            confirmations=self.confirmations,
            poll_interval=self.poll_interval,
        )

    # -- Lifecycle -----------------------------------------------------------

    async def aclose(self) -> None:
        await self.indexer.aclose()
        close_ledger = getattr(self.ledger, "aclose", None)
        if close_ledger is not None:
            await close_ledger()

    async def __aenter__(self) -> "Arc":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()


def _root_field(data: dict[str, Any]) -> Any:
    if not data:
        return None
    return next(iter(data.values()))
