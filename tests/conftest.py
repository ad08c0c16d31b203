"""Shared test fixtures: a fake GraphQL indexer and a fake ledger."""

from __future__ import annotations

import asyncio
import json
import re
from collections.abc import Callable
from typing import Any

import pytest
from eth_utils import to_checksum_address
from pytest_httpserver import HTTPServer
from web3 import Web3
from werkzeug import Request, Response

from daoarc.arc import Arc
from daoarc.ledger import Ledger
from daoarc.types import ContractInfo

ACCOUNT = "0x90f8bf6a479f320ead074411a4b0e7944ea8c9c1"
DAO = "0xe7a2c59e134ee81d4035ae6db2254f79308e334f"
DAO_TOKEN = "0x4b1a2d2e4dd02c2d4a1a41b1b3a2dd9f01be7f0c"
GENESIS_PROTOCOL = "0x7a5a64a5f4b5e3f9b1e0a6a1c2d3e4f5a6b7c8d9"
CONTRIBUTION_REWARD = "0x2dc1ae7b0b9d0e2e6f5e6b0d94c4a1c0d0ab1b2c"
GENERIC_SCHEME = "0x9ab5f3a1b1c2d3e4f5a6b7c8d9e0f1a2b3c4d5e6"
SCHEME_REGISTRAR = "0x1c8bb4a1d2e3f4a5b6c7d8e9f0a1b2c3d4e5f6a7"

CONTRACT_INFOS = [
    ContractInfo("DAOToken", DAO_TOKEN, "0.0.1-rc.19"),
    ContractInfo("GenesisProtocol", GENESIS_PROTOCOL, "0.0.1-rc.19"),
    ContractInfo("ContributionReward", CONTRIBUTION_REWARD, "0.0.1-rc.19"),
    ContractInfo("GenericScheme", GENERIC_SCHEME, "0.0.1-rc.19"),
    ContractInfo("SchemeRegistrar", SCHEME_REGISTRAR, "0.0.1-rc.19"),
]

GRAPHQL_PATH = "/subgraphs/name/daostack"


def json_response(data: Any, status: int = 200) -> Response:
    """Build a Werkzeug JSON response."""
    return Response(
        json.dumps(data),
        status=status,
        content_type="application/json",
    )


def root_field(query: str) -> str:
    match = re.search(r"\{\s*(\w+)", query)
    assert match, query
    return match.group(1)


class FakeIndexer:
    """Answers GraphQL queries by root field; values may be callables of the query text."""

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses: dict[str, Any] = responses or {}
        self.queries: list[str] = []

    def __call__(self, request: Request) -> Response:
        query = request.get_json()["query"]
        self.queries.append(query)
        field = root_field(query)
        value = self.responses.get(field)
        if callable(value):
            value = value(query)
        return json_response({"data": {field: value}})


class FakeLedger(Ledger):
    """In-memory ledger. Contracts are real (offline) web3 contracts."""

    def __init__(
        self,
        *,
        balances: dict[str, int] | None = None,
        events: dict[str, list[dict[str, Any]]] | None = None,
        block: int = 100,
        status: int = 1,
    ) -> None:
        self._w3 = Web3()
        self.default_account = to_checksum_address(ACCOUNT)
        self.balances = balances or {}
        self.events = events or {}
        self.block = block
        self.status = status
        self.send_error: Exception | None = None
        self.receipt_waiter: asyncio.Event | None = None
        self.sent: list[tuple[str, tuple[Any, ...]]] = []
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def contract(self, address: str, abi: list[dict[str, Any]]) -> Any:
        return self._w3.eth.contract(address=to_checksum_address(address), abi=abi)

    async def send(self, call: Any) -> str:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append((call.fn_name, tuple(call.args)))
        return "0x" + f"{len(self.sent):064x}"

    async def wait_for_receipt(self, tx_hash: str) -> Any:
        if self.receipt_waiter is not None:
            await self.receipt_waiter.wait()
        return {"transactionHash": tx_hash, "status": self.status, "blockNumber": self.block, "logs": []}

    async def call(self, call: Any) -> Any:
        self.calls.append((call.fn_name, tuple(call.args)))
        return self.balances.get(call.args[0].lower(), 0)

    async def block_number(self) -> int:
        self.block += 1
        return self.block

    def decode_events(self, contract: Any, receipt: Any, event_name: str) -> list[dict[str, Any]]:
        return list(self.events.get(event_name, []))


class FixedHeightLedger(FakeLedger):
    """A chain that only mines when a transaction arrives; the height never moves on its own."""

    async def block_number(self) -> int:
        return self.block


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition was not met in time")
        await asyncio.sleep(0.01)


@pytest.fixture()
def indexer(httpserver: HTTPServer) -> FakeIndexer:
    fake = FakeIndexer()
    httpserver.expect_request(GRAPHQL_PATH, method="POST").respond_with_handler(fake)
    return fake


@pytest.fixture()
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture()
def arc(httpserver: HTTPServer, indexer: FakeIndexer, ledger: FakeLedger) -> Arc:
    return Arc(
        httpserver.url_for(GRAPHQL_PATH),
        ledger=ledger,
        contract_infos=CONTRACT_INFOS,
        poll_interval=0.01,
        confirmations=1,
    )
