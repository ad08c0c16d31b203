"""Low-level HTTP client for the GraphQL indexer."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from daoarc.exceptions import IndexerError

logger = logging.getLogger(__name__)

DEFAULT_GRAPHQL_URL = "http://127.0.0.1:8000/subgraphs/name/daostack"
DEFAULT_TIMEOUT = 30.0


def _handle_error(resp: httpx.Response) -> Any:
    if not resp.is_success:
        try:
            body = resp.json()
            errors = body.get("errors") if isinstance(body, dict) else None
            msg = errors[0].get("message", resp.text) if errors else resp.text
        except ValueError:
            msg = resp.text
        raise IndexerError(msg, status=resp.status_code)

    try:
        body = resp.json()
    except ValueError as exc:
        raise IndexerError("Indexer returned a non-JSON response", status=resp.status_code) from exc
    if not isinstance(body, dict):
        raise IndexerError("Indexer returned a non-object response", status=resp.status_code, details=body)
    errors = body.get("errors")
    if errors:
        raise IndexerError(
            errors[0].get("message", "GraphQL query failed"),
            status=resp.status_code,
            code="GRAPHQL_ERROR",
            details=errors,
        )
    return body.get("data") or {}


class AsyncHttpClient:
    """Asynchronous GraphQL client wrapping ``httpx.AsyncClient``."""

    def __init__(
        self,
        url: str = DEFAULT_GRAPHQL_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        api_key: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.url = url
        _headers: dict[str, str] = {"Content-Type": "application/json"}
        if api_key:
            _headers["Authorization"] = f"Bearer {api_key}"
        if headers:
            _headers.update(headers)
        self._client = httpx.AsyncClient(timeout=timeout, headers=_headers)

    async def query(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute *query* and return its ``data`` object."""
        body: dict[str, Any] = {"query": query}
        if variables:
            body["variables"] = variables
        logger.debug("Indexer query: %s", query)
        try:
            resp = await self._client.post(self.url, json=body)
        except httpx.HTTPError as exc:
            raise IndexerError(f"Indexer request failed: {exc}") from exc
        return _handle_error(resp)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHttpClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
