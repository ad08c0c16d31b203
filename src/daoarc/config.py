"""Client configuration for daoarc."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from daoarc.http import DEFAULT_GRAPHQL_URL, DEFAULT_TIMEOUT

DEFAULT_WEB3_PROVIDER = "http://127.0.0.1:8545"
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_CONFIRMATIONS = 1
DEFAULT_RECEIPT_TIMEOUT = 120.0


@dataclasses.dataclass(frozen=True)
class ArcConfig:
    """Connection settings for an :class:`~daoarc.arc.Arc` context.

    Parameters
    ----------
    graphql_http_provider : str
        URL of the GraphQL indexer endpoint.
    web3_provider : str
        JSON-RPC URL of the Ethereum node.
    timeout : float
        HTTP timeout for indexer requests, in seconds.
    poll_interval : float
        Seconds between re-queries of a live stream.
    confirmations : int
        Blocks to wait after mining before a transaction is confirmed.
    receipt_timeout : float
        Seconds to wait for a transaction receipt.
    api_key : str or None
        Bearer token sent to the indexer.
    default_account : str or None
        Account transactions are sent from. Defaults to the node's first
        account.
    """

    graphql_http_provider: str = DEFAULT_GRAPHQL_URL
    web3_provider: str = DEFAULT_WEB3_PROVIDER
    timeout: float = DEFAULT_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    confirmations: int = DEFAULT_CONFIRMATIONS
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT
    api_key: str | None = None
    default_account: str | None = None

    @classmethod
    def from_env(cls, **overrides: Any) -> ArcConfig:
        """Create configuration from ``ARC_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "ARC_GRAPHQL_HTTP_PROVIDER": "graphql_http_provider",
            "ARC_WEB3_PROVIDER": "web3_provider",
            "ARC_API_KEY": "api_key",
            "ARC_DEFAULT_ACCOUNT": "default_account",
        }
        _ENV_NUM_MAP = {
            "ARC_TIMEOUT": ("timeout", float),
            "ARC_POLL_INTERVAL": ("poll_interval", float),
            "ARC_CONFIRMATIONS": ("confirmations", int),
            "ARC_RECEIPT_TIMEOUT": ("receipt_timeout", float),
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val
        for env_key, (field_name, convert) in _ENV_NUM_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = convert(val)

        config_kwargs.update(overrides)
        return cls(**config_kwargs)
