"""Address helpers and GraphQL query construction."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from eth_utils import to_checksum_address
from web3 import Web3

from daoarc.exceptions import InvalidAddressError

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def is_address(value: Any) -> bool:
    """Return True if *value* looks like a 20-byte hex address (checksum not enforced)."""
    return isinstance(value, str) and _ADDRESS_RE.match(value) is not None


def assert_address(value: Any) -> str:
    if not is_address(value):
        raise InvalidAddressError(f"Not a valid address: {value}", details=value)
    return value


def checksum(address: str) -> str:
    """Validate *address* and return its EIP-55 form, as web3 requires."""
    return to_checksum_address(assert_address(address))


def hex_id(value: Any) -> str:
    """Normalize a bytes32 event value (or hex string) to a lowercase 0x string."""
    if isinstance(value, str):
        return value.lower()
    return Web3.to_hex(value).lower()


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def create_graphql_where_query(
    where: Mapping[str, Any] | None,
    address_fields: Iterable[str] = ("address", "dao"),
) -> str:
    """Render a ``where`` filter body, one ``key: "value"`` term per line.

    Keys whose value is ``None`` are skipped. Address fields are validated and
    lowercased. Values are interpolated as-is.
    """
    if not where:
        return ""
    address_fields = set(address_fields)
    result = ""
    for key, value in where.items():
        if value is None:
            continue
        if key in address_fields:
            value = assert_address(value).lower()
        result += f'{key}: "{_format_value(value)}"\n'
    return result


def create_graphql_query(options: Mapping[str, Any] | None, where: str | None = None) -> str:
    """Render the argument list of a collection query, e.g. ``(where: {...} first: 10)``."""
    options = options or {}
    if where is None:
        where = create_graphql_where_query(options.get("where"))
    query = ""
    if where:
        query += f"where: {{\n{where}}}\n"
    if options.get("first"):
        query += f"first: {options['first']}\n"
    if options.get("skip"):
        query += f"skip: {options['skip']}\n"
    if options.get("order_by"):
        query += f"orderBy: {options['order_by']}\n"
    if options.get("order_direction"):
        query += f"orderDirection: {options['order_direction']}\n"
    if query:
        return f"(\n{query})"
    return ""
