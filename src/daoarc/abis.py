"""ABI fragments for the contracts the SDK calls.

Only the functions and events used by daoarc are listed.
"""

from __future__ import annotations

from typing import Any


def _fn(name: str, inputs: list[tuple[str, str]], outputs: list[str] | None = None,
        mutability: str = "nonpayable") -> dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": "", "type": t} for t in (outputs or [])],
        "stateMutability": mutability,
    }


def _event(name: str, inputs: list[tuple[str, str, bool]]) -> dict[str, Any]:
    return {
        "type": "event",
        "name": name,
        "anonymous": False,
        "inputs": [{"name": n, "type": t, "indexed": i} for n, t, i in inputs],
    }


DAO_TOKEN_ABI: list[dict[str, Any]] = [
    _fn("name", [], ["string"], "view"),
    _fn("symbol", [], ["string"], "view"),
    _fn("totalSupply", [], ["uint256"], "view"),
    _fn("balanceOf", [("_owner", "address")], ["uint256"], "view"),
    _fn("allowance", [("_owner", "address"), ("_spender", "address")], ["uint256"], "view"),
    _fn("approve", [("_spender", "address"), ("_value", "uint256")], ["bool"]),
    _fn("transfer", [("_to", "address"), ("_value", "uint256")], ["bool"]),
    _fn("mint", [("_to", "address"), ("_amount", "uint256")], ["bool"]),
    _event("Transfer", [("from", "address", True), ("to", "address", True), ("value", "uint256", False)]),
    _event("Approval", [("owner", "address", True), ("spender", "address", True), ("value", "uint256", False)]),
    _event("Mint", [("to", "address", True), ("amount", "uint256", False)]),
]

CONTRIBUTION_REWARD_ABI: list[dict[str, Any]] = [
    _fn(
        "proposeContributionReward",
        [
            ("_avatar", "address"),
            ("_descriptionHash", "string"),
            ("_reputationChange", "int256"),
            ("_rewards", "uint256[5]"),
            ("_externalToken", "address"),
            ("_beneficiary", "address"),
        ],
        ["bytes32"],
    ),
    _event(
        "NewContributionProposal",
        [
            ("_avatar", "address", True),
            ("_proposalId", "bytes32", True),
            ("_intVoteInterface", "address", True),
            ("_descriptionHash", "string", False),
            ("_reputationChange", "int256", False),
            ("_rewards", "uint256[5]", False),
            ("_externalToken", "address", False),
            ("_beneficiary", "address", False),
        ],
    ),
]

GENERIC_SCHEME_ABI: list[dict[str, Any]] = [
    _fn(
        "proposeCall",
        [
            ("_avatar", "address"),
            ("_callData", "bytes"),
            ("_value", "uint256"),
            ("_descriptionHash", "string"),
        ],
        ["bytes32"],
    ),
    _event(
        "NewCallProposal",
        [
            ("_avatar", "address", True),
            ("_proposalId", "bytes32", True),
            ("_callData", "bytes", False),
            ("_value", "uint256", False),
            ("_descriptionHash", "string", False),
        ],
    ),
]

SCHEME_REGISTRAR_ABI: list[dict[str, Any]] = [
    _fn(
        "proposeScheme",
        [
            ("_avatar", "address"),
            ("_scheme", "address"),
            ("_parametersHash", "bytes32"),
            ("_permissions", "bytes4"),
            ("_descriptionHash", "string"),
        ],
        ["bytes32"],
    ),
    _fn(
        "proposeToRemoveScheme",
        [("_avatar", "address"), ("_scheme", "address"), ("_descriptionHash", "string")],
        ["bytes32"],
    ),
    _event(
        "NewSchemeProposal",
        [
            ("_avatar", "address", True),
            ("_proposalId", "bytes32", True),
            ("_intVoteInterface", "address", True),
            ("_scheme", "address", False),
            ("_parametersHash", "bytes32", False),
            ("_permissions", "bytes4", False),
            ("_descriptionHash", "string", False),
        ],
    ),
    _event(
        "RemoveSchemeProposal",
        [
            ("_avatar", "address", True),
            ("_proposalId", "bytes32", True),
            ("_intVoteInterface", "address", True),
            ("_scheme", "address", False),
            ("_descriptionHash", "string", False),
        ],
    ),
]

ABIS: dict[str, list[dict[str, Any]]] = {
    "DAOToken": DAO_TOKEN_ABI,
    "ContributionReward": CONTRIBUTION_REWARD_ABI,
    "GenericScheme": GENERIC_SCHEME_ABI,
    "SchemeRegistrar": SCHEME_REGISTRAR_ABI,
}
