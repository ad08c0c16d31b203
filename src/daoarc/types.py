"""Type definitions for indexer records, entity state and call options.

Entity state is held in frozen dataclasses. Query and creation options are
``TypedDict`` so plain dicts can be passed straight through.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, TypedDict

Address = str


# ---------------------------------------------------------------------------
# Query options
# ---------------------------------------------------------------------------

class QueryOptions(TypedDict, total=False):
    where: dict[str, Any]
    first: int
    skip: int
    order_by: str
    order_direction: str


class SchemeWhere(TypedDict, total=False):
    id: str
    address: Address
    dao: Address
    name: str
    paramsHash: str
    canDelegateCall: bool
    canRegisterSchemes: bool
    canUpgradeController: bool
    canManageGlobalConstraints: bool


class AllowanceWhere(TypedDict, total=False):
    owner: Address
    spender: Address


# ---------------------------------------------------------------------------
# Contract registry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ContractInfo:
    name: str
    address: Address
    version: str = ""


# ---------------------------------------------------------------------------
# Scheme
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SchemeStaticState:
    id: str
    address: Address
    dao: Address
    params_hash: str
    name: str | None = None


@dataclass(frozen=True)
class SchemeState(SchemeStaticState):
    can_delegate_call: bool = False
    can_register_schemes: bool = False
    can_upgrade_controller: bool = False
    can_manage_global_constraints: bool = False

    def to_static(self) -> SchemeStaticState:
        return _project(self, SchemeStaticState)


# ---------------------------------------------------------------------------
# Token
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TokenStaticState:
    address: Address
    name: str
    owner: Address
    symbol: str


@dataclass(frozen=True)
class TokenState(TokenStaticState):
    total_supply: int = 0

    def to_static(self) -> TokenStaticState:
        return _project(self, TokenStaticState)


@dataclass(frozen=True)
class Allowance:
    token: Address
    owner: Address
    spender: Address
    amount: int


@dataclass(frozen=True)
class TokenApproval:
    id: str
    token: Address
    owner: Address
    spender: Address
    value: int


# ---------------------------------------------------------------------------
# Proposal
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProposalStaticState:
    id: str
    dao: Address
    scheme: str


@dataclass(frozen=True)
class ProposalState(ProposalStaticState):
    proposer: Address | None = None
    stage: str | None = None
    created_at: int | None = None
    description_hash: str | None = None
    title: str | None = None
    votes_for: int = 0
    votes_against: int = 0

    def to_static(self) -> ProposalStaticState:
        return _project(self, ProposalStaticState)


class ProposalCreateOptions(TypedDict, total=False):
    dao: Address
    scheme: Address
    type: str
    title: str
    description: str
    description_hash: str
    url: str
    # ContributionReward
    beneficiary: Address
    reputation_reward: int
    native_token_reward: int
    eth_reward: int
    external_token_reward: int
    external_token_address: Address
    period_length: int
    periods: int
    # GenericScheme
    call_data: str
    value: int
    # SchemeRegistrar
    scheme_to_register: Address
    scheme_to_remove: Address
    parameters_hash: str
    permissions: str


def _project(state: Any, cls: type) -> Any:
    return cls(**{f.name: getattr(state, f.name) for f in fields(cls)})
