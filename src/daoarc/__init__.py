"""daoarc Python SDK: indexed reads and transactions for DAOstack-style DAOs."""

from daoarc.arc import Arc
from daoarc.config import ArcConfig
from daoarc.exceptions import (
    ArcError,
    IndexerError,
    InvalidAddressError,
    NotFoundError,
    TransactionError,
    UnknownSchemeError,
    ValidationError,
)
from daoarc.ledger import Ledger, Web3Ledger
from daoarc.observable import Observable, Subscription
from daoarc.operation import Operation, TransactionState, TransactionUpdate
from daoarc.proposal import Proposal
from daoarc.scheme import Scheme
from daoarc.token import Token
from daoarc.types import ContractInfo

__all__ = [
    "Arc",
    "ArcConfig",
    "ContractInfo",
    "Ledger",
    "Web3Ledger",
    "Observable",
    "Subscription",
    "Operation",
    "TransactionState",
    "TransactionUpdate",
    "Scheme",
    "Token",
    "Proposal",
    "ArcError",
    "ValidationError",
    "InvalidAddressError",
    "UnknownSchemeError",
    "NotFoundError",
    "IndexerError",
    "TransactionError",
]

__version__ = "0.1.0"
