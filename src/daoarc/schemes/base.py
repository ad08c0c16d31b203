"""Base class for per-module proposal encoders."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from daoarc.exceptions import TransactionError
from daoarc.proposal import Proposal
from daoarc.types import ProposalCreateOptions
from daoarc.utils import hex_id

if TYPE_CHECKING:
    from daoarc.arc import Arc


class ProposalEncoder(ABC):
    """Translates proposal options into a contract call, and a receipt into a Proposal.

    Subclasses name the scheme contract they encode for (``name``) and the
    event that carries the new proposal id (``event_name``).
    """

    name: str
    event_name: str

    @abstractmethod
    def build_call(self, contract: Any, options: ProposalCreateOptions) -> Any:
        """Return the bound contract function that creates the proposal."""

    def event_for(self, options: ProposalCreateOptions) -> str:
        return self.event_name

    def _contract(self, options: ProposalCreateOptions, context: Arc) -> Any:
        return context.get_contract(self.name, options.get("scheme"))

    def create_transaction(
        self, options: ProposalCreateOptions, context: Arc
    ) -> Callable[[], Any]:
        """Return a zero-argument builder; the call is encoded when it is invoked."""

        def create() -> Any:
            return self.build_call(self._contract(options, context), options)

        return create

    def create_transaction_map(
        self, options: ProposalCreateOptions, context: Arc
    ) -> Callable[[Any], Proposal]:
        event_name = self.event_for(options)

        def map_receipt(receipt: Any) -> Proposal:
            events = context.ledger.decode_events(self._contract(options, context), receipt, event_name)
            if not events:
                raise TransactionError(
                    f"No {event_name} event in transaction receipt", details=receipt
                )
            return Proposal(hex_id(events[0]["_proposalId"]), context)

        return map_receipt
