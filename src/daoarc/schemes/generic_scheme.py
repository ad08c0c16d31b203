"""GenericScheme: proposals that make the DAO call an arbitrary contract."""

from __future__ import annotations

from typing import Any

from daoarc.exceptions import ValidationError
from daoarc.schemes.base import ProposalEncoder
from daoarc.types import ProposalCreateOptions
from daoarc.utils import checksum


class GenericScheme(ProposalEncoder):
    name = "GenericScheme"
    event_name = "NewCallProposal"

    def build_call(self, contract: Any, options: ProposalCreateOptions) -> Any:
        if not options.get("call_data"):
            raise ValidationError("A GenericScheme proposal needs call_data")
        return contract.functions.proposeCall(
            checksum(options["dao"]),
            options["call_data"],
            int(options.get("value") or 0),
            options.get("description_hash") or "",
        )
