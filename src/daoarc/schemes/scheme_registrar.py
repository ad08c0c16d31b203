"""SchemeRegistrar: proposals to register or remove a scheme on a DAO."""

from __future__ import annotations

from typing import Any

from daoarc.exceptions import ValidationError
from daoarc.schemes.base import ProposalEncoder
from daoarc.types import ProposalCreateOptions
from daoarc.utils import checksum

ADD = "SchemeRegistrarAdd"
REMOVE = "SchemeRegistrarRemove"

DEFAULT_PERMISSIONS = "0x00000001"
EMPTY_HASH = "0x" + "00" * 32


class SchemeRegistrar(ProposalEncoder):
    name = "SchemeRegistrar"
    event_name = "NewSchemeProposal"

    def event_for(self, options: ProposalCreateOptions) -> str:
        if options.get("type") == REMOVE:
            return "RemoveSchemeProposal"
        return self.event_name

    def build_call(self, contract: Any, options: ProposalCreateOptions) -> Any:
        proposal_type = options.get("type")
        description_hash = options.get("description_hash") or ""

        if proposal_type == ADD:
            if not options.get("scheme_to_register"):
                raise ValidationError("A SchemeRegistrarAdd proposal needs scheme_to_register")
            return contract.functions.proposeScheme(
                checksum(options["dao"]),
                checksum(options["scheme_to_register"]),
                options.get("parameters_hash") or EMPTY_HASH,
                options.get("permissions") or DEFAULT_PERMISSIONS,
                description_hash,
            )
        if proposal_type == REMOVE:
            if not options.get("scheme_to_remove"):
                raise ValidationError("A SchemeRegistrarRemove proposal needs scheme_to_remove")
            return contract.functions.proposeToRemoveScheme(
                checksum(options["dao"]),
                checksum(options["scheme_to_remove"]),
                description_hash,
            )
        raise ValidationError(
            f'Unknown SchemeRegistrar proposal type: "{proposal_type}"; '
            f"expected {ADD} or {REMOVE}"
        )
