"""Proposal encoders, one per supported scheme module."""

from __future__ import annotations

from daoarc.exceptions import UnknownSchemeError
from daoarc.schemes.base import ProposalEncoder
from daoarc.schemes.contribution_reward import ContributionReward
from daoarc.schemes.generic_scheme import GenericScheme
from daoarc.schemes.scheme_registrar import SchemeRegistrar

PROPOSAL_ENCODERS: dict[str, ProposalEncoder] = {
    encoder.name: encoder
    for encoder in (ContributionReward(), GenericScheme(), SchemeRegistrar())
}


def get_proposal_encoder(name: str | None) -> ProposalEncoder:
    """Return the encoder for a scheme's module *name*."""
    try:
        return PROPOSAL_ENCODERS[name]  # type: ignore[index]
    except KeyError:
        raise UnknownSchemeError(f'Unknown proposal scheme: "{name}"', details=name) from None


__all__ = [
    "ContributionReward",
    "GenericScheme",
    "PROPOSAL_ENCODERS",
    "ProposalEncoder",
    "SchemeRegistrar",
    "get_proposal_encoder",
]
