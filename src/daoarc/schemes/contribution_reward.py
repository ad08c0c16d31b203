"""ContributionReward: proposals that reward a beneficiary in reputation, tokens or ETH."""

from __future__ import annotations

from typing import Any

from daoarc.exceptions import ValidationError
from daoarc.schemes.base import ProposalEncoder
from daoarc.types import ProposalCreateOptions
from daoarc.utils import ZERO_ADDRESS, checksum


class ContributionReward(ProposalEncoder):
    name = "ContributionReward"
    event_name = "NewContributionProposal"

    def build_call(self, contract: Any, options: ProposalCreateOptions) -> Any:
        if not options.get("beneficiary"):
            raise ValidationError("A ContributionReward proposal needs a beneficiary")
        rewards = [
            int(options.get("native_token_reward") or 0),
            int(options.get("eth_reward") or 0),
            int(options.get("external_token_reward") or 0),
            int(options.get("period_length") or 0),
            int(options.get("periods") or 1),
        ]
        return contract.functions.proposeContributionReward(
            checksum(options["dao"]),
            options.get("description_hash") or "",
            int(options.get("reputation_reward") or 0),
            rewards,
            checksum(options.get("external_token_address") or ZERO_ADDRESS),
            checksum(options["beneficiary"]),
        )
