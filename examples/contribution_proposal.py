#!/usr/bin/env python3
"""
Propose a contribution reward and follow the transaction until it confirms.

Contract addresses come from the environment:

    ARC_CONTRIBUTION_REWARD  address of the ContributionReward scheme
    ARC_GENESIS_PROTOCOL     address of the GenesisProtocol voting machine
    ARC_DAO_TOKEN            address of the DAO's native token
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys

from daoarc import Arc, ArcConfig, ArcError, ContractInfo, Scheme, Token, TransactionState

CONTRACT_INFOS = [
    ContractInfo("ContributionReward", os.environ.get("ARC_CONTRIBUTION_REWARD", "")),
    ContractInfo("GenesisProtocol", os.environ.get("ARC_GENESIS_PROTOCOL", "")),
    ContractInfo("DAOToken", os.environ.get("ARC_DAO_TOKEN", "")),
]


async def main() -> None:
    logging.basicConfig(level=logging.INFO)
    if len(sys.argv) < 3:
        print("usage: contribution_proposal.py <scheme-id> <beneficiary>", file=sys.stderr)
        sys.exit(2)
    scheme_id, beneficiary = sys.argv[1:3]

    async with Arc.from_config(ArcConfig.from_env(), contract_infos=CONTRACT_INFOS) as arc:
        try:
            token = Token(arc.get_contract_address("DAOToken"), arc)
            allowance = await token.approve_for_staking(100).send()
            print(f"[token] staking allowance {allowance.amount} for {allowance.spender}")

            scheme = Scheme(scheme_id, arc)
            operation = scheme.create_proposal({
                "beneficiary": beneficiary,
                "native_token_reward": 10,
                "reputation_reward": 10,
                "description_hash": "0x" + "00" * 32,
                "title": "Example contribution",
            })
            async for update in operation:
                print(f"[proposal] {update.state.name} tx={update.transaction_hash}")
                if update.state is TransactionState.CONFIRMED:
                    print(f"[proposal] created {update.result.id}")
        except ArcError as exc:
            print(f"Error ({exc.code or exc.status}): {exc}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
