#!/usr/bin/env python3
"""Quick helper: list the schemes of a DAO and their proposals."""

from __future__ import annotations

import asyncio
import sys

from daoarc import Arc, ArcConfig, ArcError, Scheme


async def main() -> None:
    if len(sys.argv) < 2:
        print("usage: list_schemes.py <dao-address>", file=sys.stderr)
        sys.exit(2)
    dao = sys.argv[1]

    async with Arc.from_config(ArcConfig.from_env()) as arc:
        try:
            schemes = await Scheme.search(arc, {"where": {"dao": dao}}, subscribe=False).first()
            for scheme in schemes:
                state = scheme.static_state
                print(f"{state.name or '<unknown>':<24} {state.address}")
                proposals = await scheme.proposals({"first": 5}, subscribe=False).first()
                for proposal in proposals:
                    print(f"    proposal {proposal.id}")
        except ArcError as exc:
            print(f"Error ({exc.code or exc.status}): {exc}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
