"""Proposal entity: a governance action submitted through a scheme."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from daoarc.entity import Entity
from daoarc.exceptions import NotFoundError
from daoarc.observable import Observable
from daoarc.types import ProposalStaticState, ProposalState, QueryOptions
from daoarc.utils import create_graphql_query, create_graphql_where_query

if TYPE_CHECKING:
    from daoarc.arc import Arc

PROPOSAL_ADDRESS_FIELDS = ("dao", "proposer", "beneficiary")

PROPOSAL_FIELDS = """
    id
    dao { id }
    scheme { id }
    proposer
    stage
    createdAt
    descriptionHash
    title
    votesFor
    votesAgainst
"""


def _int(value: Any) -> int:
    return int(value) if value not in (None, "") else 0


class Proposal(Entity[ProposalStaticState]):
    @staticmethod
    def search(
        context: Arc,
        options: QueryOptions | None = None,
        **fetch_options: Any,
    ) -> Observable[list[Proposal]]:
        """Search proposals on the indexer."""
        options = options or {}
        where = create_graphql_where_query(options.get("where"), PROPOSAL_ADDRESS_FIELDS)
        query = f"""{{
          proposals {create_graphql_query(options, where)} {{
            {PROPOSAL_FIELDS}
          }}
        }}"""

        def item_map(item: dict[str, Any]) -> Proposal:
            return Proposal(
                ProposalStaticState(id=item["id"], dao=item["dao"]["id"], scheme=item["scheme"]["id"]),
                context,
            )

        return context.get_observable_list(query, item_map, **fetch_options)

    def state(self, **fetch_options: Any) -> Observable[ProposalState]:
        query = f"""{{
          proposal (id: "{self.id}") {{
            {PROPOSAL_FIELDS}
          }}
        }}"""

        def item_map(item: dict[str, Any] | None) -> ProposalState:
            if item is None:
                raise NotFoundError(f"Could not find a proposal with id {self.id}", details=self.id)
            return ProposalState(
                id=item["id"],
                dao=item["dao"]["id"],
                scheme=item["scheme"]["id"],
                proposer=item.get("proposer"),
                stage=item.get("stage"),
                created_at=_int(item.get("createdAt")) or None,
                description_hash=item.get("descriptionHash"),
                title=item.get("title"),
                votes_for=_int(item.get("votesFor")),
                votes_against=_int(item.get("votesAgainst")),
            )

        return self.context.get_observable_object(query, item_map, **fetch_options)
