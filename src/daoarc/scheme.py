"""Scheme entity: a governance module registered at a DAO."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from daoarc.entity import Entity
from daoarc.exceptions import NotFoundError
from daoarc.observable import Observable, Observer
from daoarc.operation import Operation, TransactionUpdate
from daoarc.proposal import Proposal
from daoarc.schemes import get_proposal_encoder
from daoarc.types import ProposalCreateOptions, QueryOptions, SchemeStaticState, SchemeState
from daoarc.utils import create_graphql_query, create_graphql_where_query

if TYPE_CHECKING:
    from daoarc.arc import Arc

SCHEME_FIELDS = """
    id
    address
    name
    dao { id }
    canDelegateCall
    canRegisterSchemes
    canUpgradeController
    canManageGlobalConstraints
    paramsHash
"""


def resolve_name(context: Arc, item: dict[str, Any]) -> str | None:
    """Return the indexed name, falling back to the contract registry."""
    name = item.get("name")
    if not name:
        try:
            name = context.get_contract_info(item["address"]).name
        except NotFoundError:
            name = None
    return name


class Scheme(Entity[SchemeStaticState]):
    """A scheme instance registered at a DAO."""

    @staticmethod
    def search(
        context: Arc,
        options: QueryOptions | None = None,
        **fetch_options: Any,
    ) -> Observable[list[Scheme]]:
        """Search for schemes.

        ``options["where"]["name"]`` is matched on the client against the
        resolved name, since the indexer does not know every scheme's name.
        """
        options = options or {}
        where = dict(options.get("where") or {})
        name_filter = where.pop("name", None)
        query = f"""{{
          controllerSchemes {create_graphql_query(options, create_graphql_where_query(where))} {{
            {SCHEME_FIELDS}
          }}
        }}"""

        def item_map(item: dict[str, Any]) -> Scheme | None:
            name = resolve_name(context, item)
            if name_filter and name_filter != name:
                return None
            return Scheme(
                SchemeStaticState(
                    id=item["id"],
                    address=item["address"],
                    dao=item["dao"]["id"],
                    params_hash=item["paramsHash"],
                    name=name,
                ),
                context,
            )

        return context.get_observable_list(query, item_map, **fetch_options)

    def state(self, **fetch_options: Any) -> Observable[SchemeState]:
        query = f"""{{
          controllerScheme (id: "{self.id}") {{
            {SCHEME_FIELDS}
          }}
        }}"""

        def item_map(item: dict[str, Any] | None) -> SchemeState:
            if item is None:
                raise NotFoundError(f"Could not find a scheme with id {self.id}", details=self.id)
            return SchemeState(
                id=item["id"],
                address=item["address"],
                dao=item["dao"]["id"],
                params_hash=item["paramsHash"],
                name=resolve_name(self.context, item),
                can_delegate_call=item["canDelegateCall"],
                can_register_schemes=item["canRegisterSchemes"],
                can_upgrade_controller=item["canUpgradeController"],
                can_manage_global_constraints=item["canManageGlobalConstraints"],
            )

        return self.context.get_observable_object(query, item_map, **fetch_options)

    def create_proposal(self, options: ProposalCreateOptions) -> Operation[Proposal]:
        """Create a proposal with the encoder matching this scheme's module name."""

        async def producer(observer: Observer[TransactionUpdate[Proposal]]) -> None:
            state = await self.fetch_static_state()
            encoder = get_proposal_encoder(state.name)
            opts: ProposalCreateOptions = {"dao": state.dao, "scheme": state.address, **options}
            create_transaction = encoder.create_transaction(opts, self.context)
            map_receipt = encoder.create_transaction_map(opts, self.context)
            await self.context.send_transaction(create_transaction, map_receipt).forward(observer)

        return Operation(producer)

    def proposals(self, options: QueryOptions | None = None, **fetch_options: Any) -> Observable[list[Proposal]]:
        """Proposals submitted through this scheme."""
        options = dict(options or {})  # type: ignore[assignment]
        options["where"] = {**(options.get("where") or {}), "scheme": self.id}
        return Proposal.search(self.context, options, **fetch_options)
