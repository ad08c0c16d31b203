"""Token entity: balances, allowances and approvals of a DAO token."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from daoarc.entity import Entity
from daoarc.exceptions import NotFoundError, TransactionError
from daoarc.observable import Observable
from daoarc.operation import Operation
from daoarc.types import Allowance, AllowanceWhere, TokenApproval, TokenStaticState, TokenState
from daoarc.utils import assert_address, checksum, create_graphql_where_query

if TYPE_CHECKING:
    from daoarc.arc import Arc


class Token(Entity[TokenStaticState]):
    """A DAO token, identified by its contract address."""

    def __init__(self, address: str | TokenStaticState, context: Arc) -> None:
        super().__init__(address, context)

    @property
    def address(self) -> str:
        return self.id

    def _static_id(self, state: TokenStaticState) -> str:
        return state.address

    def contract(self) -> Any:
        return self.context.get_contract("DAOToken", self.address)

    # -- State ---------------------------------------------------------------

    def state(self, **fetch_options: Any) -> Observable[TokenState]:
        query = f"""{{
          token (id: "{self.address}") {{
            id
            dao {{ id }}
            name
            symbol
            totalSupply
          }}
        }}"""

        def item_map(item: dict[str, Any] | None) -> TokenState:
            if item is None:
                raise NotFoundError(
                    f"Could not find a token contract with address {self.address}",
                    details=self.address,
                )
            return TokenState(
                address=item["id"],
                name=item["name"],
                owner=item["dao"]["id"],
                symbol=item["symbol"],
                total_supply=int(item["totalSupply"]),
            )

        return self.context.get_observable_object(query, item_map, **fetch_options)

    def balance_of(self, owner: str, **fetch_options: Any) -> Observable[int]:
        """Balance of *owner*, read from the ledger."""
        owner = checksum(owner)
        return self.context.watch_call(
            lambda: self.contract().functions.balanceOf(owner), **fetch_options
        ).map(int)

    def allowances(self, where: AllowanceWhere | None = None, **fetch_options: Any) -> Observable[list[Allowance]]:
        """Allowances granted on this token, optionally filtered by owner and spender."""
        filters = {"token": self.address, **(where or {})}
        query = f"""{{
          allowances (where: {{
            {create_graphql_where_query(filters, ("token", "owner", "spender"))}
          }}) {{
            token
            owner
            spender
            amount
          }}
        }}"""

        def item_map(item: dict[str, Any]) -> Allowance:
            return Allowance(
                token=item["token"],
                owner=item["owner"],
                spender=item["spender"],
                amount=int(item["amount"]),
            )

        return self.context.get_observable_list(query, item_map, **fetch_options)

    def approvals(self, owner: str, **fetch_options: Any) -> Observable[list[TokenApproval]]:
        """Approval events emitted by this token for *owner*."""
        owner = assert_address(owner).lower()
        query = f"""{{
          tokenApprovals (where: {{ contract: "{self.address}", owner: "{owner}" }}) {{
            id
            contract
            owner
            spender
            value
          }}
        }}"""

        def item_map(item: dict[str, Any]) -> TokenApproval:
            return TokenApproval(
                id=item["id"],
                token=item["contract"],
                owner=item["owner"],
                spender=item["spender"],
                value=int(item["value"]),
            )

        return self.context.get_observable_list(query, item_map, **fetch_options)

    # -- Transactions --------------------------------------------------------

    def approve_for_staking(self, amount: int) -> Operation[Allowance]:
        """Allow the GenesisProtocol voting machine to stake *amount* tokens."""

        def create_transaction() -> Any:
            spender = checksum(self.context.get_contract_address("GenesisProtocol"))
            return self.contract().functions.approve(spender, int(amount))

        def map_receipt(receipt: Any) -> Allowance:
            events = self.context.ledger.decode_events(self.contract(), receipt, "Approval")
            if not events:
                raise TransactionError("No Approval event in transaction receipt", details=receipt)
            event = events[0]
            return Allowance(
                token=self.address,
                owner=event["owner"].lower(),
                spender=event["spender"].lower(),
                amount=int(event["value"]),
            )

        return self.context.send_transaction(create_transaction, map_receipt)

    def mint(self, beneficiary: str, amount: int) -> Operation[Any]:
        beneficiary = checksum(beneficiary)
        return self.context.send_transaction(
            lambda: self.contract().functions.mint(beneficiary, int(amount)),
            lambda receipt: receipt,
        )

    def transfer(self, beneficiary: str, amount: int) -> Operation[Any]:
        beneficiary = checksum(beneficiary)
        return self.context.send_transaction(
            lambda: self.contract().functions.transfer(beneficiary, int(amount)),
            lambda receipt: receipt,
        )
