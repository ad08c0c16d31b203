"""Tests for the Scheme entity."""

import pytest

from daoarc.arc import Arc
from daoarc.exceptions import NotFoundError, UnknownSchemeError
from daoarc.operation import TransactionState
from daoarc.proposal import Proposal
from daoarc.scheme import Scheme
from daoarc.types import SchemeStaticState
from tests.conftest import (
    ACCOUNT,
    CONTRIBUTION_REWARD,
    DAO,
    GENERIC_SCHEME,
    FakeIndexer,
    FakeLedger,
)

UNKNOWN_ADDRESS = "0x00000000000000000000000000000000000000aa"


def scheme_record(id_: str, address: str, name: str | None) -> dict:
    return {
        "id": id_,
        "address": address,
        "name": name,
        "dao": {"id": DAO},
        "canDelegateCall": False,
        "canRegisterSchemes": name == "SchemeRegistrar",
        "canUpgradeController": False,
        "canManageGlobalConstraints": False,
        "paramsHash": "0x" + "11" * 32,
    }


RECORDS = [
    scheme_record("0xs1", CONTRIBUTION_REWARD, "ContributionReward"),
    scheme_record("0xs2", GENERIC_SCHEME, None),
    scheme_record("0xs3", UNKNOWN_ADDRESS, ""),
]


def static_state(name: str | None, address: str = CONTRIBUTION_REWARD) -> SchemeStaticState:
    return SchemeStaticState(
        id="0xABC", address=address, dao=DAO, params_hash="0x" + "11" * 32, name=name,
    )


class TestSchemeConstruction:
    def test_from_id_is_lowercased(self, arc: Arc) -> None:
        scheme = Scheme("0xABCdef", arc)
        assert scheme.id == "0xabcdef"
        assert scheme.static_state is None

    def test_from_static_state(self, arc: Arc) -> None:
        scheme = Scheme(static_state("ContributionReward"), arc)
        assert scheme.id == "0xabc"
        assert scheme.static_state.name == "ContributionReward"

    def test_id_is_read_only(self, arc: Arc) -> None:
        scheme = Scheme("0xabc", arc)
        with pytest.raises(AttributeError):
            scheme.id = "0xdef"


class TestSchemeSearch:
    @pytest.mark.asyncio
    async def test_search(self, arc: Arc, indexer: FakeIndexer) -> None:
        indexer.responses["controllerSchemes"] = RECORDS
        schemes = await Scheme.search(arc, {"where": {"dao": DAO.upper().replace("0X", "0x")}}).first()
        assert [s.id for s in schemes] == ["0xs1", "0xs2", "0xs3"]
        assert [s.static_state.name for s in schemes] == ["ContributionReward", "GenericScheme", None]
        assert schemes[0].static_state.address == CONTRIBUTION_REWARD
        assert f'dao: "{DAO}"' in indexer.queries[0]

    @pytest.mark.asyncio
    async def test_search_by_name_filters_on_resolved_name(self, arc: Arc, indexer: FakeIndexer) -> None:
        indexer.responses["controllerSchemes"] = RECORDS
        schemes = await Scheme.search(arc, {"where": {"name": "GenericScheme"}}).first()
        assert [s.id for s in schemes] == ["0xs2"]
        assert all(s.static_state.name == "GenericScheme" for s in schemes)
        assert "GenericScheme" not in indexer.queries[0]

    @pytest.mark.asyncio
    async def test_search_pagination(self, arc: Arc, indexer: FakeIndexer) -> None:
        indexer.responses["controllerSchemes"] = []
        await Scheme.search(arc, {"first": 5, "skip": 10}, subscribe=False).to_list()
        assert "first: 5" in indexer.queries[0]
        assert "skip: 10" in indexer.queries[0]


class TestSchemeState:
    @pytest.mark.asyncio
    async def test_state(self, arc: Arc, indexer: FakeIndexer) -> None:
        indexer.responses["controllerScheme"] = scheme_record("0xs2", GENERIC_SCHEME, None)
        state = await Scheme("0xS2", arc).state().first()
        assert state.name == "GenericScheme"
        assert state.can_register_schemes is False
        assert 'controllerScheme (id: "0xs2")' in indexer.queries[0]

    @pytest.mark.asyncio
    async def test_state_unknown_name_is_absent(self, arc: Arc, indexer: FakeIndexer) -> None:
        indexer.responses["controllerScheme"] = scheme_record("0xs3", UNKNOWN_ADDRESS, None)
        state = await Scheme("0xs3", arc).state().first()
        assert state.name is None

    @pytest.mark.asyncio
    async def test_fetch_static_state_not_found(self, arc: Arc, indexer: FakeIndexer) -> None:
        indexer.responses["controllerScheme"] = None
        with pytest.raises(NotFoundError, match="0xmissing"):
            await Scheme("0xMISSING", arc).fetch_static_state()

    @pytest.mark.asyncio
    async def test_fetch_static_state_once(self, arc: Arc, indexer: FakeIndexer) -> None:
        indexer.responses["controllerScheme"] = scheme_record("0xs1", CONTRIBUTION_REWARD, "ContributionReward")
        scheme = Scheme("0xs1", arc)
        first = await scheme.fetch_static_state()
        indexer.responses["controllerScheme"] = scheme_record("0xs1", CONTRIBUTION_REWARD, "Renamed")
        second = await scheme.fetch_static_state()
        assert first is second
        assert second.name == "ContributionReward"
        assert len(indexer.queries) == 1
        assert not hasattr(first, "can_delegate_call")

    @pytest.mark.asyncio
    async def test_fetch_static_state_uses_constructor_value(self, arc: Arc, indexer: FakeIndexer) -> None:
        state = static_state("GenericScheme")
        assert await Scheme(state, arc).fetch_static_state() is state
        assert indexer.queries == []


class TestCreateProposal:
    @pytest.mark.asyncio
    async def test_unknown_scheme(self, arc: Arc, ledger: FakeLedger) -> None:
        scheme = Scheme(static_state("UnknownScheme"), arc)
        with pytest.raises(UnknownSchemeError, match='Unknown proposal scheme: "UnknownScheme"'):
            await scheme.create_proposal({"beneficiary": ACCOUNT}).send()
        assert ledger.sent == []

    @pytest.mark.asyncio
    async def test_contribution_reward(self, arc: Arc, ledger: FakeLedger) -> None:
        proposal_id = b"\x12" * 32
        ledger.events["NewContributionProposal"] = [{"_proposalId": proposal_id}]
        scheme = Scheme(static_state("ContributionReward"), arc)

        updates = await scheme.create_proposal({
            "beneficiary": ACCOUNT,
            "reputation_reward": 10,
            "native_token_reward": 20,
            "description_hash": "QmHash",
        }).to_list()

        assert [u.state for u in updates] == [
            TransactionState.SENT, TransactionState.MINED, TransactionState.CONFIRMED,
        ]
        proposal = updates[-1].result
        assert isinstance(proposal, Proposal)
        assert proposal.id == "0x" + "12" * 32

        fn_name, args = ledger.sent[0]
        assert fn_name == "proposeContributionReward"
        assert args[0].lower() == DAO
        assert args[1] == "QmHash"
        assert args[2] == 10
        assert args[3] == [20, 0, 0, 0, 1]
        assert args[5].lower() == ACCOUNT

    @pytest.mark.asyncio
    async def test_fetches_name_before_dispatch(self, arc: Arc, indexer: FakeIndexer, ledger: FakeLedger) -> None:
        indexer.responses["controllerScheme"] = scheme_record("0xs2", GENERIC_SCHEME, None)
        ledger.events["NewCallProposal"] = [{"_proposalId": "0xAB" + "00" * 31}]
        proposal = await Scheme("0xs2", arc).create_proposal({"call_data": "0x1234"}).send()
        assert proposal.id == "0xab" + "00" * 31
        assert ledger.sent[0][0] == "proposeCall"


class TestSchemeProposals:
    @pytest.mark.asyncio
    async def test_proposals_filter_by_scheme(self, arc: Arc, indexer: FakeIndexer) -> None:
        indexer.responses["proposals"] = [
            {"id": "0xp1", "dao": {"id": DAO}, "scheme": {"id": "0xs1"}},
        ]
        options = {"where": {"stage": "Queued"}}
        proposals = await Scheme("0xS1", arc).proposals(options).first()
        assert [p.id for p in proposals] == ["0xp1"]
        assert proposals[0].static_state.scheme == "0xs1"
        assert 'scheme: "0xs1"' in indexer.queries[0]
        assert 'stage: "Queued"' in indexer.queries[0]
        assert options == {"where": {"stage": "Queued"}}
