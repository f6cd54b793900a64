"""
Integration tests: claim state survives a process restart.

Each "restart" builds a fresh ClaimContext from the same files, the way the
bot does at startup.
"""

import pytest

from claimrewards.core.config.config import PersistencePolicy
from claimrewards.core.exceptions import CorruptDataError
from claimrewards.modules.rewards.allocation_store import AllocationStore
from claimrewards.modules.rewards.claim_ledger import ClaimLedger
from claimrewards.modules.rewards.models import ClaimRecord, ClaimStatus
from claimrewards.modules.rewards.service import claim_reward
from tests.conftest import P1, P2, read_json_file, write_json_file

pytestmark = pytest.mark.integration


class TestRestart:
    def test_claimed_allocation_stays_claimed_after_restart(self, make_context):
        first_run = make_context(allocations={P1: 50, P2: 10})
        assert claim_reward(first_run, P1).is_claimed

        second_run = make_context()

        assert claim_reward(second_run, P1).status is ClaimStatus.NOTHING_TO_CLAIM
        assert second_run.allocations.snapshot() == {P2: 10}
        assert [r.steamid for r in second_run.ledger] == [P1]

    def test_ledger_accumulates_across_restarts(self, make_context):
        run = make_context(allocations={P1: 50})
        claim_reward(run, P1)

        write_json_file(run.allocations.path, {P1: 5, P2: 10})
        run = make_context()
        claim_reward(run, P1)
        claim_reward(run, P2)

        ledger = ClaimLedger.load(run.ledger.path)
        assert [(r.steamid, r.amount_claimed) for r in ledger] == [(P1, 50), (P1, 5), (P2, 10)]
        assert ledger.total_claimed(P1) == 55

    def test_store_round_trip(self, allocations_path, ledger_path):
        AllocationStore(allocations_path, {P1: 50, P2: 10}).save()
        records = [
            ClaimRecord(P1, "2024-01-01T00:00:00.0000000Z", 50),
            ClaimRecord(P2, "2024-01-02T00:00:00.0000000Z", 10),
        ]
        ClaimLedger(ledger_path, records).save()

        assert AllocationStore.load(allocations_path).snapshot() == {P1: 50, P2: 10}
        assert list(ClaimLedger.load(ledger_path)) == records


class TestCorruptRecovery:
    def test_truncated_allocation_file_starts_empty_and_is_overwritten(
        self, make_context, allocations_path
    ):
        allocations_path.write_text('{"76561198000000001": 5', encoding="utf-8")

        context = make_context()

        assert len(context.allocations) == 0
        assert claim_reward(context, P1).status is ClaimStatus.NOTHING_TO_CLAIM

        context.shutdown()
        assert read_json_file(allocations_path) == {}

    def test_corrupt_ledger_keeps_serving_claims(self, make_context, ledger_path):
        ledger_path.write_text("not json", encoding="utf-8")

        context = make_context(allocations={P1: 50})
        outcome = claim_reward(context, P1)

        assert outcome.is_claimed
        assert len(read_json_file(ledger_path)["claims"]) == 1

    def test_fail_closed_refuses_to_start_on_corrupt_file(self, make_context, allocations_path):
        allocations_path.write_text("{", encoding="utf-8")

        with pytest.raises(CorruptDataError):
            make_context(policy=PersistencePolicy.FAIL_CLOSED)
