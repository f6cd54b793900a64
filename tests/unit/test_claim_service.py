"""
Unit tests for the claim transaction (claim_reward / handle_claim).

Covers the claim lifecycle: a pending allocation is claimed exactly once,
absent players change nothing, grant failures are still recorded, and the
permission gate never mutates state.
"""

import threading

import pytest

from claimrewards.core.config.config import PersistencePolicy
from claimrewards.core.exceptions import ClaimNotSavedError, PersistenceError
from claimrewards.core.logging.logger import LogContext, get_log_context
from claimrewards.modules.rewards.models import ClaimOutcome, ClaimRecord, ClaimStatus
from claimrewards.modules.rewards.permissions import CLAIM_PERMISSION, PermissionRegistry
from claimrewards.modules.rewards.service import ClaimContext, claim_reward, handle_claim
from tests.conftest import P1, P2, read_json_file

pytestmark = pytest.mark.unit

TIMESTAMP = "2024-01-01T00:00:00.0000000Z"


class TestClaimReward:
    """The lookup / grant / consume / record / save sequence."""

    def test_claim_scenario(self, make_context, allocations_path, ledger_path):
        """P1 claims 50 once; the second claim finds nothing."""
        context = make_context(allocations={P1: 50, P2: 10})

        first = claim_reward(context, P1)

        assert first == ClaimOutcome.claimed(50, "blood")
        assert context.allocations.snapshot() == {P2: 10}
        assert context.ledger.records == (ClaimRecord(P1, TIMESTAMP, 50),)
        assert read_json_file(allocations_path) == {P2: 10}
        assert read_json_file(ledger_path) == {
            "claims": [{"steamid": P1, "timestamp": TIMESTAMP, "amount_claimed": 50}]
        }

        second = claim_reward(context, P1)

        assert second.status is ClaimStatus.NOTHING_TO_CLAIM
        assert context.allocations.snapshot() == {P2: 10}
        assert len(context.ledger) == 1

    def test_absent_player_changes_nothing(self, make_context, granter, allocations_path):
        context = make_context(allocations={P2: 10})
        before = allocations_path.read_text(encoding="utf-8")

        outcome = claim_reward(context, P1)

        assert outcome == ClaimOutcome.nothing_to_claim()
        assert context.allocations.snapshot() == {P2: 10}
        assert len(context.ledger) == 0
        assert granter.grants == []
        assert allocations_path.read_text(encoding="utf-8") == before

    @pytest.mark.parametrize("amount", [1, 7, 50, 10_000])
    def test_claim_records_pre_claim_amount(self, make_context, amount):
        context = make_context(allocations={P1: amount})

        outcome = claim_reward(context, P1)

        assert outcome.amount == amount
        assert P1 not in context.allocations
        assert [r.amount_claimed for r in context.ledger.for_player(P1)] == [amount]

    def test_grant_receives_configured_item_and_skin(self, make_context, granter, reward_config):
        context = make_context(allocations={P1: 50})

        claim_reward(context, P1)

        assert len(granter.grants) == 1
        grant = granter.grants[0]
        assert (grant.player_id, grant.item, grant.amount, grant.skin_id) == (
            P1,
            reward_config.item,
            50,
            reward_config.skin_id,
        )

    def test_failed_grant_still_consumes_and_records(self, make_context, granter, caplog):
        granter.succeed = False
        context = make_context(allocations={P1: 50})

        with caplog.at_level("WARNING"):
            outcome = claim_reward(context, P1)

        assert outcome.is_claimed
        assert P1 not in context.allocations
        assert len(context.ledger) == 1
        assert any("grant reported failure" in message for message in caplog.messages)

    def test_save_failure_under_fail_closed_propagates_after_mutation(
        self, make_context, mocker
    ):
        context = make_context(allocations={P1: 50}, policy=PersistencePolicy.FAIL_CLOSED)
        mocker.patch(
            "claimrewards.core.storage.json_file.write_json",
            side_effect=OSError("disk full"),
        )

        with pytest.raises(PersistenceError) as exc_info:
            claim_reward(context, P1)

        assert isinstance(exc_info.value, ClaimNotSavedError)
        assert exc_info.value.outcome == ClaimOutcome.claimed(50, "blood")
        assert P1 not in context.allocations
        assert len(context.ledger) == 1

    def test_save_failure_under_fail_open_still_claims(self, make_context, mocker):
        context = make_context(allocations={P1: 50})
        mocker.patch(
            "claimrewards.core.storage.json_file.write_json",
            side_effect=OSError("disk full"),
        )

        outcome = claim_reward(context, P1)

        assert outcome.is_claimed
        assert P1 not in context.allocations

    def test_transaction_logs_inside_the_command_context(self, make_context, mocker):
        context = make_context(allocations={P1: 50})
        seen = []

        def give_item(*args):
            seen.append(get_log_context())
            return True

        context.granter = mocker.Mock(give_item=mocker.Mock(side_effect=give_item))

        with LogContext(player_id=P1, guild_id=42, command="claim", correlation_id="cmd-1"):
            claim_reward(context, P1)

        assert seen[0]["guild_id"] == "42"
        assert seen[0]["correlation_id"] == "cmd-1"
        assert seen[0]["operation"] == "claim_reward"

    def test_concurrent_claims_grant_once(self, make_context, granter):
        context = make_context(allocations={P1: 50})
        outcomes = []

        def worker():
            outcomes.append(claim_reward(context, P1))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sum(outcome.is_claimed for outcome in outcomes) == 1
        assert len(granter.grants) == 1
        assert len(context.ledger) == 1


class TestHandleClaim:
    """Permission gate in front of the transaction."""

    def test_permitted_player_claims(self, make_context, permission_registry):
        context = make_context(allocations={P1: 50})

        outcome = handle_claim(context, P1, permission_registry)

        assert outcome == ClaimOutcome.claimed(50, "blood")

    def test_missing_permission_mutates_nothing(self, make_context, granter):
        registry = PermissionRegistry()
        registry.register_permission(CLAIM_PERMISSION)
        context = make_context(allocations={P1: 50})

        outcome = handle_claim(context, P1, registry)

        assert outcome.status is ClaimStatus.NO_PERMISSION
        assert context.allocations.lookup(P1) == 50
        assert len(context.ledger) == 0
        assert granter.grants == []

    def test_checker_is_asked_for_claim_permission(self, make_context, mocker):
        checker = mocker.MagicMock()
        checker.user_has_permission.return_value = False
        context = make_context(allocations={P1: 50})

        handle_claim(context, P1, checker)

        checker.user_has_permission.assert_called_once_with(P1, CLAIM_PERMISSION)


class TestClaimContext:
    """Lifecycle of the claim state."""

    def test_from_paths_creates_missing_files(
        self, allocations_path, ledger_path, reward_config, granter
    ):
        context = ClaimContext.from_paths(
            allocations_path, ledger_path, reward_config, granter
        )

        assert len(context.allocations) == 0
        assert len(context.ledger) == 0
        assert allocations_path.exists()
        assert ledger_path.exists()

    def test_shutdown_flushes_both_stores(self, make_context, allocations_path, ledger_path):
        context = make_context(allocations={P1: 50})
        context.allocations.consume(P1)
        context.ledger.append(ClaimRecord(P1, TIMESTAMP, 50))

        context.shutdown()

        assert read_json_file(allocations_path) == {}
        assert len(read_json_file(ledger_path)["claims"]) == 1

    def test_contexts_do_not_share_state(self, tmp_path, reward_config, granter):
        first = ClaimContext.from_paths(
            tmp_path / "a" / "alloc.json", tmp_path / "a" / "ledger.json", reward_config, granter
        )
        second = ClaimContext.from_paths(
            tmp_path / "b" / "alloc.json", tmp_path / "b" / "ledger.json", reward_config, granter
        )

        assert first.lock is not second.lock
        assert first.allocations is not second.allocations
