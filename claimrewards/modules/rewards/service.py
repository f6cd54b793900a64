"""
Claim transaction.

Purpose
-------
Turn a player's pending allocation into a granted item plus a ledger record.

Responsibilities
----------------
- Hold the per-process claim state (`ClaimContext`)
- Run the lookup / grant / consume / record / save sequence
- Gate the command on the claim permission

Design
------
- Synchronous: nothing here awaits, so on the bot event loop the whole
  transaction completes before another command is dispatched
- The context lock covers the whole sequence: lookup+consume stay atomic
  and saves never interleave on the shared temp files
- No rollback: a grant that reports failure still consumes the allocation,
  and under fail_closed a save error propagates after the in-memory change
  as `ClaimNotSavedError`, carrying the outcome the player already received
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Union

from claimrewards.core.config.config import PersistencePolicy
from claimrewards.core.config.reward_config import RewardConfig
from claimrewards.core.exceptions import ClaimNotSavedError, PersistenceError
from claimrewards.core.logging.logger import LogContext, get_logger
from claimrewards.modules.rewards.allocation_store import AllocationStore
from claimrewards.modules.rewards.claim_ledger import ClaimLedger
from claimrewards.modules.rewards.granter import ItemGranter
from claimrewards.modules.rewards.models import ClaimOutcome, ClaimRecord, utc_now
from claimrewards.modules.rewards.permissions import CLAIM_PERMISSION, PermissionChecker

logger = get_logger(__name__)


@dataclass
class ClaimContext:
    """Everything a claim needs, built once at startup."""

    reward_config: RewardConfig
    allocations: AllocationStore
    ledger: ClaimLedger
    granter: ItemGranter
    lock: threading.Lock = field(default_factory=threading.Lock)
    clock: Callable[[], datetime] = utc_now

    @classmethod
    def from_paths(
        cls,
        allocations_path: Union[str, Path],
        ledger_path: Union[str, Path],
        reward_config: RewardConfig,
        granter: ItemGranter,
        policy: PersistencePolicy = PersistencePolicy.FAIL_OPEN,
    ) -> "ClaimContext":
        return cls(
            reward_config=reward_config,
            allocations=AllocationStore.load(allocations_path, policy),
            ledger=ClaimLedger.load(ledger_path, policy),
            granter=granter,
        )

    def shutdown(self) -> None:
        """Flush both stores one last time."""
        with self.lock:
            self.allocations.save()
            self.ledger.save()
        logger.info(
            "Claim state flushed",
            extra={"allocations": len(self.allocations), "claims": len(self.ledger)},
        )


def claim_reward(context: ClaimContext, player_id: str) -> ClaimOutcome:
    """
    Claim the player's whole pending allocation.

    Returns NOTHING_TO_CLAIM (no side effects) when the player has no entry,
    otherwise CLAIMED with the amount and item handed out. Under fail_closed a
    failed save raises ClaimNotSavedError after the item was granted.
    """
    item = context.reward_config.item
    skin_id = context.reward_config.skin_id

    with LogContext(player_id=player_id, command="claim", operation="claim_reward"):
        with context.lock:
            amount = context.allocations.lookup(player_id)
            if amount is None:
                logger.debug("Nothing to claim")
                return ClaimOutcome.nothing_to_claim()

            granted = context.granter.give_item(player_id, item, amount, skin_id)
            if not granted:
                logger.warning(
                    f"Item grant reported failure for {amount} {item}; claim recorded anyway",
                    extra={"reward_item": item, "amount": amount, "skin_id": skin_id},
                )
            context.allocations.consume(player_id)
            context.ledger.append(ClaimRecord.create(player_id, amount, context.clock()))
            try:
                context.allocations.save()
                context.ledger.save()
            except PersistenceError as exc:
                raise ClaimNotSavedError(exc, ClaimOutcome.claimed(amount, item)) from exc

        logger.info(
            f"Player claimed {amount} {item}",
            extra={"reward_item": item, "amount": amount},
        )
        return ClaimOutcome.claimed(amount, item)


def handle_claim(
    context: ClaimContext,
    player_id: str,
    permissions: PermissionChecker,
) -> ClaimOutcome:
    """Command entry: permission gate, then `claim_reward`."""
    if not permissions.user_has_permission(player_id, CLAIM_PERMISSION):
        with LogContext(player_id=player_id, command="claim", operation="handle_claim"):
            logger.info(
                "Claim denied: missing permission",
                extra={"permission": CLAIM_PERMISSION},
            )
        return ClaimOutcome.no_permission()
    return claim_reward(context, player_id)
