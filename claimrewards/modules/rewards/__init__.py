"""
Reward claiming.

- AllocationStore / ClaimLedger: JSON-backed state
- claim_reward / handle_claim: the claim transaction
- RewardsCog (in .cog): the Discord command surface, loaded as an extension
"""

from claimrewards.modules.rewards.allocation_store import AllocationStore
from claimrewards.modules.rewards.claim_ledger import ClaimLedger
from claimrewards.modules.rewards.granter import (
    DispatchItemGranter,
    ItemGranter,
    RecordingItemGranter,
)
from claimrewards.modules.rewards.messages import DEFAULT_MESSAGES, Messages
from claimrewards.modules.rewards.models import (
    ClaimOutcome,
    ClaimRecord,
    ClaimStatus,
    format_timestamp,
)
from claimrewards.modules.rewards.permissions import (
    CLAIM_PERMISSION,
    PermissionChecker,
    PermissionRegistry,
    RolePermissionChecker,
)
from claimrewards.modules.rewards.service import ClaimContext, claim_reward, handle_claim

__all__ = [
    "AllocationStore",
    "ClaimLedger",
    "ClaimRecord",
    "ClaimStatus",
    "ClaimOutcome",
    "format_timestamp",
    "ClaimContext",
    "claim_reward",
    "handle_claim",
    "ItemGranter",
    "DispatchItemGranter",
    "RecordingItemGranter",
    "Messages",
    "DEFAULT_MESSAGES",
    "CLAIM_PERMISSION",
    "PermissionChecker",
    "PermissionRegistry",
    "RolePermissionChecker",
]
