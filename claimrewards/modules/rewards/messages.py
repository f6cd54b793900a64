"""
Player-facing message catalogue.

Keys match the outcome names; positional placeholders follow str.format.
Hosts with their own localization pass overrides per language.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional

from claimrewards.modules.rewards.models import ClaimOutcome, ClaimStatus

CLAIM_SUCCESS = "ClaimSuccess"
NOTHING_TO_CLAIM = "NothingToClaim"
NO_PERMISSION = "NoPermission"

DEFAULT_MESSAGES: Dict[str, str] = {
    CLAIM_SUCCESS: "You have claimed {0} {1}.",
    NOTHING_TO_CLAIM: "Nothing to claim.",
    NO_PERMISSION: "You do not have permission to use this command.",
}

_STATUS_KEYS = {
    ClaimStatus.CLAIMED: CLAIM_SUCCESS,
    ClaimStatus.NOTHING_TO_CLAIM: NOTHING_TO_CLAIM,
    ClaimStatus.NO_PERMISSION: NO_PERMISSION,
}


class Messages:
    def __init__(self, overrides: Optional[Mapping[str, str]] = None) -> None:
        self._messages: Dict[str, str] = {**DEFAULT_MESSAGES, **(overrides or {})}

    def get(self, key: str, *args: object) -> str:
        """Formatted message for `key`; unknown keys render as the key itself."""
        template = self._messages.get(key)
        if template is None:
            return key
        return template.format(*args)

    def for_outcome(self, outcome: ClaimOutcome) -> str:
        key = _STATUS_KEYS[outcome.status]
        if outcome.status is ClaimStatus.CLAIMED:
            return self.get(key, outcome.amount, outcome.item)
        return self.get(key)
