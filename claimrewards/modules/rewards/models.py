"""
Reward claim value types.

- ClaimRecord: one immutable line of the claim ledger
- ClaimStatus / ClaimOutcome: what a claim command produced
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from claimrewards.modules.shared.exceptions import ValidationError


def format_timestamp(moment: datetime) -> str:
    """
    Render a UTC round-trip timestamp with seven fractional digits.

    >>> format_timestamp(datetime(2024, 1, 1, tzinfo=timezone.utc))
    '2024-01-01T00:00:00.0000000Z'
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.%f") + "0Z"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def is_strict_int(value: Any) -> bool:
    """JSON integers only; bools are ints in Python but not amounts."""
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class ClaimRecord:
    """A single claim as written to the ledger file."""

    steamid: str
    timestamp: str
    amount_claimed: int

    def __post_init__(self) -> None:
        if not isinstance(self.steamid, str) or not self.steamid:
            raise ValidationError("steamid", "must be a non-empty string")
        if not isinstance(self.timestamp, str) or not self.timestamp:
            raise ValidationError("timestamp", "must be a non-empty string")
        if not is_strict_int(self.amount_claimed) or self.amount_claimed <= 0:
            raise ValidationError(
                "amount_claimed",
                f"must be a positive integer, got {self.amount_claimed!r}",
            )

    @classmethod
    def create(
        cls,
        player_id: str,
        amount: int,
        claimed_at: Optional[datetime] = None,
    ) -> "ClaimRecord":
        return cls(
            steamid=player_id,
            timestamp=format_timestamp(claimed_at or utc_now()),
            amount_claimed=amount,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClaimRecord":
        if not isinstance(data, dict):
            raise ValidationError("claim", f"expected an object, got {type(data).__name__}")
        return cls(
            steamid=data.get("steamid"),
            timestamp=data.get("timestamp"),
            amount_claimed=data.get("amount_claimed"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "steamid": self.steamid,
            "timestamp": self.timestamp,
            "amount_claimed": self.amount_claimed,
        }


class ClaimStatus(Enum):
    CLAIMED = "claimed"
    NOTHING_TO_CLAIM = "nothing_to_claim"
    NO_PERMISSION = "no_permission"


@dataclass(frozen=True)
class ClaimOutcome:
    """
    Result of a claim command.

    `amount` and `item` are only set for CLAIMED.
    """

    status: ClaimStatus
    amount: int = 0
    item: Optional[str] = None

    @classmethod
    def claimed(cls, amount: int, item: str) -> "ClaimOutcome":
        return cls(ClaimStatus.CLAIMED, amount, item)

    @classmethod
    def nothing_to_claim(cls) -> "ClaimOutcome":
        return cls(ClaimStatus.NOTHING_TO_CLAIM)

    @classmethod
    def no_permission(cls) -> "ClaimOutcome":
        return cls(ClaimStatus.NO_PERMISSION)

    @property
    def is_claimed(self) -> bool:
        return self.status is ClaimStatus.CLAIMED
