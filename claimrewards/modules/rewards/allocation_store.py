"""
Allocation store: player id -> pending reward quantity.

Backed by a JSON object file such as ``{"76561198000000001": 50}``. The whole
file is the cache: it is read once at startup and rewritten in full on every
save.

Invariant: every id present holds a positive amount. Claiming deletes the
entry; it is never set to zero.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

from claimrewards.core.config.config import PersistencePolicy
from claimrewards.core.logging.logger import get_logger
from claimrewards.core.storage.json_file import persist, read_json, recover_corrupt
from claimrewards.modules.rewards.models import is_strict_int
from claimrewards.modules.shared.exceptions import AllocationNotFoundError

logger = get_logger(__name__)


class AllocationStore:
    """In-memory allocation table with whole-file JSON persistence."""

    LABEL = "reward data"

    def __init__(
        self,
        path: Union[str, Path],
        allocations: Optional[Dict[str, int]] = None,
        policy: PersistencePolicy = PersistencePolicy.FAIL_OPEN,
    ) -> None:
        self.path = Path(path)
        self.policy = policy
        self._allocations: Dict[str, int] = dict(allocations or {})

    # ------------------------------------------------------------------ #
    # Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(
        cls,
        path: Union[str, Path],
        policy: PersistencePolicy = PersistencePolicy.FAIL_OPEN,
    ) -> "AllocationStore":
        """
        Read the allocation file.

        - absent: start empty and write the empty file immediately
        - unparsable: apply the persistence policy (empty store or raise)
        """
        path = Path(path)

        if not path.exists():
            logger.info("No reward data found, creating a new file.", extra={"path": str(path)})
            store = cls(path, {}, policy)
            store.save()
            return store

        try:
            allocations = cls._parse(read_json(path))
        except (OSError, ValueError) as exc:
            recover_corrupt(path, exc, policy, cls.LABEL)
            return cls(path, {}, policy)

        logger.info(
            "Reward data loaded successfully.",
            extra={"path": str(path), "entries": len(allocations)},
        )
        return cls(path, allocations, policy)

    @staticmethod
    def _parse(raw: Any) -> Dict[str, int]:
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise ValueError(f"expected a JSON object, got {type(raw).__name__}")

        allocations: Dict[str, int] = {}
        for player_id, amount in raw.items():
            if isinstance(amount, float) and amount.is_integer():
                amount = int(amount)
            if not is_strict_int(amount):
                raise ValueError(f"amount for {player_id} is not an integer: {amount!r}")
            if amount <= 0:
                logger.warning(
                    f"Dropping non-positive allocation for {player_id}",
                    extra={"allocation_owner": player_id, "amount": amount},
                )
                continue
            allocations[str(player_id)] = amount
        return allocations

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def lookup(self, player_id: str) -> Optional[int]:
        """Pending amount for the player, or None when there is nothing to claim."""
        return self._allocations.get(player_id)

    def __contains__(self, player_id: object) -> bool:
        return player_id in self._allocations

    def __len__(self) -> int:
        return len(self._allocations)

    def snapshot(self) -> Dict[str, int]:
        """Copy of the current table."""
        return dict(self._allocations)

    # ------------------------------------------------------------------ #
    # Mutation
    # ------------------------------------------------------------------ #

    def consume(self, player_id: str) -> int:
        """
        Remove the player's entry and return the amount it held.

        Must follow a successful lookup in the same locked region.

        Raises:
            AllocationNotFoundError: the player has no entry (store unchanged)
        """
        try:
            return self._allocations.pop(player_id)
        except KeyError:
            raise AllocationNotFoundError(player_id) from None

    # ------------------------------------------------------------------ #
    # Persistence
    # ------------------------------------------------------------------ #

    def save(self) -> bool:
        """Overwrite the backing file with the full table."""
        return persist(self.path, self.snapshot(), self.policy, self.LABEL)

    def __repr__(self) -> str:
        return f"<AllocationStore(path={str(self.path)!r}, entries={len(self)})>"
