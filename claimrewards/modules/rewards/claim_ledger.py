"""
Claim ledger: append-only history of every claim.

File shape::

    {
      "claims": [
        {"steamid": "...", "timestamp": "2024-01-01T00:00:00.0000000Z", "amount_claimed": 50}
      ]
    }

Records are only ever appended in memory; a save rewrites the entire
sequence.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional, Tuple, Union

from claimrewards.core.config.config import PersistencePolicy
from claimrewards.core.logging.logger import get_logger
from claimrewards.core.storage.json_file import persist, read_json, recover_corrupt
from claimrewards.modules.rewards.models import ClaimRecord
from claimrewards.modules.shared.exceptions import ValidationError

logger = get_logger(__name__)


class ClaimLedger:
    """In-memory claim history with whole-file JSON persistence."""

    LABEL = "claimed rewards data"

    def __init__(
        self,
        path: Union[str, Path],
        records: Optional[Iterable[ClaimRecord]] = None,
        policy: PersistencePolicy = PersistencePolicy.FAIL_OPEN,
    ) -> None:
        self.path = Path(path)
        self.policy = policy
        self._records: List[ClaimRecord] = list(records or [])

    @classmethod
    def load(
        cls,
        path: Union[str, Path],
        policy: PersistencePolicy = PersistencePolicy.FAIL_OPEN,
    ) -> "ClaimLedger":
        """
        Read the ledger file.

        Same recovery rules as the allocation store: an absent file is
        created empty, an unparsable one follows the persistence policy.
        """
        path = Path(path)

        if not path.exists():
            logger.info(
                "No claimed rewards data found, creating a new file.",
                extra={"path": str(path)},
            )
            ledger = cls(path, [], policy)
            ledger.save()
            return ledger

        try:
            records = cls._parse(read_json(path))
        except (OSError, ValueError, ValidationError) as exc:
            recover_corrupt(path, exc, policy, cls.LABEL)
            return cls(path, [], policy)

        logger.info(
            "Claimed rewards data loaded successfully.",
            extra={"path": str(path), "records": len(records)},
        )
        return cls(path, records, policy)

    @staticmethod
    def _parse(raw: Any) -> List[ClaimRecord]:
        if raw is None:
            return []
        if not isinstance(raw, dict):
            raise ValueError(f"expected a JSON object, got {type(raw).__name__}")

        claims = raw.get("claims")
        if claims is None:
            return []
        if not isinstance(claims, list):
            raise ValueError(f"'claims' must be a list, got {type(claims).__name__}")

        return [ClaimRecord.from_dict(item) for item in claims]

    def append(self, record: ClaimRecord) -> None:
        """Add a record in memory. Does not write to disk."""
        self._records.append(record)

    @property
    def records(self) -> Tuple[ClaimRecord, ...]:
        return tuple(self._records)

    def for_player(self, player_id: str) -> List[ClaimRecord]:
        return [record for record in self._records if record.steamid == player_id]

    def total_claimed(self, player_id: str) -> int:
        return sum(record.amount_claimed for record in self.for_player(player_id))

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ClaimRecord]:
        return iter(tuple(self._records))

    def to_document(self) -> dict:
        return {"claims": [record.to_dict() for record in self._records]}

    def save(self) -> bool:
        """Overwrite the backing file with the entire history."""
        return persist(self.path, self.to_document(), self.policy, self.LABEL)

    def __repr__(self) -> str:
        return f"<ClaimLedger(path={str(self.path)!r}, records={len(self)})>"
