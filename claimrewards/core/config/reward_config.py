"""
Reward item configuration.

A small JSON file naming the item handed out by a claim and its skin::

    {
      "RewardItem": "blood",
      "RewardSkinID": 0
    }

Loaded once at startup. A missing, empty or malformed file is replaced with
the defaults (and the defaults are written back), so the process always
starts with a usable configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

from claimrewards.core.config.config import PersistencePolicy
from claimrewards.core.logging.logger import get_logger
from claimrewards.core.storage.json_file import persist, read_json

logger = get_logger(__name__)

DEFAULT_REWARD_ITEM = "blood"
DEFAULT_SKIN_ID = 0


@dataclass(frozen=True)
class RewardConfig:
    """Item identifier and skin id for granted rewards. Skin 0 means no skin."""

    item: str = DEFAULT_REWARD_ITEM
    skin_id: int = DEFAULT_SKIN_ID

    def __post_init__(self) -> None:
        if not isinstance(self.item, str) or not self.item.strip():
            raise ValueError("RewardItem must be a non-empty string")
        if (
            not isinstance(self.skin_id, int)
            or isinstance(self.skin_id, bool)
            or self.skin_id < 0
        ):
            raise ValueError(f"RewardSkinID must be a non-negative integer, got {self.skin_id!r}")

    @property
    def has_skin(self) -> bool:
        return self.skin_id != 0

    @classmethod
    def from_dict(cls, data: Any) -> "RewardConfig":
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        return cls(
            item=data.get("RewardItem", DEFAULT_REWARD_ITEM),
            skin_id=data.get("RewardSkinID", DEFAULT_SKIN_ID),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"RewardItem": self.item, "RewardSkinID": self.skin_id}

    @classmethod
    def load(cls, path: Union[str, Path]) -> "RewardConfig":
        """Read the config file, regenerating defaults when it is unusable."""
        path = Path(path)

        if not path.exists():
            logger.warning("Generating new configuration file...", extra={"path": str(path)})
            return cls._load_default(path)

        try:
            raw = read_json(path)
        except (OSError, ValueError) as exc:
            logger.warning(
                f"Error loading config: {exc}, generating default config...",
                extra={"path": str(path)},
            )
            return cls._load_default(path)

        if raw is None:
            logger.warning(
                "Config file was empty, creating new defaults...",
                extra={"path": str(path)},
            )
            return cls._load_default(path)

        try:
            config = cls.from_dict(raw)
        except ValueError as exc:
            logger.warning(
                f"Error loading config: {exc}, generating default config...",
                extra={"path": str(path)},
            )
            return cls._load_default(path)

        logger.info(
            "Reward configuration loaded.",
            extra={"reward_item": config.item, "reward_skin_id": config.skin_id},
        )
        return config

    @classmethod
    def _load_default(cls, path: Path) -> "RewardConfig":
        config = cls()
        config.save(path)
        return config

    def save(self, path: Union[str, Path]) -> bool:
        saved = persist(Path(path), self.to_dict(), PersistencePolicy.FAIL_OPEN, "configuration")
        if saved:
            logger.info("Configuration saved successfully.", extra={"path": str(path)})
        return saved
