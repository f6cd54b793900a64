"""
Item grant collaborators.

The claim transaction hands the reward to whatever owns the player's
inventory through `ItemGranter.give_item`. Its return value is informational
only: a False grant is logged but the claim still goes through.
"""

from __future__ import annotations

from typing import List, NamedTuple, Protocol, runtime_checkable

from claimrewards.core.logging.logger import get_logger

logger = get_logger(__name__)

REWARD_GRANTED_EVENT = "reward_item_granted"


@runtime_checkable
class ItemGranter(Protocol):
    def give_item(self, player_id: str, item: str, amount: int, skin_id: int) -> bool:
        ...


class GrantedItem(NamedTuple):
    player_id: str
    item: str
    amount: int
    skin_id: int


class DispatchItemGranter:
    """
    Discord host granter.

    Dispatches the custom ``reward_item_granted`` bot event so the game
    integration (any cog with an ``on_reward_item_granted`` listener) can
    deliver the item.
    """

    def __init__(self, bot) -> None:
        self.bot = bot

    def give_item(self, player_id: str, item: str, amount: int, skin_id: int) -> bool:
        self.bot.dispatch(REWARD_GRANTED_EVENT, player_id, item, amount, skin_id)
        logger.info(
            f"Dispatched {amount} {item} to {player_id}",
            extra={"reward_item": item, "amount": amount, "skin_id": skin_id},
        )
        return True


class RecordingItemGranter:
    """Keeps every grant in memory. Used by tests and dry runs."""

    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.grants: List[GrantedItem] = []

    def give_item(self, player_id: str, item: str, amount: int, skin_id: int) -> bool:
        self.grants.append(GrantedItem(player_id, item, amount, skin_id))
        return self.succeed
