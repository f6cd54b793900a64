"""
Discord integration layer.

Exposes the bot class and the base cog used by feature cogs.

Example
-------
    from claimrewards.bot import ClaimsBot

    bot = ClaimsBot(required_role="Claimers")
"""

from __future__ import annotations

from claimrewards.bot.base_cog import BaseCog
from claimrewards.bot.claims_bot import ClaimsBot

__all__ = [
    "BaseCog",
    "ClaimsBot",
]
