# claimrewards/utils/embed_builder.py
"""
Factory for standardized Discord embeds used by the claim command.

Features:
- Consistent colors (from Config.EMBED_COLOR_*)
- Automatic Discord limits enforcement
- Claim-specific builders (reward receipt, claim history)

Integration:
- Colors are read from Config at call time so tests can patch them
- Enforces Discord embed limits (title, description, footer, fields)
"""

from datetime import datetime, timezone
from typing import Optional, Sequence

import discord

from claimrewards.core.config.config import Config
from claimrewards.modules.rewards.models import ClaimRecord

EMBED_TITLE_LIMIT = 256
EMBED_DESCRIPTION_LIMIT = 4096
EMBED_FIELD_LIMIT = 1024
EMBED_FOOTER_LIMIT = 2048
EMBED_MAX_FIELDS = 25


def truncate_text(text: str, limit: int, suffix: str = "...") -> str:
    """Truncate text to fit within a Discord limit."""
    if len(text) <= limit:
        return text
    return text[:limit - len(suffix)] + suffix


class EmbedBuilder:
    """
    Factory for standardized Discord embeds.

    All embeds carry a UTC timestamp and respect Discord limits.
    """

    @staticmethod
    def _base_embed(
        title: str,
        description: str,
        color: int,
        footer: Optional[str] = None
    ) -> discord.Embed:
        embed = discord.Embed(
            title=truncate_text(title, EMBED_TITLE_LIMIT),
            description=truncate_text(description, EMBED_DESCRIPTION_LIMIT),
            color=color,
            timestamp=datetime.now(timezone.utc)
        )

        if footer:
            embed.set_footer(text=truncate_text(footer, EMBED_FOOTER_LIMIT))

        return embed

    # =========================================================================
    # CORE TYPES
    # =========================================================================

    @staticmethod
    def primary(
        title: str,
        description: str,
        footer: Optional[str] = None
    ) -> discord.Embed:
        """Default embed for neutral/system messages."""
        return EmbedBuilder._base_embed(
            title, description, Config.EMBED_COLOR_PRIMARY, footer
        )

    @staticmethod
    def success(
        title: str,
        description: str,
        footer: Optional[str] = None
    ) -> discord.Embed:
        """Positive actions (claimed rewards)."""
        return EmbedBuilder._base_embed(
            title, description, Config.EMBED_COLOR_SUCCESS, footer
        )

    @staticmethod
    def error(
        title: str,
        description: str,
        help_text: Optional[str] = None
    ) -> discord.Embed:
        """
        Error embeds with optional help text.

        Args:
            title: Error title
            description: Error description
            help_text: Optional suggestion for the user
        """
        desc = description
        if help_text:
            desc += f"\n\n💡 **Help:** {help_text}"
        return EmbedBuilder._base_embed(title, desc, Config.EMBED_COLOR_ERROR)

    @staticmethod
    def warning(
        title: str,
        description: str,
        footer: Optional[str] = None
    ) -> discord.Embed:
        """For recoverable issues or alerts."""
        return EmbedBuilder._base_embed(
            title, description, Config.EMBED_COLOR_WARNING, footer
        )

    @staticmethod
    def info(
        title: str,
        description: str,
        footer: Optional[str] = None
    ) -> discord.Embed:
        """Informational messages."""
        return EmbedBuilder._base_embed(
            title, description, Config.EMBED_COLOR_INFO, footer
        )

    # =========================================================================
    # CLAIM TYPES
    # =========================================================================

    @staticmethod
    def claim_history(
        player_name: str,
        records: Sequence[ClaimRecord],
        total: int,
    ) -> discord.Embed:
        """
        Recent claims for one player, newest first.

        Shows at most EMBED_MAX_FIELDS records; the footer carries the
        lifetime total.
        """
        if not records:
            return EmbedBuilder.info(
                f"Claim history: {player_name}",
                "No claims recorded yet.",
            )

        embed = EmbedBuilder.primary(
            f"Claim history: {player_name}",
            f"{len(records)} claim(s) recorded.",
            footer=f"Total claimed: {total}",
        )
        newest = list(reversed(records))[:EMBED_MAX_FIELDS]
        for record in newest:
            embed.add_field(
                name=truncate_text(record.timestamp, EMBED_TITLE_LIMIT),
                value=truncate_text(str(record.amount_claimed), EMBED_FIELD_LIMIT),
                inline=False,
            )
        return embed
