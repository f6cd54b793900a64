"""
Base Discord Cog for the claim bot.

Purpose
-------
Shared plumbing for command cogs: standardized user feedback and structured
logging with Discord context.

Responsibilities
----------------
- Standardize user feedback (success/error/info embeds)
- Provide structured logging with Discord context
- Accept dependencies via constructor injection

Non-Responsibilities
--------------------
- Claim logic (delegated to claimrewards.modules.rewards.service)
- Persistence (owned by the stores in the claim context)
- Bot lifecycle (handled by ClaimsBot / ApplicationContext)

Architecture Notes
------------------
- Prefix-only commands
- Layered: Cog -> claim service -> JSON stores
"""

from __future__ import annotations

from typing import Any, Optional

import discord
from discord.ext import commands

from claimrewards.core.logging.logger import LogContext, get_logger
from claimrewards.utils.embed_builder import EmbedBuilder


class BaseCog(commands.Cog):
    """
    Base class for command cogs.

    Attributes
    ----------
    bot : commands.Bot
        Discord bot instance
    cog_name : str
        Name of the cog for logging
    logger : Logger
        Structured logger for this cog
    """

    def __init__(self, bot: commands.Bot, cog_name: str) -> None:
        self.bot = bot
        self.cog_name = cog_name
        self.logger = get_logger(cog_name)

    # ========================================================================
    # USER FEEDBACK UTILITIES
    # ========================================================================

    async def send_error(
        self,
        ctx: commands.Context,
        title: str,
        description: str,
        help_text: Optional[str] = None,
    ) -> None:
        """Send standardized error feedback."""
        embed = EmbedBuilder.error(title=title, description=description, help_text=help_text)
        await self._safe_send(ctx, embed)

    async def send_success(
        self,
        ctx: commands.Context,
        title: str,
        description: str,
        footer: Optional[str] = None,
    ) -> None:
        """Send standardized success feedback."""
        embed = EmbedBuilder.success(title=title, description=description, footer=footer)
        await self._safe_send(ctx, embed)

    async def send_info(
        self,
        ctx: commands.Context,
        title: str,
        description: str,
        footer: Optional[str] = None,
    ) -> None:
        """Send standardized informational feedback."""
        embed = EmbedBuilder.info(title=title, description=description, footer=footer)
        await self._safe_send(ctx, embed)

    async def _safe_send(self, ctx: commands.Context, embed: discord.Embed) -> None:
        """
        Send an embed to the invoking context.

        Uses reply when possible, falls back to send. A failed send is logged,
        never raised: the command's effects have already happened.
        """
        try:
            if ctx.message:
                await ctx.reply(embed=embed, mention_author=False)
            else:
                await ctx.send(embed=embed)
        except discord.DiscordException as exc:
            self.logger.error(
                "Failed to send embed from BaseCog",
                extra={
                    "cog_name": self.cog_name,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                },
                exc_info=True,
            )

    # ========================================================================
    # LOGGING UTILITIES
    # ========================================================================

    def log_command_use(
        self,
        command_name: str,
        user_id: int,
        guild_id: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        """Log command usage with player/guild information attached."""
        with LogContext(
            component=self.cog_name,
            command=command_name,
            player_id=user_id,
            guild_id=guild_id,
        ):
            self.logger.info("Command used", extra=kwargs)

    def log_cog_error(
        self,
        operation: str,
        error: Exception,
        user_id: Optional[int] = None,
        guild_id: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        """
        Log cog-level operational errors with context.

        Args:
            operation: Logical operation name (e.g., "claim")
            error: Exception that occurred
            user_id: Discord user ID if available
            guild_id: Discord guild ID if available
        """
        with LogContext(
            component=self.cog_name,
            operation=operation,
            player_id=user_id,
            guild_id=guild_id,
        ):
            self.logger.error(
                f"{self.cog_name}.{operation} failed: {error}",
                exc_info=error,
                extra=kwargs,
            )
