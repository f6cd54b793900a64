"""
Claim Player Rewards Discord Bot - Main Bot Class

Purpose
-------
Discord host for the claim command.

Responsibilities
----------------
- Discord integration (events, commands, presence)
- Global error handling for prefix commands
- Command counters for the shutdown summary

Non-Responsibilities
--------------------
- Loading the data files (delegated to ApplicationContext)
- Claim rules (delegated to claimrewards.modules.rewards.service)

Architecture Notes
------------------
- The claim context is attached after construction because the item
  granter dispatches events through this bot
- Cogs are loaded by ApplicationContext and read their dependencies
  from the bot in `setup`
"""

from __future__ import annotations

from typing import Dict, Optional

import discord
from discord.ext import commands

from claimrewards.core.config.config import Config
from claimrewards.core.logging.logger import LogContext, get_logger
from claimrewards.modules.rewards.messages import Messages
from claimrewards.modules.rewards.service import ClaimContext
from claimrewards.modules.shared.exceptions import ClaimsDomainException
from claimrewards.utils.embed_builder import EmbedBuilder

logger = get_logger(__name__)

class ClaimsBot(commands.Bot):
    """
    Discord bot exposing the `claim` prefix command.

    Dependencies (attached):
    - claim_context: stores, reward config and item granter
    - messages: player-facing message catalogue
    - required_role: Discord role gating the claim permission
    """

    def __init__(
        self,
        messages: Optional[Messages] = None,
        required_role: Optional[str] = None,
    ) -> None:
        intents = discord.Intents.default()
        intents.message_content = True
        intents.members = True
        intents.guilds = True

        super().__init__(
            command_prefix=commands.when_mentioned_or(Config.COMMAND_PREFIX),
            intents=intents,
            case_insensitive=True,
            strip_after_prefix=True,
            description=Config.BOT_DESCRIPTION,
        )

        self.messages = messages or Messages()
        self.required_role = required_role
        self._claim_context: Optional[ClaimContext] = None

        self.bot_ready: bool = False
        self.commands_executed: int = 0
        self.commands_failed: int = 0
        self.errors_by_type: Dict[str, int] = {}

        logger.debug("ClaimsBot initialized")

    # --------------------------------------------------------------- #
    # Dependency Access
    # --------------------------------------------------------------- #

    def attach_claim_context(self, context: ClaimContext) -> None:
        self._claim_context = context

    @property
    def claim_context(self) -> ClaimContext:
        if self._claim_context is None:
            raise RuntimeError("Claim context not attached; call attach_claim_context() first")
        return self._claim_context

    # --------------------------------------------------------------- #
    # Discord Events
    # --------------------------------------------------------------- #

    async def on_ready(self) -> None:
        """Bot is connected and ready to receive events."""
        self.bot_ready = True

        logger.info("=" * 60)
        logger.info("Bot is ONLINE as %s", self.user)
        logger.info("Guilds: %d", len(self.guilds))
        logger.info("Pending allocations: %d", len(self.claim_context.allocations))
        logger.info("=" * 60)

        await self._update_presence()

    async def _update_presence(self) -> None:
        try:
            await self.change_presence(
                activity=discord.Activity(
                    type=discord.ActivityType.watching,
                    name=f"{Config.COMMAND_PREFIX}claim",
                )
            )
        except discord.DiscordException as exc:
            logger.warning(
                "Failed to update presence",
                extra={"error": str(exc), "error_type": type(exc).__name__},
            )

    # --------------------------------------------------------------- #
    # Error Handling - Prefix Commands
    # --------------------------------------------------------------- #

    async def on_command_error(self, ctx: commands.Context, error: Exception) -> None:
        """
        Global error handler for prefix commands.

        Cogs handle their own expected failures; anything reaching here is a
        framework error or an exception a command let escape.
        """
        async with LogContext(
            player_id=ctx.author.id,
            guild_id=ctx.guild.id if ctx.guild else None,
            command=f"prefix:{ctx.command}" if ctx.command else "unknown",
        ):
            if isinstance(error, commands.CommandNotFound):
                return

            self.commands_failed += 1
            original = getattr(error, "original", error)
            error_type = type(original).__name__
            self.errors_by_type[error_type] = self.errors_by_type.get(error_type, 0) + 1

            if isinstance(original, ClaimsDomainException):
                logger.warning(
                    "Domain exception in command handler",
                    extra={"domain_error": original.to_dict()},
                )
                embed = EmbedBuilder.error(
                    title="Error",
                    description=original.message,
                    help_text="If this persists, contact an administrator.",
                )
                await ctx.send(embed=embed)
                return

            if isinstance(error, commands.CheckFailure):
                embed = EmbedBuilder.error(
                    title="Permission Denied",
                    description=self.messages.get("NoPermission"),
                )
                await ctx.send(embed=embed)
                return

            logger.error(
                "Unhandled command error",
                extra={"error": str(error), "error_type": error_type},
                exc_info=error,
            )
            embed = EmbedBuilder.error(
                title="Unexpected Error",
                description="Something went wrong while processing your command.",
                help_text="The issue has been logged.",
            )
            await ctx.send(embed=embed)

    async def on_command_completion(self, ctx: commands.Context) -> None:
        self.commands_executed += 1

    # --------------------------------------------------------------- #
    # Graceful Shutdown
    # --------------------------------------------------------------- #

    async def close(self) -> None:
        """Close the Discord connection. Store flushing belongs to ApplicationContext."""
        total_commands = self.commands_executed + self.commands_failed
        if total_commands > 0:
            logger.info("Final command statistics:")
            logger.info("  Commands Executed: %d", self.commands_executed)
            logger.info("  Commands Failed:   %d", self.commands_failed)

        await super().close()
        logger.info("✓ Bot connection closed")
