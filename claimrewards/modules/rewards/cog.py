"""
Rewards Cog - Discord commands for claiming pending rewards
===========================================================

Commands:
- claim: hand out the caller's whole pending allocation
- claims: show the caller's claim history
"""

import time
from typing import Optional

from discord.ext import commands

from claimrewards.bot.base_cog import BaseCog
from claimrewards.core.exceptions import ClaimNotSavedError
from claimrewards.core.logging.logger import LogContext
from claimrewards.modules.rewards.messages import Messages
from claimrewards.modules.rewards.models import ClaimStatus
from claimrewards.modules.rewards.permissions import RolePermissionChecker
from claimrewards.modules.rewards.service import ClaimContext, handle_claim
from claimrewards.utils.embed_builder import EmbedBuilder


class RewardsCog(BaseCog):
    """
    Reward claiming for players.

    Pending rewards are loaded from the allocation file at startup. A claim
    grants the whole amount at once, removes the allocation and records the
    claim in the ledger.
    """

    def __init__(
        self,
        bot: commands.Bot,
        claim_context: ClaimContext,
        messages: Optional[Messages] = None,
        required_role: Optional[str] = None,
    ):
        super().__init__(bot, "RewardsCog")
        self.claim_context = claim_context
        self.messages = messages or Messages()
        self.required_role = required_role

    @commands.command(
        name="claim",
        description="Claim your pending player rewards",
    )
    async def claim(self, ctx: commands.Context):
        """Claim every pending reward in one go."""
        start_time = time.perf_counter()
        player_id = str(ctx.author.id)
        guild_id = ctx.guild.id if ctx.guild else None

        try:
            permissions = RolePermissionChecker.for_member(ctx.author, self.required_role)
            with LogContext(player_id=player_id, guild_id=guild_id, command="claim"):
                try:
                    outcome = handle_claim(self.claim_context, player_id, permissions)
                except ClaimNotSavedError as e:
                    # The item is already delivered; only the files are behind
                    self.log_cog_error(
                        "claim",
                        e,
                        user_id=ctx.author.id,
                        guild_id=guild_id,
                        persisted=False,
                    )
                    outcome = e.outcome

            message = self.messages.for_outcome(outcome)
            if outcome.status is ClaimStatus.CLAIMED:
                await self.send_success(ctx, "Reward Claimed", message)
            elif outcome.status is ClaimStatus.NOTHING_TO_CLAIM:
                await self.send_info(ctx, "No Rewards", message)
            else:
                await self.send_error(ctx, "Permission Denied", message)

            latency = (time.perf_counter() - start_time) * 1000
            self.log_command_use(
                "claim",
                ctx.author.id,
                guild_id=guild_id,
                latency_ms=round(latency, 2),
                outcome=outcome.status.value,
                amount=outcome.amount,
            )

        except Exception as e:
            latency = (time.perf_counter() - start_time) * 1000
            self.log_cog_error(
                "claim",
                e,
                user_id=ctx.author.id,
                guild_id=guild_id,
                latency_ms=round(latency, 2),
            )
            await self.send_error(
                ctx,
                "Claim Failed",
                "An unexpected error occurred while claiming your rewards.",
                help_text="Please try again in a moment.",
            )

    @commands.command(
        name="claims",
        aliases=["claimhistory"],
        description="Show your claim history",
    )
    async def claims(self, ctx: commands.Context):
        """List the caller's recorded claims."""
        player_id = str(ctx.author.id)
        ledger = self.claim_context.ledger

        embed = EmbedBuilder.claim_history(
            ctx.author.display_name,
            ledger.for_player(player_id),
            ledger.total_claimed(player_id),
        )
        await self._safe_send(ctx, embed)
        self.log_command_use(
            "claims",
            ctx.author.id,
            guild_id=ctx.guild.id if ctx.guild else None,
        )


async def setup(bot: commands.Bot):
    await bot.add_cog(
        RewardsCog(
            bot,
            bot.claim_context,
            messages=bot.messages,
            required_role=bot.required_role,
        )
    )
