"""
Application Context (Kernel) - Claim Player Rewards Orchestration
=================================================================

Purpose
-------
Build the claim state and the bot in dependency order, and tear them down in
reverse.

Responsibilities
----------------
- Load the reward configuration
- Create ClaimsBot
- Load the allocation store and claim ledger into a ClaimContext
- Explicitly register and load the feature cogs
- Flush both stores on shutdown
- Structured lifecycle logging with timing

Non-Responsibilities
--------------------
- Claim rules (delegated to claimrewards.modules.rewards.service)
- Bot event handling (delegated to ClaimsBot)

Initialization Order:
    1. RewardConfig
    2. ClaimsBot
    3. ClaimContext (allocations, ledger, granter bound to the bot)
    4. Feature cogs

Shutdown Order (Reverse):
    1. ClaimsBot.close()
    2. ClaimContext.shutdown() (final flush)
"""

from __future__ import annotations

import time
from typing import Optional

from claimrewards.bot.claims_bot import ClaimsBot
from claimrewards.core.config.config import Config
from claimrewards.core.config.reward_config import RewardConfig
from claimrewards.core.logging.logger import get_logger
from claimrewards.modules.rewards.granter import DispatchItemGranter
from claimrewards.modules.rewards.messages import Messages
from claimrewards.modules.rewards.service import ClaimContext

logger = get_logger(__name__)

FEATURE_COGS = [
    "claimrewards.modules.rewards.cog",
]


class ApplicationContext:
    """
    Kernel for claim state and bot lifecycle.

    Usage:
        context = ApplicationContext()
        await context.initialize()
        await context.run_bot()  # Blocks until shutdown
    """

    def __init__(self, messages: Optional[Messages] = None) -> None:
        self._messages = messages
        self._reward_config: Optional[RewardConfig] = None
        self._bot: Optional[ClaimsBot] = None
        self._claim_context: Optional[ClaimContext] = None
        self._initialized: bool = False

        logger.debug("ApplicationContext created")

    # ========================================================================
    # INITIALIZATION
    # ========================================================================

    async def initialize(self) -> None:
        """
        Build everything in dependency order.

        Raises:
            RuntimeError: If already initialized or initialization fails
        """
        if self._initialized:
            raise RuntimeError("ApplicationContext already initialized")

        logger.info("=" * 70)
        logger.info("APPLICATION CONTEXT INITIALIZATION")
        logger.info("=" * 70)

        start_time = time.perf_counter()

        try:
            config_start = time.perf_counter()
            self._reward_config = RewardConfig.load(Config.reward_config_path())
            config_time = (time.perf_counter() - config_start) * 1000
            logger.info("✓ Reward configuration loaded (%.2fms)", config_time)

            self._bot = ClaimsBot(messages=self._messages, required_role=Config.CLAIM_ROLE)
            logger.info("✓ ClaimsBot created")

            stores_start = time.perf_counter()
            self._claim_context = ClaimContext.from_paths(
                Config.allocations_path(),
                Config.ledger_path(),
                reward_config=self._reward_config,
                granter=DispatchItemGranter(self._bot),
                policy=Config.PERSISTENCE_POLICY,
            )
            self._bot.attach_claim_context(self._claim_context)
            stores_time = (time.perf_counter() - stores_start) * 1000
            logger.info(
                "✓ Claim data loaded (%.2fms): %d allocations, %d claims",
                stores_time,
                len(self._claim_context.allocations),
                len(self._claim_context.ledger),
            )

            cogs_start = time.perf_counter()
            await self._load_cogs()
            cogs_time = (time.perf_counter() - cogs_start) * 1000
            logger.info("✓ Feature cogs loaded (%.2fms)", cogs_time)

            self._initialized = True
            total_time = (time.perf_counter() - start_time) * 1000

            logger.info("=" * 70)
            logger.info("✓ Application context initialized successfully")
            logger.info("  Total time: %.2fms", total_time)
            logger.info("=" * 70)

        except Exception as exc:
            logger.critical(
                "Application context initialization failed",
                extra={
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                },
                exc_info=True,
            )
            await self._emergency_shutdown()
            raise RuntimeError("Failed to initialize application context") from exc

    async def _load_cogs(self) -> None:
        """
        Load every registered cog. The rewards cog is the whole bot, so a
        failure here aborts startup.
        """
        if not self._bot:
            raise RuntimeError("Cannot load cogs: bot not initialized")

        for cog_module_path in FEATURE_COGS:
            cog_start = time.perf_counter()
            await self._bot.load_extension(cog_module_path)
            logger.debug(
                "  ✓ %s loaded (%.2fms)",
                cog_module_path,
                (time.perf_counter() - cog_start) * 1000,
            )

    # ========================================================================
    # BOT EXECUTION
    # ========================================================================

    async def run_bot(self) -> None:
        """
        Run the Discord bot (blocks until bot stops).

        Raises:
            RuntimeError: If not initialized
        """
        if not self._initialized or self._bot is None:
            raise RuntimeError("Cannot run bot: ApplicationContext not initialized")

        logger.info("Starting Discord bot...")
        try:
            await self._bot.start(Config.DISCORD_TOKEN)
        except Exception as exc:
            logger.critical(
                "Bot execution failed",
                extra={
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                },
                exc_info=True,
            )
            raise

    # ========================================================================
    # GRACEFUL SHUTDOWN
    # ========================================================================

    async def shutdown(self) -> None:
        """Close the bot, then flush the stores."""
        if not self._initialized:
            logger.warning("ApplicationContext not initialized, nothing to shut down")
            return

        logger.info("=" * 70)
        logger.info("APPLICATION CONTEXT SHUTDOWN")
        logger.info("=" * 70)

        if self._bot and not self._bot.is_closed():
            try:
                await self._bot.close()
                logger.info("✓ ClaimsBot closed")
            except Exception as exc:
                logger.error(
                    "Error closing bot",
                    extra={
                        "error": str(exc),
                        "error_type": type(exc).__name__,
                    },
                    exc_info=True,
                )

        if self._claim_context:
            self._claim_context.shutdown()
            logger.info("✓ Claim data flushed")

        self._initialized = False
        logger.info("=" * 70)
        logger.info("✓ Application context shutdown complete")
        logger.info("=" * 70)

    async def _emergency_shutdown(self) -> None:
        """
        Best-effort cleanup when initialization fails partway through.

        The stores are not flushed: nothing has been claimed yet.
        """
        logger.warning("Performing emergency shutdown")

        if self._bot and not self._bot.is_closed():
            try:
                await self._bot.close()
            except Exception as exc:
                logger.warning(
                    "Error closing bot during emergency shutdown",
                    extra={"error": str(exc), "error_type": type(exc).__name__},
                )

    # ========================================================================
    # PROPERTIES
    # ========================================================================

    @property
    def bot(self) -> ClaimsBot:
        """Get the bot instance (only after initialization)."""
        if not self._initialized or self._bot is None:
            raise RuntimeError("Bot not available: ApplicationContext not initialized")
        return self._bot

    @property
    def claim_context(self) -> ClaimContext:
        """Get the claim state (only after initialization)."""
        if not self._initialized or self._claim_context is None:
            raise RuntimeError(
                "ClaimContext not available: ApplicationContext not initialized"
            )
        return self._claim_context

    @property
    def is_initialized(self) -> bool:
        return self._initialized
