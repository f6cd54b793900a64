"""
Claim Player Rewards - Application Entry Point
==============================================

- Logging setup
- Config validation
- Claim data and bot initialization (ApplicationContext)
- Graceful shutdown with a final flush of both data files
"""

import asyncio
import signal
import sys

from claimrewards.core.config.config import Config
from claimrewards.core.infra.application_context import ApplicationContext
from claimrewards.core.logging.logger import get_logger, setup_logging, shutdown_logging

logger = get_logger(__name__)


async def main() -> None:
    """
    Lifecycle:
        1. Validate configuration
        2. Load reward config, allocations and ledger; build the bot
        3. Start bot
        4. Handle shutdown gracefully
    """
    context = ApplicationContext()

    try:
        logger.info("========== CLAIM PLAYER REWARDS INITIALIZATION START ==========")
        Config.validate()
        logger.info("✓ Configuration validated")

        await context.initialize()
        await context.run_bot()

    except asyncio.CancelledError:
        logger.warning("Asyncio task cancellation received; shutting down gracefully.")
        raise

    except KeyboardInterrupt:
        logger.info("Manual shutdown via keyboard interrupt.")

    finally:
        await context.shutdown()
        logger.info("========== SHUTDOWN COMPLETE ==========")


def _install_signal_handlers(loop: asyncio.AbstractEventLoop, task: asyncio.Task) -> None:
    """Cancel the main task on SIGTERM/SIGINT so the finally-block flush runs."""
    try:
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, task.cancel)
        logger.debug("Signal handlers installed")
    except NotImplementedError:
        logger.debug("Signal handlers not supported on this platform (likely Windows)")


def run() -> None:
    """Console script entry point."""
    # Log level and format come from the environment
    Config.load()
    setup_logging()

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    task = loop.create_task(main())
    _install_signal_handlers(loop, task)

    exit_code = 0
    try:
        loop.run_until_complete(task)
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.info("Bot stopped.")
    except Exception as exc:
        logger.critical(f"Startup failure: {exc}", exc_info=True)
        exit_code = 1
    finally:
        loop.close()
        logger.info("Event loop closed.")
        shutdown_logging()

    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    run()
