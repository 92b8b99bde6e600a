"""
Delivery Bot - Main entry point.
"""

import asyncio
import logging
import sys
from datetime import datetime
from zoneinfo import ZoneInfo

from aiogram import Bot

from src.bot.bot import create_bot, create_dispatcher
from src.bot.messenger import Messenger
from src.core.orders import order_parser
from src.core.orders.lifecycle import OrderLifecycle
from src.core.orders.reports import ReportService
from src.db.repository import OrderRepository
from src.db.sqlite import db
from src.scheduler import ReportScheduler
from src.config import settings


# Fix for Windows asyncio
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())


# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_services(bot: Bot) -> dict:
    """Create the objects injected into handlers."""
    tz = ZoneInfo(settings.timezone)
    repository = OrderRepository(
        db, attempts=settings.max_retry_attempts, retry_delay=settings.retry_delay
    )
    messenger = Messenger(bot, settings)
    reports = ReportService(repository, today=lambda: datetime.now(tz).date())

    return {
        "config": settings,
        "parser": order_parser,
        "lifecycle": OrderLifecycle(repository, settings),
        "reports": reports,
        "messenger": messenger,
        "scheduler": ReportScheduler(reports, messenger, settings),
    }


async def on_startup(scheduler: ReportScheduler) -> None:
    """Initialize services on startup."""
    logger.info("Starting Delivery Bot...")

    # Initialize database
    await db.init()
    logger.info("Database initialized")

    scheduler.start()


async def on_shutdown(scheduler: ReportScheduler) -> None:
    """Cleanup on shutdown."""
    logger.info("Shutting down Delivery Bot...")

    await scheduler.stop()
    await db.close()

    logger.info("Cleanup complete")


async def main() -> None:
    """Main function to run the bot."""
    if not settings.sales_chat_id or not settings.delivery_chat_id:
        logger.warning("SALES_CHAT_ID or DELIVERY_CHAT_ID not set in .env!")

    bot = create_bot(settings)
    dp = create_dispatcher(settings, build_services(bot))

    # Register startup/shutdown hooks
    dp.startup.register(on_startup)
    dp.shutdown.register(on_shutdown)

    # Start polling
    logger.info("Bot is starting...")
    try:
        await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())
    finally:
        await bot.session.close()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
