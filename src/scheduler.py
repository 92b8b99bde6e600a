"""
Scheduled reports for the delivery chat.
"""

import asyncio
import logging
from datetime import datetime, time, timedelta
from typing import Awaitable, Callable
from zoneinfo import ZoneInfo

from src.bot.messages import format_daily_report, format_pending_orders
from src.bot.messenger import Messenger
from src.config import Settings
from src.core.orders.reports import ReportService

logger = logging.getLogger(__name__)


def seconds_until(at: time, now: datetime) -> float:
    """Seconds from now until the next occurrence of a wall clock time."""
    target = now.replace(hour=at.hour, minute=at.minute, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return (target - now).total_seconds()


class ReportScheduler:
    """Runs the daily report and the pending orders reminder."""

    def __init__(self, reports: ReportService, messenger: Messenger, config: Settings):
        self.reports = reports
        self.messenger = messenger
        self.config = config
        self.tz = ZoneInfo(config.timezone)
        self._tasks: list[asyncio.Task] = []

    def now(self) -> datetime:
        return datetime.now(self.tz)

    async def send_daily_report(self) -> None:
        logger.info("Running scheduled daily report")
        counts = await self.reports.daily()
        await self.messenger.send_to_delivery(
            format_daily_report(counts, self.reports.today())
        )

    async def send_pending_orders(self) -> None:
        logger.info("Running scheduled pending orders check")
        orders = await self.reports.pending()
        if orders:
            await self.messenger.send_to_delivery(format_pending_orders(orders))

    async def _run_daily(self, at: time, job: Callable[[], Awaitable[None]], name: str) -> None:
        while True:
            await asyncio.sleep(seconds_until(at, self.now()))
            try:
                await job()
            except Exception as e:
                logger.error(f"Error in scheduled {name}: {e}", exc_info=True)

    def start(self) -> None:
        self._tasks = [
            asyncio.create_task(
                self._run_daily(self.config.daily_report_time, self.send_daily_report, "daily report")
            ),
            asyncio.create_task(
                self._run_daily(
                    self.config.pending_orders_time, self.send_pending_orders, "pending orders check"
                )
            ),
        ]
        logger.info("Scheduler started with daily jobs")

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        logger.info("Scheduler stopped")

