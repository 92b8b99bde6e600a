"""
Outgoing messages with retry.
"""

import logging

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError

from src.config import Settings
from src.core.retry import retry_async

logger = logging.getLogger(__name__)


class Messenger:
    """Sends texts to the sales and delivery chats."""

    def __init__(self, bot: Bot, config: Settings):
        self.bot = bot
        self.config = config

    async def send(self, chat_id: int, text: str) -> None:
        """Send a message, retrying with linear backoff."""
        await retry_async(
            lambda: self.bot.send_message(chat_id=chat_id, text=text),
            attempts=self.config.max_retry_attempts,
            delay=self.config.retry_delay,
            retry_on=(TelegramAPIError,),
            description=f"send message to {chat_id}",
        )
        logger.debug(f"Message sent to {chat_id}")

    async def send_to_sales(self, text: str) -> None:
        await self.send(self.config.sales_chat_id, text)

    async def send_to_delivery(self, text: str) -> None:
        await self.send(self.config.delivery_chat_id, text)
