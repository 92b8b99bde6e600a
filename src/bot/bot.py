"""
Telegram bot and dispatcher setup.
"""

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from src.bot.handlers import register_handlers
from src.config import Settings


def create_bot(config: Settings) -> Bot:
    """Bot that sends every message as HTML."""
    if not config.telegram_bot_token:
        raise ValueError("TELEGRAM_BOT_TOKEN is not set")

    return Bot(
        token=config.telegram_bot_token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )


def create_dispatcher(config: Settings, services: dict) -> Dispatcher:
    """
    Dispatcher with the sales and delivery routers attached.

    Chats are stateless, so no FSM storage is configured. Services are
    injected into handlers and startup/shutdown hooks by keyword name.
    """
    dp = Dispatcher()
    dp.workflow_data.update(services)
    register_handlers(dp, config)
    return dp
