"""
Bot handlers registration.
"""

from aiogram import Dispatcher, F

from src.bot.handlers.sales import router as sales_router
from src.bot.handlers.delivery import router as delivery_router
from src.config import Settings


def register_handlers(dp: Dispatcher, config: Settings) -> None:
    """Register all handlers to dispatcher."""
    # Each router only sees its own chat
    sales_router.message.filter(F.chat.id == config.sales_chat_id)
    delivery_router.message.filter(F.chat.id == config.delivery_chat_id)

    dp.include_router(sales_router)
    dp.include_router(delivery_router)
