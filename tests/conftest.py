from datetime import date, datetime

import pytest
import pytest_asyncio

from src.config import Settings
from src.core.orders.lifecycle import OrderLifecycle
from src.core.orders.models import OrderDraft
from src.db.repository import OrderRepository
from src.db.sqlite import Database

TODAY = date(2024, 1, 15)
NOW = datetime(2024, 1, 15, 10, 30)


@pytest.fixture
def test_settings():
    return Settings(
        telegram_bot_token="test-token",
        sales_chat_id=100,
        delivery_chat_id=200,
        retry_delay=0,
        max_retry_attempts=2,
        order_id_attempts=3,
    )


@pytest_asyncio.fixture
async def database(tmp_path):
    database = Database(url=f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}", echo=False)
    await database.init()
    yield database
    await database.close()


@pytest.fixture
def repository(database):
    return OrderRepository(database, attempts=1, retry_delay=0)


@pytest.fixture
def lifecycle(repository, test_settings):
    return OrderLifecycle(repository, test_settings, clock=lambda: NOW)


@pytest.fixture
def draft():
    return OrderDraft(
        customer_name="Amaka Obi",
        phone_number="08012345678",
        address="12 Allen Avenue, Ikeja",
        items="2x Jollof rice, 1 chicken",
        delivery_date=date(2024, 1, 16),
        added_by="Sales Desk",
    )


class FakeMessenger:
    """Collects outgoing texts instead of sending them."""

    def __init__(self):
        self.sales = []
        self.delivery = []

    async def send_to_sales(self, text):
        self.sales.append(text)

    async def send_to_delivery(self, text):
        self.delivery.append(text)


@pytest.fixture
def messenger():
    return FakeMessenger()
