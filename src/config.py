"""
Configuration management for Delivery Bot.
Loads settings from environment variables with validation.
"""

from datetime import time
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    data_dir: Path = Path(__file__).parent.parent / "data"

    # Telegram
    telegram_bot_token: str = Field(default="", description="Telegram Bot API token")
    sales_chat_id: int = Field(
        default=0, description="Chat where sales staff post new orders"
    )
    delivery_chat_id: int = Field(
        default=0, description="Chat where the delivery team manages orders"
    )

    # Database
    database_url: Optional[str] = Field(
        default=None,
        description="Database connection URL",
    )

    @property
    def db_url(self) -> str:
        """Get database URL with absolute path."""
        if self.database_url:
            return self.database_url
        return f"sqlite+aiosqlite:///{self.data_dir / 'delivery.db'}"

    # Order parsing
    country_code: str = Field(
        default="234", description="Country code prepended to national numbers"
    )
    rejection_min_length: int = Field(
        default=20,
        description="Messages longer than this get a visible rejection when unparseable",
    )

    # Retries
    max_retry_attempts: int = Field(
        default=3, description="Attempts for message sends and database calls"
    )
    retry_delay: float = Field(
        default=2.0, description="Base delay in seconds, multiplied by attempt number"
    )
    order_id_attempts: int = Field(
        default=5, description="Fresh order ids tried when an id is already taken"
    )

    # Scheduled reports
    timezone: str = Field(default="Africa/Lagos", description="Timezone for reports")
    daily_report_time: time = Field(
        default=time(22, 0), description="Time of the daily report"
    )
    pending_orders_time: time = Field(
        default=time(22, 30), description="Time of the pending orders reminder"
    )

    # Debug
    debug: bool = Field(default=False, description="Debug mode")


# Global settings instance
settings = Settings()
