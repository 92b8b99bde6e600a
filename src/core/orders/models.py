"""
Order models for Delivery Bot.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, date
from enum import Enum
from typing import Optional


class OrderStatus(Enum):
    """Order status enum."""
    PENDING = "pending"          # Recorded, waiting for delivery
    DELIVERED = "delivered"      # Terminal
    CANCELLED = "cancelled"      # Terminal


@dataclass
class OrderDraft:
    """Order fields recovered from a chat message, before persistence."""
    customer_name: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    items: Optional[str] = None
    delivery_date: Optional[date] = None
    added_by: Optional[str] = None

    def is_complete(self) -> bool:
        """Check if draft has all required data."""
        return all([self.customer_name, self.phone_number, self.address, self.items])

    def missing_fields(self) -> list[str]:
        """Names of required fields that are still empty."""
        required = {
            "customer_name": self.customer_name,
            "phone_number": self.phone_number,
            "address": self.address,
            "items": self.items,
        }
        return [name for name, value in required.items() if not value]

    def stripped(self) -> "OrderDraft":
        """Copy with surrounding whitespace removed from text fields."""
        return replace(
            self,
            customer_name=self.customer_name.strip() if self.customer_name else self.customer_name,
            phone_number=self.phone_number.strip() if self.phone_number else self.phone_number,
            address=self.address.strip() if self.address else self.address,
            items=self.items.strip() if self.items else self.items,
        )


@dataclass
class Order:
    """Persisted order."""
    order_id: str
    customer_name: str
    phone_number: str
    address: str
    items: str
    status: OrderStatus = OrderStatus.PENDING
    delivery_date: Optional[date] = None
    added_by: Optional[str] = None
    delivery_person: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    delivered_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    @property
    def order_number(self) -> str:
        """Reference used in chat messages."""
        return f"Order #{self.order_id}"


@dataclass(frozen=True)
class OrderHistoryEntry:
    """One audit trail record. Never mutated once written."""
    order_id: str
    status: OrderStatus
    changed_by: Optional[str]
    notes: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class OrderCounts:
    """Order counts for a reporting period."""
    total: int = 0
    pending: int = 0
    delivered: int = 0
    cancelled: int = 0

    @property
    def completion_rate(self) -> int:
        """Delivered share of all orders, in whole percent."""
        if self.total <= 0:
            return 0
        return round(self.delivered / self.total * 100)
