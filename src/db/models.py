"""
SQLAlchemy models for Delivery Bot.
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Index,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from src.core.orders.models import Order, OrderHistoryEntry, OrderStatus


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class OrderRecord(Base):
    """Order row."""

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)

    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(20), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    items: Mapped[str] = mapped_column(Text, nullable=False)
    delivery_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20), default=OrderStatus.PENDING.value, nullable=False
    )  # pending, delivered, cancelled
    added_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    delivery_person: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    delivered_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Relationships
    history: Mapped[list["OrderHistoryRecord"]] = relationship(
        back_populates="order", order_by="OrderHistoryRecord.id"
    )

    __table_args__ = (
        Index("ix_orders_status", "status"),
        Index("ix_orders_created_at", "created_at"),
    )

    @classmethod
    def from_domain(cls, order: Order) -> "OrderRecord":
        return cls(
            order_id=order.order_id,
            customer_name=order.customer_name,
            phone_number=order.phone_number,
            address=order.address,
            items=order.items,
            delivery_date=order.delivery_date,
            status=order.status.value,
            added_by=order.added_by,
            delivery_person=order.delivery_person,
            created_at=order.created_at,
            delivered_at=order.delivered_at,
            cancelled_at=order.cancelled_at,
        )

    def to_domain(self) -> Order:
        return Order(
            order_id=self.order_id,
            customer_name=self.customer_name,
            phone_number=self.phone_number,
            address=self.address,
            items=self.items,
            status=OrderStatus(self.status),
            delivery_date=self.delivery_date,
            added_by=self.added_by,
            delivery_person=self.delivery_person,
            created_at=self.created_at,
            delivered_at=self.delivered_at,
            cancelled_at=self.cancelled_at,
        )

    def __repr__(self) -> str:
        return f"<OrderRecord(order_id='{self.order_id}', status='{self.status}')>"


class OrderHistoryRecord(Base):
    """Audit trail row. Append-only."""

    __tablename__ = "order_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[str] = mapped_column(
        ForeignKey("orders.order_id"), nullable=False
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    changed_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Relationships
    order: Mapped["OrderRecord"] = relationship(back_populates="history")

    __table_args__ = (Index("ix_order_history_order", "order_id"),)

    @classmethod
    def from_domain(cls, entry: OrderHistoryEntry) -> "OrderHistoryRecord":
        return cls(
            order_id=entry.order_id,
            status=entry.status.value,
            changed_by=entry.changed_by,
            timestamp=entry.timestamp,
            notes=entry.notes,
        )

    def to_domain(self) -> OrderHistoryEntry:
        return OrderHistoryEntry(
            order_id=self.order_id,
            status=OrderStatus(self.status),
            changed_by=self.changed_by,
            notes=self.notes,
            timestamp=self.timestamp,
        )

    def __repr__(self) -> str:
        return f"<OrderHistoryRecord(order_id='{self.order_id}', status='{self.status}')>"
