"""
Chat message texts.
"""

from datetime import datetime
from html import escape
from typing import Optional

from src.core.orders.models import Order, OrderCounts


HELP_MESSAGE = """🤖 <b>DELIVERY BOT COMMANDS</b>

<b>Order Management:</b>
• Reply "done" to an order message to mark it as delivered
• Type "done #ORDER_ID" to mark an order as delivered
• Reply "cancel" to an order message, or type "cancel #ORDER_ID", to cancel it

<b>Reports:</b>
• /daily — today's report
• /pending — pending orders
• /weekly — this week's report
• /monthly — this month's report
• /help — this message

<i>Orders posted in the sales chat are detected and forwarded here automatically.</i>"""


ORDER_REJECTED = "❌ Could not process order. Please check the format and try again."


def _date(value) -> str:
    return value.strftime("%d/%m/%Y")


def _delivery_date_line(order: Order, label: str = "📅 <b>Delivery Date:</b>") -> str:
    if not order.delivery_date:
        return ""
    return f"\n{label} {_date(order.delivery_date)}"


def _order_fields(order: Order) -> str:
    return (
        f"👤 <b>Customer:</b> {escape(order.customer_name)}\n"
        f"📱 <b>Phone:</b> {escape(order.phone_number)}\n"
        f"📍 <b>Address:</b> {escape(order.address)}\n"
        f"🛍️ <b>Items:</b> {escape(order.items)}"
        f"{_delivery_date_line(order)}\n"
        f"🕐 <b>Time:</b> {order.created_at.strftime('%d/%m/%Y %H:%M')}"
    )


def format_sales_confirmation(order: Order) -> str:
    """Confirmation posted back to the sales chat."""
    return (
        "✅ <b>ORDER CONFIRMED</b>\n"
        f"📋 <b>{order.order_number}</b>\n\n"
        f"{_order_fields(order)}\n\n"
        "Your order has been forwarded to the delivery team. 📦"
    )


def format_order_confirmation(order: Order) -> str:
    """
    Order card posted to the delivery chat.

    Replies to this message are matched back to the order through the
    "Order #<id>" reference, so it must stay in the text.
    """
    added_by = escape(order.added_by or "unknown")
    return (
        "✅ <b>ORDER RECORDED</b>\n"
        f"📋 <b>{order.order_number}</b>\n"
        f"{_order_fields(order)}\n"
        f"➕ <b>Added by:</b> {added_by}\n\n"
        "💡 <b>To mark as delivered:</b>\n"
        '• Reply "done" to this message, OR\n'
        f'• Type "done #{order.order_id}"\n'
        "💡 <b>To cancel this order:</b>\n"
        f'• Type "cancel #{order.order_id}"\n'
        "🔧 <b>Other commands:</b> /help"
    )


# =============================================================================
# TRANSITION REPLIES
# =============================================================================

def format_delivered(order_id: str, delivery_person: str) -> str:
    return f"✅ Order #{order_id} marked as delivered by {escape(delivery_person)}."


def format_cancelled(order_id: str, cancelled_by: str) -> str:
    return f"❌ Order #{order_id} cancelled by {escape(cancelled_by)}."


def format_not_found(order_id: str) -> str:
    return f"❌ Order #{escape(order_id)} not found."


def format_already_delivered(order_id: str) -> str:
    return f"ℹ️ Order #{order_id} is already marked as delivered."


def format_already_cancelled(order_id: str) -> str:
    return f"ℹ️ Order #{order_id} is already cancelled."


def format_cannot_deliver_cancelled(order_id: str) -> str:
    return f"❌ Cannot mark cancelled order #{order_id} as delivered."


def format_cannot_cancel_delivered(order_id: str) -> str:
    return f"❌ Cannot cancel delivered order #{order_id}."


def format_update_error(order_id: str) -> str:
    return f"❌ Error updating order #{escape(order_id)}. Please try again."


# =============================================================================
# REPORTS
# =============================================================================

def _format_counts(title: str, counts: OrderCounts) -> str:
    return (
        f"📊 <b>{title}</b>\n\n"
        f"📦 <b>Total Orders:</b> {counts.total}\n"
        f"⏳ <b>Pending:</b> {counts.pending}\n"
        f"✅ <b>Delivered:</b> {counts.delivered}\n"
        f"❌ <b>Cancelled:</b> {counts.cancelled}\n\n"
        f"📈 <b>Completion Rate:</b> {counts.completion_rate}%"
    )


def format_daily_report(counts: OrderCounts, day) -> str:
    return _format_counts(f"DAILY REPORT - {_date(day)}", counts)


def format_weekly_report(counts: OrderCounts) -> str:
    return _format_counts("WEEKLY REPORT", counts)


def format_monthly_report(counts: OrderCounts) -> str:
    return _format_counts("MONTHLY REPORT", counts)


def format_age(created_at: datetime, now: Optional[datetime] = None) -> str:
    """Rough age of an order, e.g. '3 hours ago'."""
    seconds = max(0, int(((now or datetime.now()) - created_at).total_seconds()))

    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            amount = seconds // size
            return f"{amount} {unit}{'s' if amount != 1 else ''} ago"
    return "just now"


def format_pending_orders(orders: list[Order], now: Optional[datetime] = None) -> str:
    """Numbered list of pending orders."""
    if not orders:
        return "✅ <b>No pending orders!</b>\nAll orders have been completed or cancelled."

    blocks = [f"⏳ <b>PENDING ORDERS ({len(orders)})</b>"]
    for i, order in enumerate(orders, 1):
        lines = [
            f"{i}. <b>{order.order_number}</b>",
            f"👤 {escape(order.customer_name)}",
            f"📱 {escape(order.phone_number)}",
            f"📍 {escape(order.address)}",
            f"🛍️ {escape(order.items)}",
            f"🕐 {format_age(order.created_at, now)}",
        ]
        if order.delivery_date:
            lines.append(f"📅 Due: {_date(order.delivery_date)}")
        blocks.append("\n".join(lines))

    return "\n\n".join(blocks)
