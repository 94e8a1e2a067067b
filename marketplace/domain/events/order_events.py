"""
Order lifecycle events and the notification copy that goes with them.
"""

from dataclasses import dataclass

from django.conf import settings

from .base import NotifiableEvent


def _money(value):
    return str(value) if value is not None else None


def customer_recipient(order):
    """Customer orders notify the customer; guest orders the guest user id."""
    if order.customer_id:
        return str(order.customer_id)
    return order.guest_id or None


def time_estimate(status: str) -> str:
    if status == "processing":
        hours = getattr(settings, "ORDER_TIME_ESTIMATES", {}).get("processing", 2)
        return f"Estimated completion: {hours} hours"
    if status == "ready":
        return "Ready for pickup!"
    if status == "completed":
        return "Order completed!"
    return ""


@dataclass
class OrderPlacedEvent(NotifiableEvent):
    """Event: Order placed. Sent to the store owner."""

    def __init__(self, order, service_name: str, quantity: int):
        super().__init__(
            event_type="order.placed",
            payload={
                "order_id": str(order.id),
                "store_id": str(order.store_id),
                "subtotal": _money(order.subtotal),
                "currency": order.currency,
            },
            recipient_id=str(order.store.owner_id),
            audience="owner",
            title="New Order",
            description=f"A new order was placed for {service_name} (x{quantity}).",
        )


@dataclass
class OrderStatusChangedEvent(NotifiableEvent):
    """Event: Order status changed. Sent to the customer."""

    def __init__(self, order, previous_status: str):
        estimate = time_estimate(order.status)
        super().__init__(
            event_type="order.status_changed",
            payload={
                "order_id": str(order.id),
                "status": order.status,
                "previous_status": previous_status,
                "payment_status": order.payment_status,
            },
            recipient_id=customer_recipient(order),
            audience="customer",
            title=f"Order #{order.short_code} status updated",
            description=f'Your order is now marked as "{order.status}". {estimate}'.strip(),
        )


@dataclass
class OrderCancelledEvent(NotifiableEvent):
    """Event: Order cancelled by its customer. Sent to the store owner."""

    def __init__(self, order):
        super().__init__(
            event_type="order.cancelled",
            payload={"order_id": str(order.id), "status": order.status},
            recipient_id=str(order.store.owner_id),
            audience="owner",
            title="Order Cancelled",
            description=f"Order {order.short_code} was cancelled by the customer.",
        )


@dataclass
class PickupConfirmedEvent(NotifiableEvent):
    """Event: Pickup token scanned at the counter. Sent to the store owner."""

    def __init__(self, order):
        super().__init__(
            event_type="order.pickup_confirmed",
            payload={
                "order_id": str(order.id),
                "subtotal": _money(order.subtotal),
                "currency": order.currency,
                "customer_id": customer_recipient(order),
            },
            recipient_id=str(order.store.owner_id),
            audience="owner",
            title=f"Order #{order.short_code} picked up",
            description=f"Pickup verified for order {order.short_code}. Marked as paid.",
        )


def _payment_payload(order):
    return {
        "order_id": str(order.id),
        "payment_amount": _money(order.payment_amount),
        "change_given": _money(order.change_given),
        "currency": order.currency or "PHP",
    }


@dataclass
class PaymentVerifiedEvent(NotifiableEvent):
    """Event: Completed order paid and receipt issued. Sent to the store owner."""

    def __init__(self, order):
        super().__init__(
            event_type="order.payment_verified",
            payload=_payment_payload(order),
            recipient_id=str(order.store.owner_id),
            audience="owner",
            title=f"Payment verified for order #{order.short_code}",
            description=f"Payment recorded for order {order.short_code}.",
        )


@dataclass
class ReceiptReadyEvent(NotifiableEvent):
    """Event: Receipt available. Sent to the customer."""

    def __init__(self, order):
        super().__init__(
            event_type="order.receipt_ready",
            payload=_payment_payload(order),
            recipient_id=customer_recipient(order),
            audience="customer",
            title=f"Receipt ready for order #{order.short_code}",
            description="Thank you! Your receipt is ready.",
        )
