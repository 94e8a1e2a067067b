from .base import DomainEvent, NotifiableEvent
from .order_events import (
    OrderCancelledEvent,
    OrderPlacedEvent,
    OrderStatusChangedEvent,
    PaymentVerifiedEvent,
    PickupConfirmedEvent,
    ReceiptReadyEvent,
)


__all__ = [
    "DomainEvent",
    "NotifiableEvent",
    "OrderPlacedEvent",
    "OrderStatusChangedEvent",
    "OrderCancelledEvent",
    "PickupConfirmedEvent",
    "PaymentVerifiedEvent",
    "ReceiptReadyEvent",
]
