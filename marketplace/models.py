from marketplace.catalog.domain.models import PrintStore, Service
from marketplace.ordering.domain.models import Order, OrderAttachment, OrderItem


__all__ = [
    "PrintStore",
    "Service",
    "Order",
    "OrderItem",
    "OrderAttachment",
]
