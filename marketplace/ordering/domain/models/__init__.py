from .order import Order, OrderAttachment, OrderItem


__all__ = ["Order", "OrderItem", "OrderAttachment"]
