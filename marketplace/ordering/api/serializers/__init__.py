from .order_serializers import (
    CreateOrderRequestSerializer,
    OrderAttachmentSerializer,
    OrderItemSerializer,
    OrderSerializer,
    SelectedOptionsField,
    UpdateOrderStatusRequestSerializer,
)
from .response_serializers import (
    ErrorResponseSerializer,
    OrderListResponseSerializer,
    PickupConfirmResponseSerializer,
)

__all__ = [
    "CreateOrderRequestSerializer",
    "ErrorResponseSerializer",
    "OrderAttachmentSerializer",
    "OrderItemSerializer",
    "OrderListResponseSerializer",
    "OrderSerializer",
    "PickupConfirmResponseSerializer",
    "SelectedOptionsField",
    "UpdateOrderStatusRequestSerializer",
]
