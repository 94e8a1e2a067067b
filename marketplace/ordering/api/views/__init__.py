from .metrics_views import prometheus_metrics
from .order_views import OrderViewSet, PickupConfirmView

__all__ = ["OrderViewSet", "PickupConfirmView", "prometheus_metrics"]
