from django.urls import path

from .ordering.api.views import OrderViewSet, PickupConfirmView, prometheus_metrics

app_name = "marketplace"

order_list = OrderViewSet.as_view({"post": "create"})
order_detail = OrderViewSet.as_view({"get": "retrieve"})
order_status = OrderViewSet.as_view({"patch": "update_status", "post": "update_status"})
order_mine = OrderViewSet.as_view({"get": "mine"})
order_store = OrderViewSet.as_view({"get": "store_orders"})

urlpatterns = [
    path("orders/", order_list, name="order-list"),
    path("orders/mine/", order_mine, name="order-mine"),
    path("orders/store/", order_store, name="order-store-managed"),
    path("orders/store/<uuid:store_id>/", order_store, name="order-store"),
    # Public pickup confirmation (QR scan)
    path("orders/pickup/<str:token>/confirm/", PickupConfirmView.as_view(), name="order-pickup-confirm"),
    path("orders/<uuid:pk>/", order_detail, name="order-detail"),
    path("orders/<uuid:pk>/status/", order_status, name="order-status"),
    path(
        "orders/<uuid:pk>/files/<str:file_id>/",
        OrderViewSet.as_view({"get": "file"}),
        name="order-file",
    ),
    path(
        "orders/<uuid:pk>/downpayment/receipt/",
        OrderViewSet.as_view({"get": "down_payment_receipt"}),
        name="order-down-payment-receipt",
    ),
    path(
        "orders/<uuid:pk>/downpayment/preview/",
        OrderViewSet.as_view({"get": "down_payment_preview"}),
        name="order-down-payment-preview",
    ),
    # Prometheus metrics endpoint
    path("metrics/", prometheus_metrics, name="marketplace-metrics"),
]
