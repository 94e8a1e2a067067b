from prometheus_client import Counter, Histogram


# Order metrics
orders_placed_total = Counter("printhub_orders_placed_total", "Total orders placed", ["status"])
order_value = Histogram(
    "printhub_order_value",
    "Order subtotal distribution",
    buckets=[50, 100, 250, 500, 1000, 2500, 5000, 10000, float("inf")],
)
order_status_transitions_total = Counter(
    "printhub_order_status_transitions_total", "Order status changes by target status", ["status"]
)

# Pickup metrics
pickup_confirmations_total = Counter(
    "printhub_pickup_confirmations_total", "Pickup confirmation attempts by outcome", ["result"]
)

# Side effects
notification_publish_failures_total = Counter(
    "printhub_notification_publish_failures_total", "Notifications that could not be published", ["event_type"]
)
attachment_upload_failures_total = Counter(
    "printhub_attachment_upload_failures_total", "Attachment batches rejected because a write failed"
)
