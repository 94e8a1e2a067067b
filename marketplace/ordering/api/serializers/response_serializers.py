"""
Response serializers for the order API documentation.

Used only for OpenAPI schema generation, not for validation.
"""

from rest_framework import serializers


class ErrorResponseSerializer(serializers.Serializer):
    """Standard error response"""

    error = serializers.CharField(help_text="Error code identifier")
    detail = serializers.CharField(help_text="Human-readable error message")


class OrderListResponseSerializer(serializers.Serializer):
    """Paginated order list response"""

    count = serializers.IntegerField(help_text="Total number of orders")
    page = serializers.IntegerField(help_text="Current page number")
    page_size = serializers.IntegerField(help_text="Items per page")
    results = serializers.ListField(child=serializers.DictField(), help_text="Orders (see OrderSerializer schema)")


class PickupConfirmResponseSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    status = serializers.CharField()
    payment_status = serializers.CharField()
    pickup_verified_at = serializers.DateTimeField()
