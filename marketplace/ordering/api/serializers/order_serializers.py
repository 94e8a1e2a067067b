import json

from rest_framework import serializers

from marketplace.catalog.domain.models import Service
from marketplace.ordering.domain.models.order import Order, OrderAttachment, OrderItem


class SelectedOptionSerializer(serializers.Serializer):
    label = serializers.CharField(max_length=120)
    option_index = serializers.IntegerField(required=False, allow_null=True)
    option_name = serializers.CharField(max_length=200, required=False, allow_blank=True, allow_null=True)


class SelectedOptionsField(serializers.Field):
    """
    Accepts a list of option dicts, or the same list as a JSON string
    (multipart forms can only send strings).
    """

    default_error_messages = {
        "invalid_json": "selected_options must be valid JSON.",
        "not_a_list": "selected_options must be a list.",
    }

    def to_internal_value(self, data):
        if isinstance(data, str):
            if not data.strip():
                return []
            try:
                data = json.loads(data)
            except ValueError:
                self.fail("invalid_json")
        if not isinstance(data, list):
            self.fail("not_a_list")

        options = SelectedOptionSerializer(data=data, many=True)
        options.is_valid(raise_exception=True)
        return [dict(option) for option in options.validated_data]

    def to_representation(self, value):
        return value


class CreateOrderRequestSerializer(serializers.Serializer):
    """Fields of a new order. Files arrive separately as multipart ``files[]`` and ``receipt``."""

    store_id = serializers.UUIDField()
    service_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    selected_options = SelectedOptionsField(required=False, default=list)
    currency = serializers.ChoiceField(choices=Service.CURRENCY_CHOICES, required=False)
    down_payment_required = serializers.BooleanField(required=False, default=False)
    down_payment_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    down_payment_method = serializers.ChoiceField(
        choices=Order.PAYMENT_METHOD_CHOICES, required=False, allow_blank=True, default=""
    )
    down_payment_reference = serializers.CharField(max_length=120, required=False, allow_blank=True, default="")


class UpdateOrderStatusRequestSerializer(serializers.Serializer):
    status = serializers.CharField(max_length=20, required=False)
    payment_status = serializers.ChoiceField(choices=Order.PAYMENT_STATUS_CHOICES, required=False)
    payment_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    payment_method = serializers.ChoiceField(choices=Order.PAYMENT_METHOD_CHOICES, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide status, payment_status, payment_amount or payment_method.")
        return attrs


class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = [
            "id",
            "service",
            "service_name",
            "unit",
            "currency",
            "quantity",
            "selected_options",
            "unit_price",
            "total_price",
        ]
        read_only_fields = fields


class OrderAttachmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderAttachment
        fields = ["file_id", "filename", "mime_type", "size", "kind", "created_at"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    attachments = serializers.SerializerMethodField()
    store_name = serializers.CharField(source="store.name", read_only=True)
    short_code = serializers.CharField(read_only=True)
    has_down_payment_receipt = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "short_code",
            "customer",
            "guest_id",
            "store",
            "store_name",
            "status",
            "payment_status",
            "subtotal",
            "currency",
            "notes",
            "items",
            "attachments",
            "pickup_token",
            "pickup_token_expires_at",
            "pickup_verified_at",
            "processing_at",
            "ready_at",
            "completed_at",
            "cancelled_at",
            "payment_amount",
            "payment_method",
            "change_given",
            "receipt_issued_at",
            "down_payment_required",
            "down_payment_amount",
            "down_payment_method",
            "down_payment_reference",
            "down_payment_paid_at",
            "has_down_payment_receipt",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_attachments(self, obj):
        files = [a for a in obj.attachments.all() if a.kind == OrderAttachment.KIND_FILE]
        return OrderAttachmentSerializer(files, many=True).data

    def get_has_down_payment_receipt(self, obj):
        return any(a.kind == OrderAttachment.KIND_DOWN_PAYMENT_RECEIPT for a in obj.attachments.all())
