import uuid

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from marketplace.catalog.domain.models import PrintStore, Service


class Order(models.Model):
    STATUS_PENDING = "pending"
    STATUS_PROCESSING = "processing"
    STATUS_READY = "ready"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_PROCESSING, "Processing"),
        (STATUS_READY, "Ready"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    TERMINAL_STATUSES = (STATUS_COMPLETED, STATUS_CANCELLED)

    PAYMENT_STATUS_CHOICES = [
        ("unpaid", "Unpaid"),
        ("paid", "Paid"),
        ("refunded", "Refunded"),
    ]

    PAYMENT_METHOD_CHOICES = [
        ("cash", "Cash"),
        ("gcash", "GCash"),
        ("card", "Card"),
        ("bank_transfer", "Bank Transfer"),
        ("other", "Other"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="orders"
    )
    guest_id = models.CharField(max_length=64, blank=True, db_index=True)
    store = models.ForeignKey(PrintStore, on_delete=models.PROTECT, related_name="orders")

    notes = models.TextField(blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default="unpaid")

    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=3, default="PHP")

    # Pickup credential, present only while status == ready
    pickup_token = models.CharField(max_length=64, null=True, blank=True, unique=True)
    pickup_token_expires_at = models.DateTimeField(null=True, blank=True)
    pickup_verified_at = models.DateTimeField(null=True, blank=True)

    # First entry into each stage
    processing_at = models.DateTimeField(null=True, blank=True)
    ready_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    # Counter payment
    payment_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, blank=True)
    change_given = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    receipt_issued_at = models.DateTimeField(null=True, blank=True)

    # Down payment
    down_payment_required = models.BooleanField(default=False)
    down_payment_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    down_payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, blank=True)
    down_payment_reference = models.CharField(max_length=120, blank=True)
    down_payment_paid_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["store", "-created_at"], name="order_store_created_idx"),
            models.Index(fields=["customer", "-created_at"], name="order_customer_created_idx"),
        ]

    @property
    def short_code(self):
        """Last six characters of the id, used in customer-facing messages."""
        return str(self.id).replace("-", "")[-6:]

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES

    def __str__(self):
        return f"Order {self.short_code} ({self.status})"


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    service = models.ForeignKey(Service, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")

    # Service snapshot at order time
    service_name = models.CharField(max_length=200)
    unit = models.CharField(max_length=20, blank=True)
    currency = models.CharField(max_length=3, default="PHP")

    quantity = models.PositiveIntegerField(default=1)
    selected_options = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    total_price = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        ordering = ["id"]
        app_label = "marketplace"

    def __str__(self):
        return f"{self.quantity}x {self.service_name} in order {self.order.short_code}"


class OrderAttachment(models.Model):
    KIND_FILE = "file"
    KIND_DOWN_PAYMENT_RECEIPT = "down_payment_receipt"

    KIND_CHOICES = [
        (KIND_FILE, "File"),
        (KIND_DOWN_PAYMENT_RECEIPT, "Down payment receipt"),
    ]

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="attachments")
    file_id = models.CharField(max_length=64, unique=True)
    filename = models.CharField(max_length=255)
    mime_type = models.CharField(max_length=120, blank=True)
    size = models.PositiveBigIntegerField(default=0)
    storage_key = models.CharField(max_length=500)
    kind = models.CharField(max_length=30, choices=KIND_CHOICES, default=KIND_FILE)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        app_label = "marketplace"

    def __str__(self):
        return f"{self.filename} ({self.kind})"
