import uuid

from django.core.validators import MinValueValidator
from django.db import models

from .store import PrintStore


class Service(models.Model):
    """
    A print service offered by a store.

    ``variants`` holds the customisation groups a customer picks from, e.g.::

        [{"label": "Paper", "options": [{"name": "Glossy", "price_delta": "20.00"}]}]
    """

    UNIT_CHOICES = [
        ("per page", "Per page"),
        ("per sq ft", "Per sq ft"),
        ("per item", "Per item"),
    ]

    CURRENCY_CHOICES = [
        ("USD", "US Dollar"),
        ("EUR", "Euro"),
        ("GBP", "British Pound"),
        ("JPY", "Japanese Yen"),
        ("PHP", "Philippine Peso"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    store = models.ForeignKey(PrintStore, on_delete=models.CASCADE, related_name="services")
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    base_price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    unit = models.CharField(max_length=20, choices=UNIT_CHOICES, default="per item")
    currency = models.CharField(max_length=3, choices=CURRENCY_CHOICES, default="PHP")
    variants = models.JSONField(default=list, blank=True)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["store", "is_active"], name="service_store_active_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.store.name})"
