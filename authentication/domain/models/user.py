import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models


class CustomUser(AbstractUser):
    ROLE_CHOICES = [
        ("customer", "Customer"),
        ("guest", "Guest"),
        ("owner", "Store Owner"),
        ("employee", "Employee"),
        ("admin", "Admin"),
    ]

    EMPLOYEE_ROLE_CHOICES = [
        ("Operations Manager", "Operations Manager"),
        ("Front Desk", "Front Desk"),
        ("Inventory & Supplies", "Inventory & Supplies"),
        ("Printer Operator", "Printer Operator"),
        ("Designer", "Designer"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)
    first_name = models.CharField(max_length=30, blank=True)
    last_name = models.CharField(max_length=30, blank=True)
    date_joined = models.DateTimeField(auto_now_add=True)

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default="customer")

    # Employees only
    employee_role = models.CharField(max_length=40, choices=EMPLOYEE_ROLE_CHOICES, blank=True)
    assigned_store = models.ForeignKey(
        "marketplace.PrintStore",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="employees",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        app_label = "authentication"

    def is_admin(self):
        """Check if user is an admin"""
        return self.role == "admin" or self.is_superuser

    def is_guest(self):
        return self.role == "guest"

    def can_place_orders(self):
        """Customers and guests are the only roles that place orders"""
        return self.role in ("customer", "guest")

    @property
    def display_name(self):
        full_name = f"{self.first_name} {self.last_name}".strip()
        return full_name or self.username or self.email

    def __str__(self):
        return self.email
