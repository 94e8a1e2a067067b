"""
OrderRepository - Persistence for the Order aggregate

All order reads and writes go through here. Pickup confirmation is a single
conditional UPDATE so that two scans of the same token can never both
complete the order.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q, QuerySet
from django.utils import timezone

from marketplace.ordering.domain.models import Order, OrderAttachment, OrderItem


class OrderRepository:
    def _base_queryset(self) -> QuerySet:
        return Order.objects.select_related("store", "store__owner", "customer").prefetch_related(
            "items", "attachments"
        )

    def get(self, order_id) -> Optional[Order]:
        """Fetch one order with items and attachments, or None."""
        try:
            return self._base_queryset().get(pk=order_id)
        except (Order.DoesNotExist, ValidationError, ValueError):
            return None

    def get_for_update(self, order_id) -> Optional[Order]:
        """
        Fetch and row-lock an order. Must be called inside transaction.atomic.
        """
        try:
            return Order.objects.select_for_update().select_related("store").get(pk=order_id)
        except (Order.DoesNotExist, ValidationError, ValueError):
            return None

    def find_by_pickup_token(self, token: str) -> Optional[Order]:
        if not token:
            return None
        return Order.objects.select_related("store").filter(pickup_token=token).first()

    @transaction.atomic
    def create(
        self,
        order_fields: dict,
        items: Iterable[dict],
        attachments: Iterable,
    ) -> Order:
        """
        Insert an order with its items and attachment rows in one transaction.

        Args:
            order_fields: Order model field values
            items: OrderItem field values (without ``order``)
            attachments: AttachmentRef-like objects
        """
        order = Order.objects.create(**order_fields)
        OrderItem.objects.bulk_create([OrderItem(order=order, **item) for item in items])
        OrderAttachment.objects.bulk_create(
            [
                OrderAttachment(
                    order=order,
                    file_id=ref.file_id,
                    filename=ref.filename,
                    mime_type=ref.mime_type,
                    size=ref.size,
                    storage_key=ref.storage_key,
                    kind=ref.kind,
                )
                for ref in attachments
            ]
        )
        return order

    def save(self, order: Order, fields: Iterable[str]) -> None:
        order.save(update_fields=sorted(set(fields) | {"updated_at"}))

    def consume_pickup_token(self, order_id, token: str, now: datetime) -> bool:
        """
        Complete a ready order if it still holds ``token`` and it has not expired.

        Returns:
            True if this call completed the order, False if the token was
            already consumed, replaced or expired in the meantime.
        """
        updated = Order.objects.filter(
            pk=order_id,
            pickup_token=token,
            status=Order.STATUS_READY,
            pickup_token_expires_at__gte=now,
        ).update(
            status=Order.STATUS_COMPLETED,
            payment_status="paid",
            pickup_verified_at=now,
            completed_at=now,
            pickup_token=None,
            pickup_token_expires_at=None,
            updated_at=now,
        )
        return updated == 1

    def list_for_customer(self, user, status: Optional[str] = None) -> QuerySet:
        """Orders placed by a customer, or by a guest identified by the user's id."""
        queryset = self._base_queryset().filter(Q(customer=user) | Q(guest_id=str(user.pk), customer__isnull=True))
        if status:
            queryset = queryset.filter(status=status)
        return queryset.order_by("-created_at")

    def list_for_store(self, store, status: Optional[str] = None) -> QuerySet:
        queryset = self._base_queryset().filter(store=store)
        if status:
            queryset = queryset.filter(status=status)
        return queryset.order_by("-created_at")

    @staticmethod
    def paginate(queryset: QuerySet, page: int = 1, page_size: int = 20) -> Tuple[List[Order], int]:
        page = max(int(page or 1), 1)
        page_size = min(max(int(page_size or 20), 1), 100)
        total = queryset.count()
        start = (page - 1) * page_size
        return list(queryset[start : start + page_size]), total

    def get_attachment(self, order: Order, file_id: str, kind: Optional[str] = None) -> Optional[OrderAttachment]:
        attachments = order.attachments.filter(file_id=file_id)
        if kind:
            attachments = attachments.filter(kind=kind)
        return attachments.first()

    def get_down_payment_receipt(self, order: Order) -> Optional[OrderAttachment]:
        return order.attachments.filter(kind=OrderAttachment.KIND_DOWN_PAYMENT_RECEIPT).order_by("-created_at").first()

    @staticmethod
    def now() -> datetime:
        return timezone.now()
