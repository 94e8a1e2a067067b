"""
OrderService - Order Lifecycle Management

Places orders, moves them through pending -> processing -> ready -> completed
(or cancelled), issues and verifies the pickup token, and notifies the
store owner and customer after each committed change.

Every primary operation returns a ServiceResult. Notifications are a separate
best-effort step run after commit: a publish failure is logged and counted,
and never changes the operation's result.
"""

import secrets
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal
from typing import Any, BinaryIO, Dict, List, Optional, Tuple

from django.conf import settings
from django.db import transaction

from authentication.infra.observability.tracing import tracer
from infrastructure.notifications.interface import NotificationPublisherInterface
from infrastructure.storage.interface import StorageException
from marketplace.catalog.domain.services.catalog_service import CatalogService
from marketplace.domain.events.base import NotifiableEvent
from marketplace.domain.events.order_events import (
    OrderCancelledEvent,
    OrderPlacedEvent,
    OrderStatusChangedEvent,
    PaymentVerifiedEvent,
    PickupConfirmedEvent,
    ReceiptReadyEvent,
)
from marketplace.infra.observability.metrics import (
    notification_publish_failures_total,
    order_status_transitions_total,
    order_value,
    orders_placed_total,
    pickup_confirmations_total,
)
from marketplace.ordering.domain.models import Order, OrderAttachment
from marketplace.ordering.domain.repositories.order_repository import OrderRepository
from marketplace.ordering.domain.services.attachment_service import (
    AttachmentRef,
    AttachmentService,
    AttachmentUploadError,
)
from marketplace.ordering.domain.services.pricing_service import PricingService, to_money
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from utils.logging_utils import mask_token
from utils.rbac import ROLE_GUEST, AccessError, can_manage_store, get_managed_store, is_authenticated

ACCESS_ERROR_CODES = {
    400: ErrorCodes.VALIDATION_ERROR,
    401: ErrorCodes.UNAUTHORIZED,
    403: ErrorCodes.PERMISSION_DENIED,
    404: ErrorCodes.STORE_NOT_FOUND,
}

STATUS_RANK = {
    Order.STATUS_PENDING: 0,
    Order.STATUS_PROCESSING: 1,
    Order.STATUS_READY: 2,
    Order.STATUS_COMPLETED: 3,
}

STATUS_ALIASES = {"in progress": Order.STATUS_PROCESSING, "in_progress": Order.STATUS_PROCESSING}

PAYMENT_STATUSES = {choice for choice, _ in Order.PAYMENT_STATUS_CHOICES}
PAYMENT_METHODS = {choice for choice, _ in Order.PAYMENT_METHOD_CHOICES}

STAGE_TIMESTAMPS = {
    Order.STATUS_PROCESSING: "processing_at",
    Order.STATUS_READY: "ready_at",
    Order.STATUS_COMPLETED: "completed_at",
    Order.STATUS_CANCELLED: "cancelled_at",
}


def normalize_status(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip().lower()
    return STATUS_ALIASES.get(value, value)


def generate_pickup_token() -> str:
    return secrets.token_hex(16)


@dataclass
class CreateOrderCommand:
    store_id: Any
    service_id: Any
    quantity: int = 1
    notes: str = ""
    selected_options: List[Dict[str, Any]] = field(default_factory=list)
    currency: Optional[str] = None
    files: List[Any] = field(default_factory=list)
    down_payment_required: bool = False
    down_payment_amount: Optional[Decimal] = None
    down_payment_method: str = ""
    down_payment_reference: str = ""
    receipt: Optional[Any] = None


class OrderService(BaseService):
    """
    Service for managing the order lifecycle.
    """

    def __init__(
        self,
        repository: OrderRepository = None,
        catalog_service: CatalogService = None,
        pricing_service: PricingService = None,
        attachment_service: AttachmentService = None,
        publisher: NotificationPublisherInterface = None,
    ):
        """
        Args:
            repository: Order persistence (injected)
            catalog_service: Store/service lookup (injected)
            pricing_service: Line pricing (injected)
            attachment_service: Blob intake for uploads (injected)
            publisher: Notification publisher (injected)
        """
        super().__init__()
        from infrastructure.container import container

        self.repository = repository or OrderRepository()
        self.catalog_service = catalog_service or CatalogService()
        self.pricing_service = pricing_service or PricingService()
        self.attachment_service = attachment_service or container.attachment_service()
        self.publisher = publisher or container.notifications()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def create_order(self, requester, command: CreateOrderCommand) -> ServiceResult[Order]:
        """
        Price and persist a new order for a customer or guest.

        Attachments are written before the order row; if the insert fails
        they are deleted again.
        """
        with tracer.start_as_current_span("order_create") as span:
            if not is_authenticated(requester):
                return service_err(ErrorCodes.UNAUTHORIZED, "Authentication required")
            if not requester.can_place_orders():
                return service_err(ErrorCodes.PERMISSION_DENIED, "Only customers and guests can place orders")

            span.set_attribute("user.id", str(requester.pk))
            span.set_attribute("store.id", str(command.store_id))

            validation = self._validate_create(command)
            if validation is not None:
                return validation

            refs: List[AttachmentRef] = []
            try:
                with tracer.start_as_current_span("resolve_service"):
                    lookup = self.catalog_service.get_orderable_service(command.store_id, command.service_id)
                    if not lookup.ok:
                        return service_err(lookup.error, lookup.error_detail)
                    store, service = lookup.value

                with tracer.start_as_current_span("price_order"):
                    quote = self.pricing_service.price(service, command.selected_options, command.quantity)
                    subtotal = self.pricing_service.order_subtotal([quote])

                with tracer.start_as_current_span("store_attachments"):
                    refs = self._store_uploads(command)

                now = self.repository.now()
                is_guest = requester.role == ROLE_GUEST
                currency = command.currency or service.currency or settings.DEFAULT_ORDER_CURRENCY

                order_fields = {
                    "customer": None if is_guest else requester,
                    "guest_id": str(requester.pk) if is_guest else "",
                    "store": store,
                    "notes": command.notes or "",
                    "status": Order.STATUS_PENDING,
                    "payment_status": "unpaid",
                    "subtotal": subtotal,
                    "currency": currency,
                    "down_payment_required": bool(command.down_payment_required),
                    "down_payment_amount": command.down_payment_amount,
                    "down_payment_method": command.down_payment_method or "",
                    "down_payment_reference": command.down_payment_reference or "",
                    "down_payment_paid_at": now if command.receipt is not None else None,
                }
                item_fields = {
                    "service": service,
                    "service_name": service.name,
                    "unit": service.unit,
                    "currency": currency,
                    "quantity": quote.quantity,
                    "selected_options": quote.options,
                    "unit_price": quote.unit_price,
                    "total_price": quote.line_total,
                }

                with tracer.start_as_current_span("save_order"):
                    try:
                        with transaction.atomic():
                            order = self.repository.create(order_fields, [item_fields], refs)
                            self._publish_after_commit(OrderPlacedEvent(order, service.name, quote.quantity))
                    except Exception:
                        self.attachment_service.discard(refs)
                        raise

                orders_placed_total.labels(status=Order.STATUS_PENDING).inc()
                order_value.observe(float(subtotal))
                span.set_attribute("order.id", str(order.id))
                self.logger.info(f"Order {order.id} placed at store {store.pk} subtotal={subtotal} {currency}")

                return service_ok(self.repository.get(order.id))

            except AttachmentUploadError as e:
                return service_err(ErrorCodes.ATTACHMENT_UPLOAD_FAILED, str(e))
            except Exception as e:
                self.logger.error(f"Error creating order for user {requester.pk}: {e}", exc_info=True)
                return service_err(ErrorCodes.INTERNAL_ERROR, "Failed to create order")

    def _validate_create(self, command: CreateOrderCommand) -> Optional[ServiceResult]:
        try:
            quantity = int(command.quantity if command.quantity is not None else 1)
        except (TypeError, ValueError):
            return service_err(ErrorCodes.VALIDATION_ERROR, "Quantity must be a whole number")
        if quantity < 1:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Quantity must be >= 1")
        command.quantity = quantity

        max_files = getattr(settings, "ATTACHMENT_MAX_FILES", 10)
        if len(command.files or []) > max_files:
            return service_err(ErrorCodes.VALIDATION_ERROR, f"At most {max_files} files can be attached")

        if command.down_payment_required and command.receipt is None:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Down payment receipt is required for this order")

        if command.down_payment_amount is not None and to_money(command.down_payment_amount) < 0:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Down payment amount cannot be negative")

        return None

    def _store_uploads(self, command: CreateOrderCommand) -> List[AttachmentRef]:
        refs = self.attachment_service.store(command.files, kind=OrderAttachment.KIND_FILE)
        if command.receipt is not None:
            try:
                refs += self.attachment_service.store(
                    [command.receipt], kind=OrderAttachment.KIND_DOWN_PAYMENT_RECEIPT
                )
            except AttachmentUploadError:
                self.attachment_service.discard(refs)
                raise
        return refs

    # ------------------------------------------------------------------
    # Status updates
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def update_status(
        self,
        order_id,
        requester,
        status: Optional[str] = None,
        payment_status: Optional[str] = None,
        payment_amount: Optional[Decimal] = None,
        payment_method: Optional[str] = None,
    ) -> ServiceResult[Order]:
        """
        Change an order's status and/or payment fields.

        Store staff may move status forward (or re-issue ``ready``) and record
        payment. The order's own customer may only cancel a non-terminal order.
        """
        with tracer.start_as_current_span("order_update_status") as span:
            span.set_attribute("order.id", str(order_id))

            if not is_authenticated(requester):
                return service_err(ErrorCodes.UNAUTHORIZED, "Authentication required")

            target = normalize_status(status)
            if target is None and payment_status is None and payment_amount is None and not payment_method:
                return service_err(ErrorCodes.VALIDATION_ERROR, "Nothing to update")
            if target is not None and target not in STATUS_RANK and target != Order.STATUS_CANCELLED:
                return service_err(ErrorCodes.VALIDATION_ERROR, f"Unknown status '{status}'")
            if payment_status is not None and payment_status not in PAYMENT_STATUSES:
                return service_err(ErrorCodes.VALIDATION_ERROR, f"Unknown payment status '{payment_status}'")
            if payment_method and payment_method not in PAYMENT_METHODS:
                return service_err(ErrorCodes.VALIDATION_ERROR, f"Unknown payment method '{payment_method}'")
            if payment_amount is not None:
                payment_amount = to_money(payment_amount)
                if payment_amount < 0:
                    return service_err(ErrorCodes.VALIDATION_ERROR, "Payment amount cannot be negative")

            try:
                with transaction.atomic():
                    order = self.repository.get_for_update(order_id)
                    if order is None:
                        return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")

                    if can_manage_store(requester, order.store):
                        result = self._apply_staff_update(
                            order, target, payment_status, payment_amount, payment_method
                        )
                    elif self._is_order_customer(requester, order):
                        result = self._apply_customer_cancel(order, target, payment_status, payment_amount, payment_method)
                    else:
                        return service_err(ErrorCodes.PERMISSION_DENIED, "Not authorized to update this order")

                    if not result.ok:
                        return result

                span.set_attribute("order.status", order.status)
                return service_ok(self.repository.get(order.pk))

            except Exception as e:
                self.logger.error(f"Error updating order {order_id}: {e}", exc_info=True)
                return service_err(ErrorCodes.INTERNAL_ERROR, "Failed to update order")

    def _apply_customer_cancel(self, order, target, payment_status, payment_amount, payment_method) -> ServiceResult:
        if target != Order.STATUS_CANCELLED or payment_status is not None or payment_amount is not None or payment_method:
            return service_err(ErrorCodes.PERMISSION_DENIED, "Customers can only cancel their orders")
        if order.is_terminal:
            return service_err(ErrorCodes.INVALID_ORDER_STATE, "Order cannot be cancelled at this stage")

        previous = order.status
        changed = self._transition(order, Order.STATUS_CANCELLED)
        self.repository.save(order, changed)
        order_status_transitions_total.labels(status=Order.STATUS_CANCELLED).inc()
        self.logger.info(f"Order {order.pk} cancelled by customer (was {previous})")

        self._publish_after_commit(OrderCancelledEvent(order))
        return service_ok(order)

    def _apply_staff_update(self, order, target, payment_status, payment_amount, payment_method) -> ServiceResult:
        previous_status = order.status
        changed = set()

        if target is not None:
            check = self._check_transition(order.status, target)
            if not check.ok:
                return check
            if check.value:
                changed |= self._transition(order, target)

        if payment_status is not None and payment_status != order.payment_status:
            order.payment_status = payment_status
            changed.add("payment_status")
        if payment_amount is not None:
            order.payment_amount = payment_amount
            order.change_given = max(Decimal("0.00"), payment_amount - order.subtotal)
            changed |= {"payment_amount", "change_given"}
        if payment_method:
            order.payment_method = payment_method
            changed.add("payment_method")

        receipt_issued = False
        if order.status == Order.STATUS_COMPLETED and order.payment_status == "paid" and not order.receipt_issued_at:
            order.receipt_issued_at = self.repository.now()
            changed.add("receipt_issued_at")
            receipt_issued = True

        if changed:
            self.repository.save(order, changed)

        status_changed = "status" in changed or (target == Order.STATUS_READY and "pickup_token" in changed)
        if status_changed:
            order_status_transitions_total.labels(status=order.status).inc()
            self.logger.info(f"Order {order.pk} status {previous_status} -> {order.status}")
            self._publish_after_commit(OrderStatusChangedEvent(order, previous_status))
        if receipt_issued:
            self._publish_after_commit(PaymentVerifiedEvent(order))
            self._publish_after_commit(ReceiptReadyEvent(order))

        return service_ok(order)

    @staticmethod
    def _check_transition(current: str, target: str) -> ServiceResult[bool]:
        """
        Value is True when the status should be (re)applied, False for a no-op.
        """
        if current == target:
            # Re-marking ready rotates the pickup token
            return service_ok(target == Order.STATUS_READY)
        if current in Order.TERMINAL_STATUSES:
            return service_err(ErrorCodes.INVALID_ORDER_STATE, f"Order is already {current}")
        if target == Order.STATUS_CANCELLED:
            return service_ok(True)
        if STATUS_RANK[target] < STATUS_RANK[current]:
            return service_err(ErrorCodes.INVALID_ORDER_STATE, f"Cannot move order from {current} back to {target}")
        return service_ok(True)

    def _transition(self, order: Order, target: str) -> set:
        """Apply a status change and its side effects; returns the changed field names."""
        now = self.repository.now()
        changed = {"status"}
        order.status = target

        stage_field = STAGE_TIMESTAMPS.get(target)
        if stage_field and getattr(order, stage_field) is None:
            setattr(order, stage_field, now)
            changed.add(stage_field)

        if target == Order.STATUS_READY:
            ttl_hours = getattr(settings, "PICKUP_TOKEN_TTL_HOURS", 48)
            order.pickup_token = generate_pickup_token()
            order.pickup_token_expires_at = now + timedelta(hours=ttl_hours)
            order.pickup_verified_at = None
            changed |= {"pickup_token", "pickup_token_expires_at", "pickup_verified_at"}
        else:
            if order.pickup_token or order.pickup_token_expires_at:
                order.pickup_token = None
                order.pickup_token_expires_at = None
                changed |= {"pickup_token", "pickup_token_expires_at"}
            if target == Order.STATUS_COMPLETED and order.pickup_verified_at is None:
                order.pickup_verified_at = now
                changed.add("pickup_verified_at")

        return changed

    # ------------------------------------------------------------------
    # Pickup
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def confirm_pickup(self, token: str) -> ServiceResult[Order]:
        """
        Complete a ready order by its pickup token (counter scan).

        Marks the order completed and paid and consumes the token. Of any
        number of concurrent calls with the same token exactly one succeeds;
        the rest see pickup_token_not_found.
        """
        with tracer.start_as_current_span("order_confirm_pickup") as span:
            token = (token or "").strip()
            if not token:
                return service_err(ErrorCodes.VALIDATION_ERROR, "Token required")

            try:
                order = self.repository.find_by_pickup_token(token)
                if order is None:
                    pickup_confirmations_total.labels(result="not_found").inc()
                    self.logger.info(f"Pickup token {mask_token(token)} not found")
                    return service_err(ErrorCodes.PICKUP_TOKEN_NOT_FOUND, "Invalid token")

                span.set_attribute("order.id", str(order.pk))
                now = self.repository.now()
                if order.pickup_token_expires_at is None or order.pickup_token_expires_at < now:
                    pickup_confirmations_total.labels(result="expired").inc()
                    return service_err(ErrorCodes.PICKUP_TOKEN_EXPIRED, "Token expired")

                with transaction.atomic():
                    if not self.repository.consume_pickup_token(order.pk, token, now):
                        pickup_confirmations_total.labels(result="not_found").inc()
                        return service_err(ErrorCodes.PICKUP_TOKEN_NOT_FOUND, "Invalid token")

                    confirmed = self.repository.get(order.pk)
                    self._publish_after_commit(PickupConfirmedEvent(confirmed))
                    self._publish_after_commit(OrderStatusChangedEvent(confirmed, Order.STATUS_READY))

                pickup_confirmations_total.labels(result="confirmed").inc()
                order_status_transitions_total.labels(status=Order.STATUS_COMPLETED).inc()
                self.logger.info(f"Pickup confirmed for order {order.pk}")
                return service_ok(confirmed)

            except Exception as e:
                self.logger.error(f"Error confirming pickup: {e}", exc_info=True)
                return service_err(ErrorCodes.INTERNAL_ERROR, "Failed to confirm pickup")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id, requester) -> ServiceResult[Order]:
        if not is_authenticated(requester):
            return service_err(ErrorCodes.UNAUTHORIZED, "Authentication required")

        order = self.repository.get(order_id)
        if order is None:
            return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")
        if not (self._is_order_customer(requester, order) or can_manage_store(requester, order.store)):
            return service_err(ErrorCodes.PERMISSION_DENIED, "Not authorized to view this order")
        return service_ok(order)

    def list_customer_orders(
        self, requester, status: Optional[str] = None, page: int = 1, page_size: int = 20
    ) -> ServiceResult[Dict[str, Any]]:
        if not is_authenticated(requester):
            return service_err(ErrorCodes.UNAUTHORIZED, "Authentication required")
        queryset = self.repository.list_for_customer(requester, normalize_status(status))
        return service_ok(self._page(queryset, page, page_size))

    def list_store_orders(
        self, store_id, requester, status: Optional[str] = None, page: int = 1, page_size: int = 20
    ) -> ServiceResult[Dict[str, Any]]:
        if not is_authenticated(requester):
            return service_err(ErrorCodes.UNAUTHORIZED, "Authentication required")

        store_result = self.catalog_service.get_store(store_id)
        if not store_result.ok:
            return store_result
        store = store_result.value

        if not can_manage_store(requester, store):
            return service_err(ErrorCodes.PERMISSION_DENIED, "Not authorized to access this store")

        queryset = self.repository.list_for_store(store, normalize_status(status))
        return service_ok(self._page(queryset, page, page_size))

    def list_managed_store_orders(
        self, requester, status: Optional[str] = None, page: int = 1, page_size: int = 20
    ) -> ServiceResult[Dict[str, Any]]:
        """Orders of the store the requester owns or is assigned to."""
        try:
            store = get_managed_store(requester)
        except AccessError as e:
            return service_err(ACCESS_ERROR_CODES.get(e.status_code, ErrorCodes.PERMISSION_DENIED), e.message)

        queryset = self.repository.list_for_store(store, normalize_status(status))
        return service_ok(self._page(queryset, page, page_size))

    def _page(self, queryset, page, page_size) -> Dict[str, Any]:
        results, total = self.repository.paginate(queryset, page, page_size)
        return {"results": results, "count": total, "page": max(int(page or 1), 1), "page_size": page_size}

    def open_attachment(self, order_id, file_id: str, requester) -> ServiceResult[Tuple[OrderAttachment, BinaryIO]]:
        """Attachment metadata plus an open stream, for the customer or store staff."""
        order_result = self.get_order(order_id, requester)
        if not order_result.ok:
            return order_result

        attachment = self.repository.get_attachment(order_result.value, file_id)
        if attachment is None:
            return service_err(ErrorCodes.ATTACHMENT_NOT_FOUND, "File not found")
        return self._open(attachment)

    def open_down_payment_receipt(self, order_id, requester) -> ServiceResult[Tuple[OrderAttachment, BinaryIO]]:
        """Down-payment receipt plus an open stream, for store staff only."""
        if not is_authenticated(requester):
            return service_err(ErrorCodes.UNAUTHORIZED, "Authentication required")

        order = self.repository.get(order_id)
        if order is None:
            return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")
        if not can_manage_store(requester, order.store):
            return service_err(ErrorCodes.PERMISSION_DENIED, "Not authorized to access this store")

        receipt = self.repository.get_down_payment_receipt(order)
        if receipt is None:
            return service_err(ErrorCodes.ATTACHMENT_NOT_FOUND, "Down payment receipt not found")
        return self._open(receipt)

    def _open(self, attachment: OrderAttachment) -> ServiceResult[Tuple[OrderAttachment, BinaryIO]]:
        try:
            stream = self.attachment_service.open(attachment.storage_key)
        except StorageException as e:
            self.logger.error(f"Stored file missing for attachment {attachment.file_id}: {e}")
            return service_err(ErrorCodes.ATTACHMENT_NOT_FOUND, "File not found in storage")
        return service_ok((attachment, stream))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _is_order_customer(requester, order: Order) -> bool:
        if order.customer_id is not None:
            return order.customer_id == requester.pk
        return bool(order.guest_id) and order.guest_id == str(requester.pk)

    def _publish_after_commit(self, event: NotifiableEvent) -> None:
        """Queue a best-effort publish for when the surrounding transaction commits."""
        if not event.recipient_id:
            self.logger.debug(f"Skipping {event.event_type}: no recipient")
            return
        transaction.on_commit(lambda: self.publish_safely(event))

    def publish_safely(self, event: NotifiableEvent) -> bool:
        """
        Publish a notification; any failure is logged and counted, never raised.

        Returns:
            True if the publisher accepted the event
        """
        try:
            self.publisher.publish(event.to_notification())
            return True
        except Exception as e:
            notification_publish_failures_total.labels(event_type=event.event_type).inc()
            self.logger.error(f"Failed to publish {event.event_type} for order {event.payload.get('order_id')}: {e}")
            return False
