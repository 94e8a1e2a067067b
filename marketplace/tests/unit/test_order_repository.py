from datetime import timedelta
from decimal import Decimal

import pytest
from django.test import TestCase
from django.utils import timezone

from marketplace.models import Order, OrderAttachment, OrderItem
from marketplace.ordering.domain.repositories.order_repository import OrderRepository
from marketplace.ordering.domain.services.attachment_service import AttachmentRef
from marketplace.tests.factories import (
    CustomerFactory,
    GuestFactory,
    OrderFactory,
    PrintStoreFactory,
    ServiceFactory,
)


@pytest.mark.unit
class OrderRepositoryTest(TestCase):
    def setUp(self):
        self.repository = OrderRepository()
        self.store = PrintStoreFactory()
        self.service = ServiceFactory(store=self.store)
        self.customer = CustomerFactory()

    def _ready_order(self, token="a" * 32, expires_in=timedelta(hours=48)):
        return OrderFactory(
            customer=self.customer,
            store=self.store,
            status=Order.STATUS_READY,
            pickup_token=token,
            pickup_token_expires_at=timezone.now() + expires_in,
        )

    def test_create_persists_order_items_and_attachments(self):
        refs = [
            AttachmentRef("f1", "a.pdf", "application/pdf", 10, "orders/attachments/f1/a.pdf"),
            AttachmentRef("r1", "r.jpg", "image/jpeg", 3, "orders/attachments/r1/r.jpg", kind="down_payment_receipt"),
        ]
        order = self.repository.create(
            {"customer": self.customer, "store": self.store, "subtotal": Decimal("240.00"), "currency": "PHP"},
            [
                {
                    "service": self.service,
                    "service_name": self.service.name,
                    "quantity": 2,
                    "selected_options": [{"label": "Paper", "price_delta": Decimal("20.00")}],
                    "unit_price": Decimal("120.00"),
                    "total_price": Decimal("240.00"),
                }
            ],
            refs,
        )

        loaded = self.repository.get(order.id)
        self.assertEqual(loaded.status, Order.STATUS_PENDING)
        self.assertEqual(loaded.payment_status, "unpaid")
        self.assertEqual(loaded.items.count(), 1)
        self.assertEqual(loaded.items.first().selected_options[0]["price_delta"], "20.00")
        self.assertEqual(
            sorted(loaded.attachments.values_list("kind", flat=True)), ["down_payment_receipt", "file"]
        )

    def test_get_unknown_or_malformed_id(self):
        self.assertIsNone(self.repository.get("00000000-0000-0000-0000-000000000000"))
        self.assertIsNone(self.repository.get("not-a-uuid"))

    def test_consume_pickup_token_completes_once(self):
        order = self._ready_order()
        now = timezone.now()

        self.assertTrue(self.repository.consume_pickup_token(order.id, order.pickup_token, now))
        self.assertFalse(self.repository.consume_pickup_token(order.id, "a" * 32, now))

        order.refresh_from_db()
        self.assertEqual(order.status, Order.STATUS_COMPLETED)
        self.assertEqual(order.payment_status, "paid")
        self.assertEqual(order.pickup_verified_at, now)
        self.assertEqual(order.completed_at, now)
        self.assertIsNone(order.pickup_token)
        self.assertIsNone(order.pickup_token_expires_at)

    def test_consume_pickup_token_refuses_expired(self):
        order = self._ready_order(expires_in=timedelta(minutes=-1))

        self.assertFalse(self.repository.consume_pickup_token(order.id, order.pickup_token, timezone.now()))

        order.refresh_from_db()
        self.assertEqual(order.status, Order.STATUS_READY)

    def test_consume_pickup_token_refuses_non_ready_order(self):
        order = self._ready_order()
        Order.objects.filter(pk=order.pk).update(status=Order.STATUS_CANCELLED)

        self.assertFalse(self.repository.consume_pickup_token(order.id, order.pickup_token, timezone.now()))

    def test_find_by_pickup_token(self):
        order = self._ready_order(token="b" * 32)

        self.assertEqual(self.repository.find_by_pickup_token("b" * 32).pk, order.pk)
        self.assertIsNone(self.repository.find_by_pickup_token("c" * 32))
        self.assertIsNone(self.repository.find_by_pickup_token(""))

    def test_list_for_customer_includes_guest_orders(self):
        guest = GuestFactory()
        own = OrderFactory(customer=self.customer, store=self.store)
        guest_order = OrderFactory(customer=None, guest_id=str(guest.pk), store=self.store)
        OrderFactory(store=self.store)

        self.assertEqual([o.pk for o in self.repository.list_for_customer(self.customer)], [own.pk])
        self.assertEqual([o.pk for o in self.repository.list_for_customer(guest)], [guest_order.pk])

    def test_list_for_store_filters_and_orders_newest_first(self):
        first = OrderFactory(store=self.store)
        second = OrderFactory(store=self.store, status=Order.STATUS_PROCESSING)
        Order.objects.filter(pk=first.pk).update(created_at=timezone.now() - timedelta(hours=1))
        OrderFactory()

        self.assertEqual([o.pk for o in self.repository.list_for_store(self.store)], [second.pk, first.pk])
        self.assertEqual(
            [o.pk for o in self.repository.list_for_store(self.store, Order.STATUS_PROCESSING)], [second.pk]
        )

    def test_paginate(self):
        for _ in range(5):
            OrderFactory(store=self.store)

        results, total = self.repository.paginate(self.repository.list_for_store(self.store), page=2, page_size=2)

        self.assertEqual(total, 5)
        self.assertEqual(len(results), 2)

        results, _ = self.repository.paginate(self.repository.list_for_store(self.store), page=0, page_size=500)
        self.assertEqual(len(results), 5)

    def test_get_attachment_and_receipt(self):
        order = OrderFactory(store=self.store)
        OrderAttachment.objects.create(order=order, file_id="f1", filename="a.pdf", storage_key="k1")
        OrderAttachment.objects.create(
            order=order, file_id="r1", filename="r.jpg", storage_key="k2", kind="down_payment_receipt"
        )

        self.assertEqual(self.repository.get_attachment(order, "f1").filename, "a.pdf")
        self.assertIsNone(self.repository.get_attachment(order, "f1", kind="down_payment_receipt"))
        self.assertIsNone(self.repository.get_attachment(order, "missing"))
        self.assertEqual(self.repository.get_down_payment_receipt(order).file_id, "r1")

    def test_save_bumps_updated_at(self):
        order = OrderFactory(store=self.store)
        before = order.updated_at

        order.notes = "rush"
        self.repository.save(order, {"notes"})

        order.refresh_from_db()
        self.assertEqual(order.notes, "rush")
        self.assertGreaterEqual(order.updated_at, before)
        self.assertEqual(OrderItem.objects.filter(order=order).count(), 0)
