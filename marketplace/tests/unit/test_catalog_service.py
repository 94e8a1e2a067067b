import uuid

import pytest
from django.test import TestCase

from marketplace.catalog.domain.services import CatalogService
from marketplace.services import ErrorCodes
from marketplace.tests.factories import PrintStoreFactory, ServiceFactory


@pytest.mark.unit
class CatalogServiceTest(TestCase):
    def setUp(self):
        self.catalog = CatalogService()
        self.store = PrintStoreFactory()
        self.service = ServiceFactory(store=self.store)

    def test_get_store(self):
        result = self.catalog.get_store(self.store.id)

        self.assertTrue(result.ok)
        self.assertEqual(result.value, self.store)

    def test_get_store_inactive_or_unknown(self):
        inactive = PrintStoreFactory(is_active=False)

        self.assertEqual(self.catalog.get_store(inactive.id).error, ErrorCodes.STORE_NOT_FOUND)
        self.assertEqual(self.catalog.get_store(uuid.uuid4()).error, ErrorCodes.STORE_NOT_FOUND)
        self.assertEqual(self.catalog.get_store("garbage").error, ErrorCodes.STORE_NOT_FOUND)

    def test_get_orderable_service(self):
        result = self.catalog.get_orderable_service(self.store.id, self.service.id)

        self.assertEqual(result.value, (self.store, self.service))

    def test_service_must_belong_to_store(self):
        foreign = ServiceFactory()

        result = self.catalog.get_orderable_service(self.store.id, foreign.id)

        self.assertEqual(result.error, ErrorCodes.SERVICE_NOT_FOUND)

    def test_inactive_service(self):
        hidden = ServiceFactory(store=self.store, is_active=False)

        result = self.catalog.get_orderable_service(self.store.id, hidden.id)

        self.assertEqual(result.error, ErrorCodes.SERVICE_NOT_FOUND)
