"""
CatalogService - Store and service lookup

Read-only access to print stores and the services they offer, as needed by
order placement.
"""

from typing import Tuple

from django.core.exceptions import ValidationError

from marketplace.catalog.domain.models import PrintStore, Service
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok


class CatalogService(BaseService):
    @BaseService.log_performance
    def get_store(self, store_id) -> ServiceResult[PrintStore]:
        try:
            store = PrintStore.objects.select_related("owner").get(pk=store_id, is_active=True)
        except (PrintStore.DoesNotExist, ValidationError, ValueError):
            return service_err(ErrorCodes.STORE_NOT_FOUND, f"Store {store_id} not found")
        return service_ok(store)

    @BaseService.log_performance
    def get_orderable_service(self, store_id, service_id) -> ServiceResult[Tuple[PrintStore, Service]]:
        """
        Resolve a store and one of its active services.

        A service belonging to another store is reported as not found.
        """
        store_result = self.get_store(store_id)
        if not store_result.ok:
            return store_result
        store = store_result.value

        try:
            service = Service.objects.get(pk=service_id, store=store, is_active=True)
        except (Service.DoesNotExist, ValidationError, ValueError):
            return service_err(ErrorCodes.SERVICE_NOT_FOUND, f"Service {service_id} not found for this store")

        return service_ok((store, service))
