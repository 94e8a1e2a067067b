"""
Base classes for the marketplace service layer.

Services return a ServiceResult instead of raising for expected failures
(missing order, bad input, wrong state). The HTTP layer maps the error code
to a status code in one place.
"""

import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Outcome of a service operation.

    Attributes:
        ok: True if the operation succeeded
        value: The success value (present if ok=True)
        error: Error code from ErrorCodes (present if ok=False)
        error_detail: Human-readable message (present if ok=False)

    Example:
        >>> result = order_service.confirm_pickup(token)
        >>> if not result.ok:
        ...     return Response({"error": result.error, "detail": result.error_detail}, 404)
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_detail: Optional[str] = None

    def to_dict(self) -> dict:
        if self.ok:
            return {"success": True, "data": self.value}
        return {"error": self.error, "detail": self.error_detail}


def service_ok(value: T) -> ServiceResult[T]:
    """Create a successful ServiceResult."""
    return ServiceResult(ok=True, value=value)


def service_err(error: str, error_detail: str = "") -> ServiceResult:
    """
    Create a failed ServiceResult.

    Args:
        error: Error code (e.g. "order_not_found", "validation_error")
        error_detail: Human-readable message, defaults to the code
    """
    return ServiceResult(ok=False, error=error, error_detail=error_detail or error)


class BaseService:
    """
    Base class for services.

    Provides a logger named after the concrete class and a timing decorator:

        class OrderService(BaseService):
            @BaseService.log_performance
            def confirm_pickup(self, token):
                self.logger.info("Confirming pickup")
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    @staticmethod
    def log_performance(func: Callable) -> Callable:
        """
        Decorator logging execution time of a service method.

        Failed ServiceResults are logged at WARNING, raised exceptions at ERROR
        with traceback before being re-raised.
        """

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            start_time = time.time()
            method_name = f"{self.__class__.__name__}.{func.__name__}"

            try:
                self.logger.debug(f"{method_name} started")
                result = func(self, *args, **kwargs)
                elapsed_ms = (time.time() - start_time) * 1000

                if isinstance(result, ServiceResult) and not result.ok:
                    self.logger.warning(f"{method_name} failed with error '{result.error}' in {elapsed_ms:.2f}ms")
                else:
                    self.logger.info(f"{method_name} completed in {elapsed_ms:.2f}ms")

                return result

            except Exception as e:
                elapsed_ms = (time.time() - start_time) * 1000
                self.logger.error(
                    f"{method_name} raised exception after {elapsed_ms:.2f}ms: {str(e)}",
                    exc_info=True,
                )
                raise

        return wrapper


class ErrorCodes:
    """Error codes returned by marketplace services."""

    # Catalog
    STORE_NOT_FOUND = "store_not_found"
    SERVICE_NOT_FOUND = "service_not_found"

    # Orders
    ORDER_NOT_FOUND = "order_not_found"
    INVALID_ORDER_STATE = "invalid_order_state"
    ATTACHMENT_NOT_FOUND = "attachment_not_found"
    ATTACHMENT_UPLOAD_FAILED = "attachment_upload_failed"

    # Pickup
    PICKUP_TOKEN_NOT_FOUND = "pickup_token_not_found"
    PICKUP_TOKEN_EXPIRED = "pickup_token_expired"

    # Access
    UNAUTHORIZED = "unauthorized"
    PERMISSION_DENIED = "permission_denied"

    VALIDATION_ERROR = "validation_error"
    INTERNAL_ERROR = "internal_error"
