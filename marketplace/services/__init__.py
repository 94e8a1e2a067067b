from .base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok


__all__ = [
    "BaseService",
    "ErrorCodes",
    "ServiceResult",
    "service_err",
    "service_ok",
]
