from .service import Service
from .store import PrintStore


__all__ = [
    "PrintStore",
    "Service",
]
