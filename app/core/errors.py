"""Error taxonomy for booking orders and the confirmed-order export.

Every error is recoverable by the caller. Routes translate them into
``HTTPException`` using ``http_status`` and ``to_detail()``.
"""
from __future__ import annotations

from typing import Any


class OrderServiceError(Exception):
    code = "Error"
    http_status = 500

    def __init__(self, message: str = "", *, order: Any = None):
        super().__init__(message or self.code)
        self.message = message or self.code
        self.order = order

    @property
    def status_changed(self) -> bool:
        """True when the order status was committed before the failure."""
        return self.order is not None

    def to_detail(self) -> dict:
        return {"error": self.code, "message": self.message, "statusChanged": self.status_changed}


class OrderNotFound(OrderServiceError):
    code = "NotFound"
    http_status = 404


class ExportNotFound(OrderServiceError):
    code = "NotFound"
    http_status = 404


class InvalidTransition(OrderServiceError):
    code = "InvalidTransition"
    http_status = 409


class StatusConflict(OrderServiceError):
    """Conditional status update lost: the order was no longer in the expected state."""
    code = "Conflict"
    http_status = 409

    def __init__(self, message: str = "", *, current_status: str | None = None, order: Any = None):
        super().__init__(message, order=order)
        self.current_status = current_status


class PersistenceFailed(OrderServiceError):
    code = "PersistenceFailed"
    http_status = 500


class StorageError(OrderServiceError):
    http_status = 503


class StorageCorrupt(StorageError):
    code = "StorageCorrupt"


class StorageWriteFailed(StorageError):
    code = "StorageWriteFailed"
