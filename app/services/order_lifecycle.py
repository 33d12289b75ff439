"""
Booking order status changes and the export of confirmed orders.

    pending -> confirmed   (appended to the orders spreadsheet once)
    pending -> rejected

Confirmed and rejected are terminal. The conditional status update is the
primary duplicate-export gate; the ``exported`` flag, re-checked under the
export lock, only guards the export step itself.
"""
from __future__ import annotations

import logging
from typing import Callable

from app.core.errors import InvalidTransition, OrderNotFound, OrderServiceError, PersistenceFailed, StatusConflict
from app.models.booking_order import BookingOrder, CONFIRMED, PENDING, REJECTED, TERMINAL_STATUSES
from app.services.export_projector import is_exportable, project_order
from app.services.order_repository import OrderRepository
from app.services.tabular_store import TabularStore

logger = logging.getLogger(__name__)

TARGET_STATUSES = (CONFIRMED, REJECTED)


class OrderLifecycle:
    def __init__(
        self,
        repository: OrderRepository,
        store: TabularStore,
        projector: Callable[[BookingOrder], dict] = project_order,
    ):
        self.repository = repository
        self.store = store
        self.projector = projector

    def set_status(self, order_id: str, new_status: str) -> BookingOrder:
        if new_status not in TARGET_STATUSES:
            raise InvalidTransition(f"unsupported target status {new_status!r}")

        order = self.repository.get(order_id)
        if order.status in TERMINAL_STATUSES:
            raise InvalidTransition(f"order {order_id} is already {order.status}")

        try:
            order = self.repository.conditional_set_status(order_id, PENDING, new_status)
        except StatusConflict as e:
            # another request moved the order out of pending first
            raise InvalidTransition(f"order {order_id} is already {e.current_status}") from e
        logger.info("Order %s %s", order_id, new_status)

        if new_status == CONFIRMED:
            try:
                order = self._export(order_id) or order
            except OrderServiceError as e:
                logger.error("Order %s confirmed but not exported: %s", order_id, e)
                e.order = order
                raise
        return order

    def _export(self, order_id: str) -> BookingOrder | None:
        with self.store.lock.hold():
            order = self.repository.get(order_id)
            if not is_exportable(order):
                logger.info("Order %s not exportable (status=%s, exported=%s), skipping", order_id, order.status, order.exported)
                return order

            self.store.append_record(self.projector(order))
            logger.info("Order %s exported to %s", order_id, self.store.path.name)

            try:
                return self.repository.set_exported_flag(order_id)
            except (PersistenceFailed, OrderNotFound) as e:
                # row is written; the terminal status already blocks a second export
                logger.error("Order %s exported but exported flag not saved: %s", order_id, e)
                return None
