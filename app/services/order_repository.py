import uuid
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from app.core.errors import OrderNotFound, PersistenceFailed, StatusConflict
from app.models.booking_order import BookingOrder, CONFIRMED, PENDING


class OrderRepository:
    """
    Keyed storage for booking orders.

    Each call runs in its own short-lived session from ``session_factory`` so a
    single repository can be shared by every worker thread. Returned orders are
    detached snapshots.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def get(self, order_id: str) -> BookingOrder:
        with self._session_factory() as db:
            try:
                order = db.get(BookingOrder, order_id)
            except SQLAlchemyError as e:
                raise PersistenceFailed(f"could not load order {order_id}: {e}") from e
            if order is None:
                raise OrderNotFound(f"order {order_id} not found")
            return order

    def list_all(self) -> list[BookingOrder]:
        with self._session_factory() as db:
            return list(db.execute(select(BookingOrder).order_by(BookingOrder.created_at.asc())).scalars())

    def create(self, **fields) -> BookingOrder:
        order = BookingOrder(id=str(uuid.uuid4()), status=PENDING, exported=False, **fields)
        with self._session_factory() as db:
            db.add(order)
            self._commit(db, f"could not create order {order.id}")
            db.refresh(order)
            return order

    def delete(self, order_id: str) -> None:
        with self._session_factory() as db:
            order = db.get(BookingOrder, order_id)
            if order is None:
                raise OrderNotFound(f"order {order_id} not found")
            db.delete(order)
            self._commit(db, f"could not delete order {order_id}")

    def conditional_set_status(self, order_id: str, expected_status: str, new_status: str) -> BookingOrder:
        """Set ``status`` only while the stored status still equals ``expected_status``."""
        with self._session_factory() as db:
            try:
                result = db.execute(
                    update(BookingOrder)
                    .where(BookingOrder.id == order_id, BookingOrder.status == expected_status)
                    .values(status=new_status)
                )
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise PersistenceFailed(f"could not update status of order {order_id}: {e}") from e

            order = db.get(BookingOrder, order_id)
            if order is None:
                raise OrderNotFound(f"order {order_id} not found")
            if result.rowcount != 1:
                raise StatusConflict(
                    f"order {order_id} is {order.status}, expected {expected_status}",
                    current_status=order.status,
                )
            return order

    def set_exported_flag(self, order_id: str) -> BookingOrder:
        with self._session_factory() as db:
            try:
                db.execute(
                    update(BookingOrder)
                    .where(BookingOrder.id == order_id, BookingOrder.status == CONFIRMED)
                    .values(exported=True)
                )
                db.commit()
                order = db.get(BookingOrder, order_id)
            except SQLAlchemyError as e:
                db.rollback()
                raise PersistenceFailed(f"could not flag order {order_id} as exported: {e}") from e
            if order is None:
                raise OrderNotFound(f"order {order_id} not found")
            return order

    @staticmethod
    def _commit(db: Session, message: str) -> None:
        try:
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise PersistenceFailed(f"{message}: {e}") from e
