"""
Shared fixtures: an isolated SQLite database and orders spreadsheet per test.

SQLite runs from a file under tmp_path (not :memory:) so worker threads in the
concurrency tests each get their own connection.
"""
import pytest
from sqlalchemy.orm import sessionmaker

from app.db.session import Base, make_engine
from app.models.booking_order import BookingOrder  # noqa: F401
from app.models.product import Product  # noqa: F401
from app.services.export_lock import ExportLock
from app.services.export_projector import EXPORT_COLUMNS, WIDE_COLUMNS
from app.services.order_lifecycle import OrderLifecycle
from app.services.order_repository import OrderRepository
from app.services.tabular_store import TabularStore


@pytest.fixture
def session_factory(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        engine.dispose()


@pytest.fixture
def export_path(tmp_path):
    return tmp_path / "exports" / "orders.xlsx"


@pytest.fixture
def store(export_path):
    lock = ExportLock(export_path.with_name("orders.xlsx.lock"), timeout=10)
    return TabularStore(export_path, columns=EXPORT_COLUMNS, wide_columns=WIDE_COLUMNS, sheet_name="Orders", lock=lock)


@pytest.fixture
def repository(session_factory):
    return OrderRepository(session_factory)


@pytest.fixture
def lifecycle(repository, store):
    return OrderLifecycle(repository, store)


@pytest.fixture
def make_order(repository):
    """Factory for pending orders; keyword arguments override the defaults."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "name": f"Customer {n}",
            "email": f"customer{n}@example.com",
            "address": f"{n} Main Rd",
            "contact_number": f"555-01{n:02d}",
            "pin": "560001",
            "product_name": "Herbal Tea",
            "quantity": 1,
            "total_price": 12.5,
        }
        fields.update(overrides)
        return repository.create(**fields)

    return _make
