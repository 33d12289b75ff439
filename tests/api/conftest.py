"""
FastAPI test client wired to the per-test database and spreadsheet.
"""
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.db.session import get_db
from app.api.deps import get_order_lifecycle, get_order_repository, get_tabular_store


@pytest.fixture
def client(session_factory, repository, store, lifecycle):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_order_repository] = lambda: repository
    app.dependency_overrides[get_tabular_store] = lambda: store
    app.dependency_overrides[get_order_lifecycle] = lambda: lifecycle

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def order_payload():
    return {
        "name": "Ann",
        "email": "a@b.com",
        "address": "1 Rd",
        "number": "555",
        "pin": "000",
        "productName": "Widget",
        "quantity": 2,
        "totalPrice": 19.98,
    }
