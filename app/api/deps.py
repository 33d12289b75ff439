from fastapi import Request
from app.services.order_lifecycle import OrderLifecycle
from app.services.order_repository import OrderRepository
from app.services.tabular_store import TabularStore

# Services are built once in app.main and kept on app.state.

def get_order_repository(request: Request) -> OrderRepository:
    return request.app.state.order_repository

def get_tabular_store(request: Request) -> TabularStore:
    return request.app.state.tabular_store

def get_order_lifecycle(request: Request) -> OrderLifecycle:
    return request.app.state.order_lifecycle
