import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.logging import setup_logging
from app.api.v1.api import api_router
from app.db.session import SessionLocal
from app.services.export_lock import ExportLock
from app.services.export_projector import EXPORT_COLUMNS, WIDE_COLUMNS
from app.services.order_lifecycle import OrderLifecycle
from app.services.order_repository import OrderRepository
from app.services.tabular_store import TabularStore

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME)

# CORS: restrict with CORS_ORIGINS in production; open by default
_origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()] if settings.CORS_ORIGINS else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=_origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


def build_services(session_factory=SessionLocal) -> OrderLifecycle:
    """Construct the shared repository, spreadsheet store, and lifecycle once per process."""
    export_path = settings.ORDERS_EXPORT_PATH
    store = TabularStore(
        export_path,
        columns=EXPORT_COLUMNS,
        wide_columns=WIDE_COLUMNS,
        sheet_name=settings.ORDERS_EXPORT_SHEET,
        lock=ExportLock(export_path + ".lock", timeout=settings.EXPORT_LOCK_TIMEOUT_SECONDS),
    )
    return OrderLifecycle(OrderRepository(session_factory), store)


_lifecycle = build_services()
app.state.order_lifecycle = _lifecycle
app.state.order_repository = _lifecycle.repository
app.state.tabular_store = _lifecycle.store
logger.info("Confirmed orders export to %s", settings.ORDERS_EXPORT_PATH)


@app.get("/")
def root():
    return {"message": f"{settings.APP_NAME} is running"}


@app.get("/health")
def health():
    return {"status": "ok"}
