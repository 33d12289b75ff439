from fastapi import APIRouter
from app.api.v1.routes.products import router as products_router
from app.api.v1.routes.booking_orders import router as booking_orders_router
from app.api.v1.routes.uploads import router as uploads_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(products_router)
api_router.include_router(booking_orders_router)
api_router.include_router(uploads_router)
