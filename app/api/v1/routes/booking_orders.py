from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from app.api.deps import get_order_lifecycle, get_order_repository, get_tabular_store
from app.core.errors import OrderServiceError
from app.schemas.booking_order import BookingOrderCreate, BookingOrderOut, StatusChangeIn, booking_order_out
from app.services.booking_order_service import place_booking_order
from app.services.order_lifecycle import OrderLifecycle
from app.services.order_repository import OrderRepository
from app.services.tabular_store import TabularStore

router = APIRouter(tags=["booking-orders"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

def _http_error(e: OrderServiceError) -> HTTPException:
    detail = e.to_detail()
    if e.order is not None:
        detail["order"] = booking_order_out(e.order).model_dump()
    return HTTPException(status_code=e.http_status, detail=detail)

@router.get("/bookingProducts", response_model=list[BookingOrderOut])
def list_booking_orders(repository: OrderRepository = Depends(get_order_repository)):
    try:
        return [booking_order_out(o) for o in repository.list_all()]
    except OrderServiceError as e:
        raise _http_error(e)

@router.post("/bookingProducts", response_model=BookingOrderOut)
def create_booking_order(body: BookingOrderCreate, repository: OrderRepository = Depends(get_order_repository)):
    try:
        return booking_order_out(place_booking_order(repository, body))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OrderServiceError as e:
        raise _http_error(e)

@router.patch("/bookingProducts/{order_id}", response_model=BookingOrderOut)
def change_booking_order_status(
    order_id: str,
    body: StatusChangeIn,
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
):
    try:
        order = lifecycle.set_status(order_id, body.status)
    except OrderServiceError as e:
        raise _http_error(e)
    return booking_order_out(order)

@router.delete("/bookingProducts/{order_id}")
def delete_booking_order(order_id: str, repository: OrderRepository = Depends(get_order_repository)):
    try:
        repository.delete(order_id)
    except OrderServiceError as e:
        raise _http_error(e)
    return {"ok": True, "message": "Order deleted successfully."}

@router.get("/download-orders")
def download_orders(store: TabularStore = Depends(get_tabular_store)):
    try:
        content = store.download()
    except OrderServiceError as e:
        raise _http_error(e)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{store.path.name}"'},
    )
