from app.models.booking_order import BookingOrder
from app.schemas.booking_order import BookingOrderCreate
from app.services.order_repository import OrderRepository

def place_booking_order(repository: OrderRepository, body: BookingOrderCreate) -> BookingOrder:
    if body.quantity < 1:
        raise ValueError("quantity must be >= 1")
    if body.totalPrice < 0:
        raise ValueError("totalPrice must be >= 0")

    return repository.create(
        name=body.name,
        email=body.email,
        address=body.address or "",
        contact_number=body.number or "",
        pin=body.pin or "",
        product_name=body.productName,
        quantity=int(body.quantity),
        total_price=float(body.totalPrice),
    )
