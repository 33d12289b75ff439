from pydantic import BaseModel
from typing import Optional

class BookingOrderCreate(BaseModel):
    name: str
    email: str  # plain str to allow .local and other dev domains
    address: str = ""
    number: str = ""
    pin: str = ""
    productName: str
    quantity: int = 1
    totalPrice: float = 0.0

class StatusChangeIn(BaseModel):
    status: str

class BookingOrderOut(BaseModel):
    id: str
    name: str
    email: str
    address: str
    number: str
    pin: str
    productName: str
    quantity: int
    totalPrice: float
    status: str
    exported: bool = False
    createdAt: Optional[str] = None

def booking_order_out(o) -> BookingOrderOut:
    return BookingOrderOut(
        id=o.id,
        name=o.name or "",
        email=o.email or "",
        address=o.address or "",
        number=o.contact_number or "",
        pin=o.pin or "",
        productName=o.product_name or "",
        quantity=o.quantity,
        totalPrice=o.total_price,
        status=o.status,
        exported=bool(o.exported),
        createdAt=o.created_at.isoformat() if o.created_at else None,
    )
