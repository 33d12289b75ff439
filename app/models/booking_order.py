from sqlalchemy import String, Integer, Float, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from app.db.session import Base

PENDING = "pending"
CONFIRMED = "confirmed"
REJECTED = "rejected"

ORDER_STATUSES = (PENDING, CONFIRMED, REJECTED)
TERMINAL_STATUSES = (CONFIRMED, REJECTED)

class BookingOrder(Base):
    __tablename__ = "booking_orders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)

    name: Mapped[str] = mapped_column(String(200), default="")
    email: Mapped[str] = mapped_column(String(320), default="")
    address: Mapped[str] = mapped_column(String(500), default="")
    contact_number: Mapped[str] = mapped_column(String(40), default="")
    pin: Mapped[str] = mapped_column(String(20), default="")

    product_name: Mapped[str] = mapped_column(String(200), default="")
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    total_price: Mapped[float] = mapped_column(Float, default=0.0)

    status: Mapped[str] = mapped_column(String(20), default=PENDING, index=True)  # pending, confirmed, rejected
    exported: Mapped[bool] = mapped_column(Boolean, default=False)  # appended to the orders spreadsheet

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
