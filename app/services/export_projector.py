"""Flat spreadsheet projection of a confirmed booking order."""
from app.models.booking_order import CONFIRMED

# (column, BookingOrder attribute), in spreadsheet order
EXPORT_FIELDS = (
    ("Name", "name"),
    ("Email", "email"),
    ("Address", "address"),
    ("Contact", "contact_number"),
    ("Pin", "pin"),
    ("ProductName", "product_name"),
    ("Quantity", "quantity"),
    ("TotalPrice", "total_price"),
)

EXPORT_COLUMNS = tuple(col for col, _ in EXPORT_FIELDS)
WIDE_COLUMNS = ("Name", "Email", "Address")


def project_order(order) -> dict:
    """Pure. Missing values become "" so a sparse order never blocks the export."""
    record = {}
    for col, attr in EXPORT_FIELDS:
        value = getattr(order, attr, None)
        record[col] = "" if value is None else value
    return record


def is_exportable(order) -> bool:
    return order.status == CONFIRMED and not order.exported
