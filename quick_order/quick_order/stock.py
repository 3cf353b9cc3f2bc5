from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .models import OrderLine

HIGH = 10
MEDIUM = 3
LOW = 1

LARGE_ORDER_THRESHOLD = 20  # above this the customer is asked to get in touch


@dataclass(frozen=True)
class QuantityCheck:
    is_valid: bool
    message: str
    kind: str  # success, warning, error, info


def stock_level(stock: int) -> str:
    if stock > HIGH:
        return "available"
    if stock >= MEDIUM:
        return "limited"
    if stock >= LOW:
        return "low"
    return "out"


def validate_quantity(requested: int, available: int) -> QuantityCheck:
    if requested <= 0:
        return QuantityCheck(False, "Enter quantity", "info")
    if requested > LARGE_ORDER_THRESHOLD:
        return QuantityCheck(True, "Contact us for large orders", "info")
    if available == 0:
        return QuantityCheck(False, "Out of stock", "error")
    if requested > available:
        return QuantityCheck(False, f"Max available: {min(available, LARGE_ORDER_THRESHOLD)}", "warning")
    return QuantityCheck(True, "Available", "success")


def line_stock(line: OrderLine) -> Optional[int]:
    part = line.resolved_part
    if part is None:
        return None
    for offer in part.offers:
        if offer.supplier_id == line.selected_supplier_id:
            return offer.stock
    return part.stock
