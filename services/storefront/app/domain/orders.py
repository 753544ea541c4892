"""Value types exchanged between the order placement service and its store."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

class OrderStatus(str, Enum):
    PROCESSING = "processing"

@dataclass(frozen=True)
class OrderLine:
    """One sanitized cart line. Built only by ``sanitize_order_lines``."""
    product_id: str
    size: str
    quantity: int

@dataclass(frozen=True)
class ProductSnapshot:
    id: str
    name: str
    price_minor: int
    is_published: bool

@dataclass(frozen=True)
class OrderLineDraft:
    product_id: str
    size: str
    quantity: int
    unit_price: int

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity

@dataclass(frozen=True)
class StockShortfall:
    product_id: str
    size: str
    available: int
    reason: Optional[str] = None

@dataclass(frozen=True)
class OrderSummary:
    id: str
    subtotal: int
    total: int
    currency: str
    status: str
    created_at: datetime
