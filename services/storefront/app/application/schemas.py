from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Optional

class CamelModel(BaseModel):
    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True

class UserRead(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    role: str
    created_at: datetime

class UserEnvelope(CamelModel):
    ok: bool = True
    user: UserRead

class OrderSummaryRead(CamelModel):
    id: str
    subtotal: int
    total: int
    currency: str
    status: str
    created_at: datetime

class OrderPlaced(CamelModel):
    ok: bool = True
    order: OrderSummaryRead

class OrderItemRead(CamelModel):
    product_id: str
    size: str
    quantity: int
    unit_price: int

class OrderHistoryEntry(OrderSummaryRead):
    items: list[OrderItemRead]

class OrderHistory(CamelModel):
    ok: bool = True
    orders: list[OrderHistoryEntry]

class ReceiptItem(BaseModel):
    name: str
    size: str
    qty: int
    price: int

class ReceiptRead(CamelModel):
    id: str
    created_at: datetime
    status: str
    subtotal: int
    total: int
    currency: str
    items: list[ReceiptItem]

class ReceiptEnvelope(CamelModel):
    ok: bool = True
    order: ReceiptRead

class InventoryRead(CamelModel):
    id: str
    product_id: str
    size: str
    stock: int
    updated_at: datetime

class ProductInventoryRead(CamelModel):
    id: str
    size: str
    stock: int
    updated_at: datetime

class ProductRead(CamelModel):
    id: str
    slug: Optional[str] = None
    name: str
    description: Optional[str] = None
    price_minor: int
    is_published: bool
    created_at: datetime
    updated_at: datetime
    inventory: list[ProductInventoryRead]

class ProductEnvelope(CamelModel):
    ok: bool = True
    product: ProductRead

class ProductList(CamelModel):
    ok: bool = True
    products: list[ProductRead]

class InventoryList(CamelModel):
    ok: bool = True
    items: list[InventoryRead]
