from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from app.core_settings import Settings, get_settings
from app.infrastructure.db import get_db
from app.infrastructure.session import SessionClaims
from app.application.order_service import OrderPlacementService, OrderService
from app.application.schemas import (
    OrderHistory,
    OrderPlaced,
    ReceiptEnvelope,
    ReceiptItem,
    ReceiptRead,
)
from app.domain.errors import OutOfStockError
from .deps import get_placement_service, require_user
from .errors import ApiError

router = APIRouter(prefix="/api/orders", tags=["orders"])

@router.post("", response_model=OrderPlaced, status_code=201)
def place_order(
    payload: Any = Body(None),
    claims: SessionClaims = Depends(require_user),
    service: OrderPlacementService = Depends(get_placement_service),
):
    """Place an order for the caller's cart, claiming stock atomically."""
    raw_items = payload.get("items") if isinstance(payload, dict) else None
    result = service.place_order(claims.user_id, raw_items)
    if result.ok:
        return {"ok": True, "order": result.order}

    error = result.error
    if isinstance(error, OutOfStockError):
        items = []
        for d in error.details:
            item = {"productId": d.product_id, "size": d.size, "available": d.available}
            if d.reason:
                item["reason"] = d.reason
            items.append(item)
        raise ApiError(409, code=error.code, items=items)
    raise ApiError(error.status_code, str(error))

@router.get("/my", response_model=OrderHistory)
@router.get("/me", response_model=OrderHistory, include_in_schema=False)
def my_orders(
    claims: SessionClaims = Depends(require_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    orders = OrderService(db).list_for_user(claims.user_id, limit=settings.ORDER_HISTORY_LIMIT)
    return {"ok": True, "orders": orders}

@router.get("/{order_id}", response_model=ReceiptEnvelope)
def get_receipt(
    order_id: str,
    claims: SessionClaims = Depends(require_user),
    db: Session = Depends(get_db),
):
    order_id = order_id.strip()
    if not order_id:
        raise ApiError(400, "Missing order id")
    order = OrderService(db).get_for_user(order_id, claims.user_id)
    if not order:
        raise ApiError(404, "Order not found")

    receipt = ReceiptRead(
        id=order.id,
        created_at=order.created_at,
        status=order.status,
        subtotal=order.subtotal,
        total=order.total,
        currency=order.currency,
        items=[
            ReceiptItem(
                name=item.product.name if item.product else "Item",
                size=item.size,
                qty=item.quantity,
                price=item.unit_price,
            )
            for item in order.items
        ],
    )
    return {"ok": True, "order": receipt}
