from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from shared.core import get_logger
from app.domain.errors import EmptyCartError, OutOfStockError, PlacementError
from app.domain.models import Order, OrderItem
from app.domain.orders import (
    OrderLine,
    OrderLineDraft,
    OrderSummary,
    ProductSnapshot,
    StockShortfall,
)
from .order_lines import sanitize_order_lines
from .stores import PlacementStore

logger = get_logger(__name__)

@dataclass(frozen=True)
class PlacementResult:
    order: Optional[OrderSummary] = None
    error: Optional[PlacementError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

class OrderPlacementService:
    """Turns a raw cart into a persisted order without ever overselling.

    Stock is claimed with a conditional decrement per line inside one store
    transaction. Any shortfall aborts the transaction so lines that did fit
    are rolled back together with the rest.
    """

    def __init__(self, store: PlacementStore, currency: str = "JMD"):
        self.store = store
        self.currency = currency

    def place_order(self, user_id: str, raw_items: Any) -> PlacementResult:
        lines = sanitize_order_lines(raw_items)
        if not lines:
            return PlacementResult(error=EmptyCartError())

        try:
            with self.store.transaction() as tx:
                summary = self._place(tx, user_id, lines)
        except OutOfStockError as exc:
            logger.warning(
                "Order rejected: insufficient stock",
                extra={'extra_fields': {
                    'user_id': user_id,
                    'shortfalls': [asdict(d) for d in exc.details],
                }},
            )
            return PlacementResult(error=exc)
        except PlacementError as exc:
            logger.error(f"Order placement failed: {exc}", exc_info=True)
            return PlacementResult(error=exc)

        logger.info(
            f"Order placed: {summary.id}",
            extra={'extra_fields': {
                'user_id': user_id,
                'order_id': summary.id,
                'lines': len(lines),
                'total': summary.total,
            }},
        )
        return PlacementResult(order=summary)

    def _place(self, tx: PlacementStore, user_id: str, lines: List[OrderLine]) -> OrderSummary:
        product_ids = list(dict.fromkeys(line.product_id for line in lines))
        products: Dict[str, ProductSnapshot] = {
            p.id: p for p in tx.find_products_by_ids(product_ids)
        }

        shortfalls = []
        for line in lines:
            shortfall = self._claim(tx, line, products)
            if shortfall is not None:
                shortfalls.append(shortfall)

        if shortfalls:
            raise OutOfStockError(shortfalls)

        drafts = [
            OrderLineDraft(
                product_id=line.product_id,
                size=line.size,
                quantity=line.quantity,
                unit_price=products[line.product_id].price_minor,
            )
            for line in lines
        ]
        subtotal = sum(d.line_total for d in drafts)
        total = subtotal
        return tx.create_order(user_id, drafts, subtotal, total, self.currency)

    def _claim(
        self, tx: PlacementStore, line: OrderLine, products: Dict[str, ProductSnapshot]
    ) -> Optional[StockShortfall]:
        if line.product_id not in products:
            return StockShortfall(line.product_id, line.size, 0, reason="NOT_FOUND")

        available = tx.get_inventory(line.product_id, line.size) or 0
        if available < line.quantity:
            return StockShortfall(line.product_id, line.size, available)

        if tx.conditional_decrement(line.product_id, line.size, line.quantity) != 1:
            # Lost the race to a concurrent order; report what is left now
            fresh = tx.get_inventory(line.product_id, line.size) or 0
            return StockShortfall(line.product_id, line.size, fresh)
        return None

class OrderService:
    def __init__(self, db: Session):
        self.db = db

    def list_for_user(self, user_id: str, limit: int = 50) -> List[Order]:
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .options(selectinload(Order.items))
            .order_by(Order.created_at.desc())
            .limit(limit)
        )
        return list(self.db.scalars(stmt))

    def get_for_user(self, order_id: str, user_id: str) -> Optional[Order]:
        """Fetch an order only if it belongs to ``user_id``."""
        stmt = (
            select(Order)
            .where(Order.id == order_id, Order.user_id == user_id)
            .options(selectinload(Order.items).selectinload(OrderItem.product))
        )
        return self.db.scalars(stmt).first()
