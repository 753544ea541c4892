from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.core import get_logger
from app.domain.errors import PersistenceError
from app.domain.models import Inventory, Order, OrderItem, Product
from app.domain.orders import OrderLineDraft, OrderStatus, OrderSummary, ProductSnapshot

logger = get_logger(__name__)

class SqlAlchemyStore:
    """PlacementStore backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def transaction(self) -> Iterator["SqlAlchemyStore"]:
        try:
            yield self
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Store transaction rolled back", exc_info=True)
            raise PersistenceError(str(getattr(exc, "orig", None) or exc)) from exc
        except BaseException:
            self.db.rollback()
            raise

    def find_products_by_ids(self, ids: Iterable[str]) -> List[ProductSnapshot]:
        ids = list(ids)
        if not ids:
            return []
        rows = self.db.execute(
            select(Product.id, Product.name, Product.price_minor, Product.is_published)
            .where(Product.id.in_(ids))
        )
        return [
            ProductSnapshot(id=r.id, name=r.name, price_minor=r.price_minor, is_published=r.is_published)
            for r in rows
        ]

    def get_inventory(self, product_id: str, size: str) -> Optional[int]:
        return self.db.scalar(
            select(Inventory.stock).where(Inventory.product_id == product_id, Inventory.size == size)
        )

    def conditional_decrement(self, product_id: str, size: str, quantity: int) -> int:
        # Single UPDATE so the stock check and the write are atomic in the database
        result = self.db.execute(
            update(Inventory)
            .where(
                Inventory.product_id == product_id,
                Inventory.size == size,
                Inventory.stock >= quantity,
            )
            .values(stock=Inventory.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def create_order(
        self,
        user_id: str,
        items: List[OrderLineDraft],
        subtotal: int,
        total: int,
        currency: str,
    ) -> OrderSummary:
        order = Order(
            user_id=user_id,
            status=OrderStatus.PROCESSING.value,
            currency=currency,
            subtotal=subtotal,
            total=total,
        )
        for item in items:
            order.items.append(OrderItem(
                product_id=item.product_id,
                size=item.size,
                quantity=item.quantity,
                unit_price=item.unit_price,
            ))
        self.db.add(order)
        self.db.flush()  # assign id and defaults
        return OrderSummary(
            id=order.id,
            subtotal=order.subtotal,
            total=order.total,
            currency=order.currency,
            status=order.status,
            created_at=order.created_at,
        )
