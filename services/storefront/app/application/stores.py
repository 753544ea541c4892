from typing import ContextManager, Iterable, List, Optional, Protocol

from app.domain.orders import OrderLineDraft, OrderSummary, ProductSnapshot

class PlacementStore(Protocol):
    """Everything the order placement service needs from the database.

    ``transaction()`` scopes one atomic unit of work: it commits when the
    block exits normally and rolls back on any exception. Failures of the
    backing store surface as ``PersistenceError``.
    """

    def transaction(self) -> ContextManager["PlacementStore"]:
        ...

    def find_products_by_ids(self, ids: Iterable[str]) -> List[ProductSnapshot]:
        ...

    def get_inventory(self, product_id: str, size: str) -> Optional[int]:
        ...

    def conditional_decrement(self, product_id: str, size: str, quantity: int) -> int:
        """Decrement stock iff it is still >= quantity; return rows affected."""
        ...

    def create_order(
        self,
        user_id: str,
        items: List[OrderLineDraft],
        subtotal: int,
        total: int,
        currency: str,
    ) -> OrderSummary:
        ...
