"""In-memory PlacementStore used to exercise the placement service directly."""

import threading
from contextlib import contextmanager
from datetime import datetime

from app.domain.errors import PersistenceError
from app.domain.models import new_id
from app.domain.orders import OrderStatus, OrderSummary, ProductSnapshot

class InMemoryStore:
    def __init__(self):
        self.lock = threading.Lock()
        self.products = {}
        self.stock = {}
        self.orders = []
        self.transactions_opened = 0
        # Called right before each conditional decrement, outside the lock
        self.before_decrement = None
        self.fail_on_create = False

    def add_product(self, product_id, price_minor, stock=None, name=None, is_published=True):
        self.products[product_id] = ProductSnapshot(
            id=product_id, name=name or product_id, price_minor=price_minor, is_published=is_published
        )
        for size, count in (stock or {}).items():
            self.stock[(product_id, size)] = count

    @contextmanager
    def transaction(self):
        with self.lock:
            self.transactions_opened += 1
        tx = _Transaction(self)
        try:
            yield tx
        except BaseException:
            tx.rollback()
            raise
        tx.commit()

class _Transaction:
    def __init__(self, store):
        self.store = store
        self.decrements = []
        self.pending_orders = []

    def find_products_by_ids(self, ids):
        return [self.store.products[i] for i in ids if i in self.store.products]

    def get_inventory(self, product_id, size):
        with self.store.lock:
            return self.store.stock.get((product_id, size))

    def conditional_decrement(self, product_id, size, quantity):
        if self.store.before_decrement is not None:
            self.store.before_decrement(product_id, size, quantity)
        key = (product_id, size)
        with self.store.lock:
            current = self.store.stock.get(key)
            if current is None or current < quantity:
                return 0
            self.store.stock[key] = current - quantity
            self.decrements.append((key, quantity))
            return 1

    def create_order(self, user_id, items, subtotal, total, currency):
        if self.store.fail_on_create:
            raise PersistenceError("connection lost")
        summary = OrderSummary(
            id=new_id(),
            subtotal=subtotal,
            total=total,
            currency=currency,
            status=OrderStatus.PROCESSING.value,
            created_at=datetime.utcnow(),
        )
        self.pending_orders.append({"summary": summary, "user_id": user_id, "items": list(items)})
        return summary

    def commit(self):
        with self.store.lock:
            self.store.orders.extend(self.pending_orders)

    def rollback(self):
        # Compensate only our own decrements so concurrent transactions are untouched
        with self.store.lock:
            for key, quantity in self.decrements:
                self.store.stock[key] += quantity
        self.decrements = []
        self.pending_orders = []
