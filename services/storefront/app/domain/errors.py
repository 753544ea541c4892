from typing import Iterable

from .orders import StockShortfall

class PlacementError(Exception):
    """Base for every way an order placement can fail."""
    code = "PLACEMENT_FAILED"
    status_code = 500

class EmptyCartError(PlacementError):
    code = "EMPTY_CART"
    status_code = 400

    def __init__(self, message: str = "Cart is empty"):
        super().__init__(message)

class OutOfStockError(PlacementError):
    code = "OUT_OF_STOCK"
    status_code = 409

    def __init__(self, details: Iterable[StockShortfall]):
        self.details = list(details)
        super().__init__(f"{len(self.details)} line(s) cannot be fulfilled")

class PersistenceError(PlacementError):
    code = "PERSISTENCE_ERROR"
    status_code = 500

    def __init__(self, message: str = "Failed to create order"):
        super().__init__(message)

class AuthError(Exception):
    def __init__(self, message: str, status_code: int = 401):
        self.status_code = status_code
        super().__init__(message)

class NotFoundError(Exception):
    pass

class ConflictError(Exception):
    pass

class ValidationError(Exception):
    pass
